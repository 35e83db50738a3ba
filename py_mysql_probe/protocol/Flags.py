#!/usr/bin/env python
# coding=utf-8


# Handshake greeting
PROTOCOL_VERSION_10                     = 0x0a
PACKET_HEADER_LENGTH                    = 4
# Declared payload lengths outside (0, MAX_GREETING_LENGTH] are not read
MAX_GREETING_LENGTH                     = 100000
PREVIEW_LENGTH                          = 64
AUTH_PLUGIN_DATA_PART_1_LENGTH          = 8
RESERVED_LENGTH                         = 10

SERVER_STATUS_IN_TRANS                  = 0x0001
SERVER_STATUS_AUTOCOMMIT                = 0x0002
SERVER_MORE_RESULTS_EXISTS              = 0x0008
SERVER_STATUS_NO_GOOD_INDEX_USED        = 0x0010
SERVER_STATUS_NO_INDEX_USED             = 0x0020
SERVER_STATUS_CURSOR_EXISTS             = 0x0040
SERVER_STATUS_LAST_ROW_SENT             = 0x0080
SERVER_STATUS_DB_DROPPED                = 0x0100
SERVER_STATUS_NO_BACKSLASH_ESCAPES      = 0x0200
SERVER_STATUS_METADATA_CHANGED          = 0x0400
SERVER_QUERY_WAS_SLOW                   = 0x0800
SERVER_PS_OUT_PARAMS                    = 0x1000
SERVER_STATUS_IN_TRANS_READONLY         = 0x2000
SERVER_SESSION_STATE_CHANGED            = 0x4000

CLIENT_LONG_PASSWORD                    = 0x0001
CLIENT_FOUND_ROWS                       = 0x0002
CLIENT_LONG_FLAG                        = 0x0004
CLIENT_CONNECT_WITH_DB                  = 0x0008
CLIENT_NO_SCHEMA                        = 0x0010
CLIENT_COMPRESS                         = 0x0020
CLIENT_ODBC                             = 0x0040
CLIENT_LOCAL_FILES                      = 0x0080
CLIENT_IGNORE_SPACE                     = 0x0100
CLIENT_PROTOCOL_41                      = 0x0200
CLIENT_INTERACTIVE                      = 0x0400
CLIENT_SSL                              = 0x0800
CLIENT_IGNORE_SIGPIPE                   = 0x1000
CLIENT_TRANSACTIONS                     = 0x2000
CLIENT_RESERVED                         = 0x4000
CLIENT_SECURE_CONNECTION                = 0x8000
CLIENT_MULTI_STATEMENTS                 = 0x00010000
CLIENT_MULTI_RESULTS                    = 0x00020000
CLIENT_PS_MULTI_RESULTS                 = 0x00040000
CLIENT_PLUGIN_AUTH                      = 0x00080000
CLIENT_CONNECT_ATTRS                    = 1 << 20
CLIENT_PLUGIN_AUTH_LENENC_CLIENT_DATA   = 1 << 21
CLIENT_CAN_HANDLE_EXPIRED_PASSWORDS     = 1 << 22
CLIENT_SESSION_TRACK                    = 1 << 23
CLIENT_DEPRECATE_EOF                    = 1 << 24
CLIENT_OPTIONAL_RESULTSET_METADATA      = 1 << 25
CLIENT_ZSTD_COMPRESSION_ALGORITHM       = 1 << 26
CLIENT_QUERY_ATTRIBUTES                 = 1 << 27
CLIENT_MULTI_FACTOR_AUTHENTICATION      = 1 << 28
CLIENT_CAPABILITY_EXTENSION             = 1 << 29
CLIENT_SSL_VERIFY_SERVER_CERT           = 0x40000000
CLIENT_REMEMBER_OPTIONS                 = 0x80000000

local_vars = locals()


def _flag_names(prefix, value):
    names = []
    for _var, flag in list(local_vars.items()):
        if not _var.startswith(prefix) or not isinstance(flag, int):
            continue
        if flag and (value & flag) == flag:
            names.append(_var)
    return sorted(names, key=lambda k: local_vars[k])


def capability_names(val):
    """
    Names of the CLIENT_* bits set in a capability bitmask

    >>> capability_names(CLIENT_PROTOCOL_41 | CLIENT_PLUGIN_AUTH)
    ['CLIENT_PROTOCOL_41', 'CLIENT_PLUGIN_AUTH']
    """
    return _flag_names("CLIENT_", val)


def status_names(val):
    """
    Names of the SERVER_* bits set in a status bitmask

    >>> status_names(SERVER_STATUS_AUTOCOMMIT)
    ['SERVER_STATUS_AUTOCOMMIT']
    """
    return _flag_names("SERVER_", val)
