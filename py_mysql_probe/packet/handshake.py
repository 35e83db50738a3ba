# coding=utf-8

import logging

from pymysql import charset

from py_mysql_probe.protocol import Flags
from py_mysql_probe.protocol.errors import InsufficientData, ProtocolError
from py_mysql_probe.protocol.packet import Packet, RawPacket, getSize, getSequenceId
from py_mysql_probe.protocol.proto import Proto

logger = logging.getLogger('py_mysql_probe')

'''
https://dev.mysql.com/doc/dev/mysql-server/latest/page_protocol_connection_phase_packets_protocol_handshake_v10.html
1              [0a] protocol version
string[NUL]    server version
4              connection id
string[8]      auth-plugin-data-part-1
1              [00] filler
2              capability flags (lower 2 bytes)
  if more data in the packet:
1              character set
2              status flags
2              capability flags (upper 2 bytes)
1              length of auth-plugin-data (or [00])
string[10]     reserved (all [00])
string[$len]   auth-plugin-data-part-2 ($len=MAX(13, length of auth-plugin-data - 8))
string[NUL]    auth-plugin name (if CLIENT_PLUGIN_AUTH)
'''


class Handshake(Packet):
    __slots__ = ('protocolVersion', 'serverVersion', 'connectionId',
                 'challenge1', 'capabilityFlags', 'characterSet',
                 'statusFlags', 'challenge2', 'authPluginDataLength',
                 'authPluginName', 'rawPreview', 'partial',
                 ) + Packet.__slots__

    def __init__(self):
        super(Handshake, self).__init__()
        self.protocolVersion = Flags.PROTOCOL_VERSION_10
        self.serverVersion = ''
        self.connectionId = 0
        self.challenge1 = b''
        self.capabilityFlags = 0
        self.characterSet = 0
        self.statusFlags = 0
        self.challenge2 = b''
        self.authPluginDataLength = 0
        self.authPluginName = ''
        self.rawPreview = b''
        self.partial = False

    def setCapabilityFlag(self, flag):
        self.capabilityFlags |= flag

    def removeCapabilityFlag(self, flag):
        self.capabilityFlags &= ~flag

    def hasCapabilityFlag(self, flag):
        return ((self.capabilityFlags & flag) == flag)

    def hasStatusFlag(self, flag):
        return ((self.statusFlags & flag) == flag)

    def getPayload(self):
        payload = bytearray()

        payload.extend(Proto.build_fixed_int(1, self.protocolVersion))
        payload.extend(Proto.build_null_str(self.serverVersion))
        payload.extend(Proto.build_fixed_int(4, self.connectionId))
        payload.extend(Proto.build_fixed_str(8, self.challenge1))
        payload.extend(Proto.build_filler(1))
        payload.extend(Proto.build_fixed_int(2, self.capabilityFlags & 0xffff))
        payload.extend(Proto.build_fixed_int(1, self.characterSet))
        payload.extend(Proto.build_fixed_int(2, self.statusFlags))
        payload.extend(Proto.build_fixed_int(2, self.capabilityFlags >> 16))

        if self.hasCapabilityFlag(Flags.CLIENT_PLUGIN_AUTH):
            payload.extend(Proto.build_fixed_int(1, self.authPluginDataLength))
        else:
            payload.extend(Proto.build_filler(1))

        payload.extend(Proto.build_filler(Flags.RESERVED_LENGTH))

        if self.hasCapabilityFlag(Flags.CLIENT_SECURE_CONNECTION):
            payload.extend(Proto.build_fixed_str(
                max(13, self.authPluginDataLength - 8),
                self.challenge2))
        if self.hasCapabilityFlag(Flags.CLIENT_PLUGIN_AUTH):
            payload.extend(Proto.build_null_str(self.authPluginName))

        return payload

    def toDict(self):
        return {
            'protocol': self.protocolVersion,
            'server_version': self.serverVersion,
            'connection_id': self.connectionId,
            'capability_flags': self.capabilityFlags,
            'character_set': self.characterSet,
            'status_flags': self.statusFlags,
            'auth_plugin': self.authPluginName,
            'preview_hex': bytes(self.rawPreview).hex(),
        }

    def describe(self):
        """
        Readable names for the numeric fields, for logging
        """
        try:
            cs = charset.charset_by_id(self.characterSet)
            collation = cs.collation
            charset_name = cs.name
        except KeyError:
            collation = charset_name = None
        return {
            'capabilities': Flags.capability_names(self.capabilityFlags),
            'status': Flags.status_names(self.statusFlags),
            'charset': charset_name,
            'collation': collation,
        }

    def __eq__(self, other):
        if not isinstance(other, Handshake):
            return NotImplemented
        return (self.sequenceId, self.partial, self.toDict()) == (
            other.sequenceId, other.partial, other.toDict())

    def __repr__(self):
        return 'Handshake(%r, partial=%r)' % (self.toDict(), self.partial)

    @staticmethod
    def loadFromPacket(packet):
        if isinstance(packet, RawPacket):
            packet = packet.toBytes()
        packet = bytes(packet)

        if len(packet) < Flags.PACKET_HEADER_LENGTH:
            raise ProtocolError('header', 'short read (no packet header)')
        size = getSize(packet)
        if len(packet) < Flags.PACKET_HEADER_LENGTH + size:
            raise ProtocolError('payload', 'short read (payload incomplete)')

        obj = Handshake()
        obj.sequenceId = getSequenceId(packet)
        obj.rawPreview = packet[:Flags.PREVIEW_LENGTH]
        proto = Proto(packet[Flags.PACKET_HEADER_LENGTH:Flags.PACKET_HEADER_LENGTH + size])

        try:
            obj.protocolVersion = proto.get_fixed_int(1)
        except InsufficientData:
            raise ProtocolError('protocol_version', 'payload too small for protocol version')
        try:
            obj.serverVersion = proto.get_null_str()
        except InsufficientData as e:
            raise ProtocolError('server_version', 'server version parse error: %s' % e)
        try:
            obj.connectionId = proto.get_fixed_int(4)
        except InsufficientData:
            raise ProtocolError('connection_id', 'payload too small for connection id')

        # Everything past the connection id is optional
        try:
            obj._loadTrailer(proto)
        except InsufficientData as e:
            logger.debug("Greeting ends early at offset %d: %s", proto.offset, e)
            obj.partial = True

        return obj

    def _loadTrailer(self, proto):
        self.challenge1 = proto.get_fixed_bytes(Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH)
        proto.get_filler(1)
        self.capabilityFlags = proto.get_fixed_int(2)

        # character set, status flags and the upper capability word come as a unit
        if not proto.has_remaining_data(5):
            self.partial = True
            return
        self.characterSet = proto.get_fixed_int(1)
        self.statusFlags = proto.get_fixed_int(2)
        self.setCapabilityFlag(proto.get_fixed_int(2) << 16)

        if self.hasCapabilityFlag(Flags.CLIENT_PLUGIN_AUTH):
            self.authPluginDataLength = proto.get_fixed_int(1)
        elif proto.has_remaining_data():
            self.authPluginDataLength = proto.get_fixed_int(1)

        if proto.has_remaining_data(Flags.RESERVED_LENGTH):
            proto.get_filler(Flags.RESERVED_LENGTH)

        if self.authPluginDataLength > 8:
            size = min(self.authPluginDataLength - 8, proto.remaining())
            self.challenge2 = proto.get_fixed_bytes(size)

        if self.hasCapabilityFlag(Flags.CLIENT_PLUGIN_AUTH) and proto.has_remaining_data():
            self.authPluginName = proto.get_null_str()
