from py_mysql_probe.packet.handshake import Handshake
from py_mysql_probe.protocol import Flags
from py_mysql_probe.protocol.proto import Proto

# Greeting of a MySQL 8.4.6 server, built byte by byte
MYSQL_846_PAYLOAD = (
    b'\x0a'                                 # protocol version
    b'8.4.6\x00'                            # server version
    b'\x0a\x00\x00\x00'                     # connection id
    b'\x3a\x1f\x5c\x6b\x2d\x7e\x11\x40'     # auth-plugin-data part 1
    b'\x00'                                 # filler
    b'\xff\xff'                             # capability flags, lower
    b'\xff'                                 # character set
    b'\x02\x00'                             # status flags
    b'\xff\xdf'                             # capability flags, upper
    b'\x15'                                 # auth-plugin-data length
    + b'\x00' * 10 +                        # reserved
    b'\x52\x0e\x63\x2a\x4f\x18\x3c\x55\x21\x6d\x07\x29\x00'
    b'caching_sha2_password\x00'
)
MYSQL_846_PACKET = b'\x49\x00\x00\x00' + MYSQL_846_PAYLOAD

MYSQL_846_RECORD = ('{"ok":true,"mysql":true,"protocol":10,"server_version":"8.4.6",'
                    '"connection_id":10,"capability_flags":3758096383,"character_set":255,'
                    '"status_flags":2,"auth_plugin":"caching_sha2_password"}')


def frame(payload, sequence_id=0):
    """Put a packet header in front of payload"""
    return bytes(Proto.build_fixed_int(3, len(payload)) + Proto.build_fixed_int(1, sequence_id) + payload)


def make_greeting(server_version='5.7.44-log', connection_id=1234,
                  capability_flags=Flags.CLIENT_PROTOCOL_41 | Flags.CLIENT_SECURE_CONNECTION | Flags.CLIENT_PLUGIN_AUTH,
                  character_set=33, status_flags=Flags.SERVER_STATUS_AUTOCOMMIT,
                  auth_plugin_name='mysql_native_password', auth_plugin_data_length=21):
    greeting = Handshake()
    greeting.serverVersion = server_version
    greeting.connectionId = connection_id
    greeting.challenge1 = b'abcdefgh'
    greeting.capabilityFlags = capability_flags
    greeting.characterSet = character_set
    greeting.statusFlags = status_flags
    greeting.challenge2 = b'ijklmnopqrst'
    greeting.authPluginDataLength = auth_plugin_data_length
    greeting.authPluginName = auth_plugin_name
    return bytes(greeting.toPacket())


class FakeSocket(object):
    """
    Plays back a script of byte chunks and exceptions, one item per recv
    """

    def __init__(self, script):
        self.script = list(script)
        self.timeouts = []
        self.reads = 0
        self.closed = False

    def settimeout(self, timeout):
        self.timeouts.append(timeout)

    def recv(self, size):
        self.reads += 1
        if not self.script:
            return b''
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        if len(item) > size:
            self.script.insert(0, item[size:])
            item = item[:size]
        return item

    def close(self):
        self.closed = True
