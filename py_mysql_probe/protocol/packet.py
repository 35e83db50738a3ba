# coding=utf-8

import logging

from py_mysql_probe.protocol import Flags
from py_mysql_probe.protocol.proto import Proto

logger = logging.getLogger('py_mysql_probe')


class Packet(object):
    """
    Basic class for all mysql proto classes to inherit from
    """
    __slots__ = ('sequenceId',)

    def __init__(self):
        self.sequenceId = 0

    def getPayload(self):
        """
        Return the payload as a bytearray
        """
        raise NotImplementedError('getPayload')

    def toPacket(self):
        """
        Convert a Packet object to a byte array stream
        """
        payload = self.getPayload()

        packet = bytearray()
        packet.extend(Proto.build_fixed_int(3, len(payload)))
        packet.extend(Proto.build_fixed_int(1, self.sequenceId))
        packet.extend(payload)

        return packet


class RawPacket(object):
    """
    One framed packet as read off the wire: a 4 byte header and whatever
    part of the declared payload arrived
    """
    __slots__ = ('header', 'payload')

    def __init__(self, header, payload=b''):
        self.header = bytes(header)
        self.payload = bytes(payload)

    @property
    def payloadLength(self):
        return getSize(self.header)

    @property
    def sequenceId(self):
        return getSequenceId(self.header)

    @property
    def truncated(self):
        return len(self.payload) < self.payloadLength

    def toBytes(self):
        return self.header + self.payload

    def preview(self):
        return self.toBytes()[:Flags.PREVIEW_LENGTH]

    def __len__(self):
        return len(self.header) + len(self.payload)

    def __repr__(self):
        return 'RawPacket(length=%d, sequenceId=%d, received=%d)' % (
            self.payloadLength, self.sequenceId, len(self.payload))


def hex_ba(string):
    """
    Turn a space separated hex dump into bytes

    >>> hex_ba('0a 38 2e 34')
    bytearray(b'\\n8.4')
    """
    return bytearray.fromhex(string)


def preview_hex(packet):
    """
    Hex of the first PREVIEW_LENGTH bytes of a packet

    >>> preview_hex(b'\\x49\\x00\\x00\\x00\\x0a')
    '490000000a'
    """
    return bytes(packet[:Flags.PREVIEW_LENGTH]).hex()


def getSize(packet):
    """
    Returns a specified packet size
    """
    return Proto(packet).get_fixed_int(3)


def getSequenceId(packet):
    """
    Returns the Sequence ID for the given packet
    """
    return Proto(packet, 3).get_fixed_int(1)


def dump(packet):
    """
    Dumps a packet to the logger
    """
    offset = 0
    if not logger.isEnabledFor(logging.DEBUG):
        return

    dump = 'Packet Dump\n'

    while offset < len(packet):
        dump += hex(offset)[2:].zfill(8).upper()
        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                dump += '   '
            else:
                dump += hex(packet[offset + x])[2:].upper().zfill(2)
                dump += ' '
                if x == 7:
                    dump += ' '

        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                break
            if packet[offset + x] < 32 or packet[offset + x] > 126:
                dump += '.'
            else:
                dump += chr(packet[offset + x])

            if x == 7:
                dump += ' '

        dump += '\n'
        offset += 16
    logger.debug(dump)
