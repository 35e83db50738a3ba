# coding=utf-8
import struct

from py_mysql_probe.protocol.errors import InsufficientData

# Text fields map byte for byte onto code points
TEXT_ENCODING = 'latin-1'


class Proto(object):
    """
    Read cursor over a packet.

    Every get_* call either consumes bytes and advances ``offset`` or
    raises InsufficientData and leaves ``offset`` untouched.
    """
    __slots__ = ('packet', 'offset')

    def __init__(self, packet, offset=0):
        self.packet = packet
        self.offset = offset

    def remaining(self):
        return max(0, len(self.packet) - self.offset)

    def has_remaining_data(self, size=1):
        return self.remaining() >= size

    @staticmethod
    def build_fixed_int(size, value):
        """
        Build a MySQL Fixed Int

        >>> Proto.build_fixed_int(1, 0)
        bytearray(b'\\x00')

        >>> Proto.build_fixed_int(2, 0xFFFF)
        bytearray(b'\\xff\\xff')

        >>> Proto.build_fixed_int(3, 0x49)
        bytearray(b'I\\x00\\x00')

        >>> Proto.build_fixed_int(4, 10)
        bytearray(b'\\n\\x00\\x00\\x00')
        """
        packet = bytearray(size)
        for i in range(size):
            packet[i] = (value >> (8 * i)) & 0xFF
        return packet

    @staticmethod
    def build_fixed_str(size, value):
        """
        Build a MySQL Fixed String

        >>> Proto.build_fixed_str(2, 'ab')
        bytearray(b'ab')

        Zero pad if size > sizeOf(value):
        >>> Proto.build_fixed_str(3, b'ab')
        bytearray(b'ab\\x00')
        """
        if isinstance(value, str):
            value = value.encode(TEXT_ENCODING)
        packet = bytearray(size)
        packet[:len(value)] = value[:size]
        return packet

    @staticmethod
    def build_null_str(value):
        """
        Build a MySQL Null String

        >>> Proto.build_null_str('ab')
        bytearray(b'ab\\x00')

        Empty string is just a null:
        >>> Proto.build_null_str('')
        bytearray(b'\\x00')
        """
        return Proto.build_fixed_str(len(value) + 1, value)

    @staticmethod
    def build_filler(size, fill=0x00):
        """
        Build a set of filler

        >>> Proto.build_filler(2, 0xff)
        bytearray(b'\\xff\\xff')
        """
        return bytearray([fill]) * size

    def _take(self, size):
        if size < 0 or self.remaining() < size:
            raise InsufficientData('need %d bytes at offset %d, %d left' % (
                size, self.offset, self.remaining()))
        value = self.packet[self.offset:self.offset + size]
        self.offset += size
        return value

    def get_fixed_int(self, size):
        """
        Extract a little-endian fixed int from the current packet position

        >>> packet = Proto(Proto.build_fixed_int(4, 0xDFFF0000))
        >>> packet.get_fixed_int(4) == 0xDFFF0000
        True

        >>> Proto(bytearray(1)).get_fixed_int(2)
        Traceback (most recent call last):
        ...
        py_mysql_probe.protocol.errors.InsufficientData: need 2 bytes at offset 0, 1 left
        """
        chunk = bytes(self._take(size))
        if size == 1:
            return chunk[0]
        if size == 2:
            return struct.unpack('<H', chunk)[0]
        if size == 4:
            return struct.unpack('<I', chunk)[0]
        return int.from_bytes(chunk, 'little')

    def get_filler(self, size):
        """
        Skip over packet filler

        >>> packet = Proto(bytearray(5))
        >>> packet.get_filler(2)
        >>> packet.offset
        2
        """
        self._take(size)

    def get_fixed_bytes(self, size):
        return bytes(self._take(size))

    def get_fixed_str(self, size):
        """
        Extract a fixed length string from the current packet position

        >>> target = "The brown dog did stuff"
        >>> pckt = Proto.build_fixed_str(len(target), target)
        >>> Proto(pckt).get_fixed_str(len(pckt))
        'The brown dog did stuff'
        """
        return self.get_fixed_bytes(size).decode(TEXT_ENCODING)

    def get_null_str(self):
        """
        Extract a null string from the current packet position

        >>> target = "8.4.6"
        >>> pckt = Proto.build_null_str(target)
        >>> packet = Proto(pckt)
        >>> packet.get_null_str()
        '8.4.6'
        >>> packet.offset
        6

        >>> Proto(bytearray(b'8.4')).get_null_str()
        Traceback (most recent call last):
        ...
        py_mysql_probe.protocol.errors.InsufficientData: unterminated string
        """
        end = bytes(self.packet).find(b'\x00', self.offset)
        if end < 0:
            raise InsufficientData('unterminated string')
        value = bytes(self.packet[self.offset:end]).decode(TEXT_ENCODING)
        self.offset = end + 1
        return value


if __name__ == "__main__":
    import doctest
    doctest.testmod()
