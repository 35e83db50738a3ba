# coding=utf-8
import logging
import time

from py_mysql_probe.protocol import Flags
from py_mysql_probe.protocol.errors import ReadError
from py_mysql_probe.protocol.packet import RawPacket, getSize, getSequenceId, dump

logger = logging.getLogger('py_mysql_probe')


def _recv_with_deadline(sock, size, timeout):
    """
    Arms a fresh timeout and performs a single recv
    """
    sock.settimeout(timeout)
    return sock.recv(size)


def _read_header(sock, timeout):
    header = bytearray()
    deadline = time.monotonic() + timeout
    while len(header) < Flags.PACKET_HEADER_LENGTH:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ReadError('read header: timed out')
        try:
            chunk = _recv_with_deadline(sock, Flags.PACKET_HEADER_LENGTH - len(header), remaining)
        except OSError as e:
            raise ReadError('read header: %s' % e) from e
        if not chunk:
            raise ReadError('read header: connection closed after %d of %d bytes' % (
                len(header), Flags.PACKET_HEADER_LENGTH))
        header.extend(chunk)
    return bytes(header)


def read_first_packet(sock, timeout):
    """
    Reads the first packet (header + payload) the server sends.

    Only a failed header read raises ReadError. Once the header is in, a
    timeout, error or EOF on the payload ends the read and the packet is
    returned with whatever payload arrived. The timeout applies to each
    recv on its own, not to the payload as a whole.
    """
    header = _read_header(sock, timeout)
    size = getSize(header)
    logger.debug("Greeting header: length=%d sequenceId=%d", size, getSequenceId(header))

    if size <= 0 or size > Flags.MAX_GREETING_LENGTH:
        logger.warning("Declared payload length %d out of range, keeping header only", size)
        return RawPacket(header)

    payload = bytearray()
    while len(payload) < size:
        try:
            chunk = _recv_with_deadline(sock, size - len(payload), timeout)
        except OSError as e:
            logger.warning("Payload read stopped after %d of %d bytes: %s", len(payload), size, e)
            break
        if not chunk:
            logger.warning("Connection closed after %d of %d payload bytes", len(payload), size)
            break
        payload.extend(chunk)

    packet = RawPacket(header, payload)
    dump(packet.toBytes())
    return packet
