# coding=utf-8
import logging
import socket

from py_mysql_probe.outcome import classify
from py_mysql_probe.packet.handshake import Handshake
from py_mysql_probe.protocol.errors import DialError, ProtocolError, ReadError
from py_mysql_probe.transport import read_first_packet

logger = logging.getLogger('py_mysql_probe')


def get_conn(host, port, timeout):
    try:
        return socket.create_connection((host, port), timeout=timeout)
    except (OSError, UnicodeError) as e:
        raise DialError(str(e)) from e


def inspect(conn, timeout):
    """
    Reads and decodes the greeting on an open connection
    """
    try:
        packet = read_first_packet(conn, timeout)
    except ReadError as e:
        logger.info("No greeting: %s", e)
        return classify(read_error=e)

    try:
        handshake = Handshake.loadFromPacket(packet)
    except ProtocolError as e:
        logger.info("Not a MySQL greeting (%s): %s", e.stage, e)
        return classify(packet=packet, protocol_error=e)

    logger.info("MySQL %s, protocol %d, connection id %d%s", handshake.serverVersion,
                handshake.protocolVersion, handshake.connectionId,
                handshake.partial and " (partial greeting)" or "")
    logger.debug("Greeting details: %s", handshake.describe())
    return classify(packet=packet, handshake=handshake)


def probe(host, port, timeout):
    """
    Connects to host:port, reads one packet and classifies it.

    Never sends anything to the server. The connection is closed
    whatever the outcome.
    """
    logger.info("Probing %s:%s (timeout %ss)", host, port, timeout)
    try:
        conn = get_conn(host, port, timeout)
    except DialError as e:
        logger.info("Dial failed: %s", e)
        return classify(dial_error=e)

    try:
        return inspect(conn, timeout)
    finally:
        conn.close()
