# coding=utf-8

from py_mysql_probe.protocol.packet import preview_hex


class ProbeOutcome(object):
    """
    Terminal result of one probe
    """
    __slots__ = ()

    ok = False
    mysql = False

    def toRecord(self, verbose=False):
        raise NotImplementedError('toRecord')

    def __eq__(self, other):
        return type(self) is type(other) and self.toRecord(True) == other.toRecord(True)

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.toRecord(True))


class DialFailure(ProbeOutcome):
    __slots__ = ('error',)

    def __init__(self, error):
        self.error = str(error)

    def toRecord(self, verbose=False):
        return {'ok': False, 'mysql': False, 'error': 'dial failed: %s' % self.error}


class ReadFailure(ProbeOutcome):
    __slots__ = ('error',)

    def __init__(self, error):
        self.error = str(error)

    def toRecord(self, verbose=False):
        return {'ok': False, 'mysql': False, 'error': 'read failed: %s' % self.error}


class NotMySQL(ProbeOutcome):
    __slots__ = ('reason', 'stage', 'preview')

    ok = True

    def __init__(self, reason='', stage=None, preview=b''):
        self.reason = str(reason)
        self.stage = stage
        self.preview = bytes(preview)

    def toRecord(self, verbose=False):
        record = {'ok': True, 'mysql': False}
        if verbose:
            record['reason'] = self.reason
            record['first_bytes_hex'] = preview_hex(self.preview)
        return record


class Detected(ProbeOutcome):
    __slots__ = ('handshake',)

    ok = True
    mysql = True

    def __init__(self, handshake):
        self.handshake = handshake

    def toRecord(self, verbose=False):
        fields = self.handshake.toDict()
        if not verbose:
            return {
                'ok': True,
                'mysql': True,
                'server_version': fields['server_version'],
                'protocol': fields['protocol'],
                'connection_id': fields['connection_id'],
            }
        record = {'ok': True, 'mysql': True}
        for key in ('protocol', 'server_version', 'connection_id', 'capability_flags',
                    'character_set', 'status_flags', 'auth_plugin', 'preview_hex'):
            record[key] = fields[key]
        return record


def classify(dial_error=None, read_error=None, packet=None, handshake=None, protocol_error=None):
    """
    Picks the outcome from what the lower layers produced. The first
    failing layer decides.
    """
    if dial_error is not None:
        return DialFailure(dial_error)
    if read_error is not None or packet is None:
        return ReadFailure(read_error if read_error is not None else 'no data from server')
    if protocol_error is not None or handshake is None:
        return NotMySQL(reason=protocol_error if protocol_error is not None else 'not decoded',
                        stage=getattr(protocol_error, 'stage', None),
                        preview=packet.preview())
    return Detected(handshake)
