# coding=utf-8


class ProbeError(Exception):
    pass


class DialError(ProbeError):
    pass


class ReadError(ProbeError):
    pass


class InsufficientData(ProbeError):
    """
    Raised by Proto when a read runs past the end of the payload
    """
    pass


class ProtocolError(ProbeError):
    """
    The payload cannot hold one of the fields a greeting must carry.

    ``stage`` names the field that could not be extracted.
    """

    def __init__(self, stage, message):
        super(ProtocolError, self).__init__(message)
        self.stage = stage
