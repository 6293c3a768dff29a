"""Exceptions raised by the luxacast client."""


class InvalidConfigurationError(ValueError):
    """Raised at construction time when reconnect settings are inconsistent."""


class InvalidPacketError(ValueError):
    """Raised when an incoming frame is not a valid luxacast packet."""

    def __init__(self, message: str, raw: object = None):
        super().__init__(message)
        self.raw = raw
