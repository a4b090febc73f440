"""
Exceptions raised inside the LiveLink bridge.

Decode and transport errors are handled by the listener thread and never
reach the caller; only construction-time configuration errors do.
"""


class LiveLinkError(Exception):
    """Base class for all bridge errors."""


class DecodeError(LiveLinkError):
    """The message is not a well-formed skeleton/pose object."""


class ShapeMismatchError(DecodeError):
    """An array length disagrees with the skeleton it should describe."""


class TransportError(LiveLinkError):
    """Binding, receiving or requesting failed."""


class EndpointParseError(ValueError):
    """A connection string could not be parsed as host:port."""
