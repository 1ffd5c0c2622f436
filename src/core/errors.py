"""
Error taxonomy for the echo endpoint and transfer probe.

Each error also derives from the matching builtin so callers can catch either
the specific type or the generic ``ConnectionError`` / ``TimeoutError`` /
``OSError``.
"""


class TransferError(Exception):
    """Base class for endpoint and probe failures."""


class BindError(TransferError, OSError):
    """The echo endpoint could not bind its address."""


class EndpointConnectionError(TransferError, ConnectionError):
    """The probe could not connect to the target endpoint."""


class TransferIOError(TransferError, OSError):
    """A read or write failed in the middle of a transfer."""


class TransferTimeoutError(TransferError, TimeoutError):
    """No response arrived within the read bound."""
