class LPBridgeError(Exception):
    """Base class for every error raised by lp_bridge."""


class EncodingError(LPBridgeError, ValueError):
    """The problem cannot be expressed in the .lp grammar."""


class ParseError(LPBridgeError, ValueError):
    """A solver report could not be interpreted, not even loosely."""


class ProcessError(LPBridgeError, RuntimeError):
    """The solver process failed to start, timed out or exited with an error."""
