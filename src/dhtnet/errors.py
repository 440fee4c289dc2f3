"""errors.py: exceptions raised by dhtnet."""


class DHTError(Exception):
    """Base class for every error raised by this package."""


class InvalidHostError(DHTError, ValueError):
    """The host string is empty."""


class InvalidPortError(DHTError, ValueError):
    """The port is not an integer in the range 1-65535."""


class ResolutionError(DHTError, OSError):
    """A host name could not be resolved to an address."""


class ParseError(DHTError, ValueError):
    """Address text could not be parsed into an ip and port."""


class InvalidIdentifierError(DHTError, ValueError):
    """A node identifier is empty or has the wrong length."""


class DecodeError(DHTError, ValueError):
    """A node identifier is not valid hexadecimal."""


class EntropyError(DHTError, OSError):
    """The operating system's secure random source is unavailable.

    Callers should treat this as fatal for identifier generation; there is
    no insecure fallback.
    """
