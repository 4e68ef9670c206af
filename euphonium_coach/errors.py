"""Exception types for Euphonium Coach."""


class EuphoniumCoachError(Exception):
    """Base class for all errors raised by Euphonium Coach."""


class ParseError(EuphoniumCoachError, ValueError):
    """Raised when note text is not of the form <Letter>[#|b]<octave>."""


class ConfigurationError(EuphoniumCoachError, ValueError):
    """Raised for invalid sample rates, empty buffers or unusable settings."""
