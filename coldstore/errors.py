"""Exceptions that abort a run."""


class AbortException(Exception):
    """Raised when execution must abort."""
    pass


class ConfigError(AbortException):
    """Host info, baseline date or day offset is unusable. Raised before any network call."""
    pass


class ReadFailure(AbortException):
    """A GET call failed or returned a body that could not be decoded."""
    pass
