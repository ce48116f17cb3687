"""Custom exceptions for heightfield generation."""


class HeightfieldError(Exception):
    """Base exception for heightfield errors."""

    pass


class InvalidParameterError(HeightfieldError, ValueError):
    """Raised when a generation parameter is out of its valid range."""

    pass


class MissingDependencyError(HeightfieldError):
    """Raised when a host resource, such as a display surface, is missing."""

    pass
