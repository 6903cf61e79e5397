"""
Custom exceptions for graphinspect.
"""


class GraphInspectError(Exception):
    """Base exception for graphinspect."""
    pass


class StorageError(GraphInspectError):
    """Error related to reading an index file."""
    pass


class FileOpenError(StorageError):
    """Index file could not be opened."""
    pass


class HeaderReadError(StorageError):
    """Header bytes could not be read in full."""
    pass


class FormatMismatchError(GraphInspectError):
    """Header fields do not describe the expected layout."""
    pass


class UnsupportedLayoutError(GraphInspectError):
    """Known layout variant that the inspector does not decode."""
    pass


class ValidationError(GraphInspectError):
    """Input validation error."""
    pass


class GraphValidationError(ValidationError):
    """In-memory adjacency does not match the requested node counts."""
    pass
