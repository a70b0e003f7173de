"""
Error types for availmap.

ValidationError also derives from ValueError so callers that only know
about the builtin still catch it.
"""


class AvailmapError(Exception):
    """Base class for all availmap errors."""


class ValidationError(AvailmapError, ValueError):
    """Submission rejected before anything was written."""


class StoreReadError(AvailmapError):
    """The shared document could not be read or observed."""


class StoreWriteError(AvailmapError):
    """The shared document could not be replaced."""


class SubmissionInProgress(AvailmapError):
    """A submit was attempted while another one is still pending."""
