"""
Exception types for repolog.

The two repository errors are handled differently by callers: they skip
generation quietly when no repository exists, but warn loudly when an
existing repository cannot be read.
"""


class RepologError(Exception):
    """Base class for all repolog errors."""


class NoRepositoryFound(RepologError):
    """Raised when no git repository can be discovered from a start path."""

    def __init__(self, start_path: str):
        super().__init__(f"No git repository found at or above {start_path}")
        self.start_path = start_path


class RepositoryIOError(RepologError):
    """Raised when an existing repository cannot be opened or read."""


class NotAnnotatedTagError(RepologError):
    """Raised when a tag reference points directly at a commit."""

    def __init__(self, ref_name: str):
        super().__init__(f"{ref_name} is a lightweight tag")
        self.ref_name = ref_name


class UnresolvedTagError(RepologError):
    """Raised when a tag reference cannot be resolved to any object."""

    def __init__(self, ref_name: str, reason: str = ""):
        message = f"Cannot resolve tag {ref_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.ref_name = ref_name
