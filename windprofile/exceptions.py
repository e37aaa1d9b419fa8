"""
Exceptions raised by the file-level wind import helpers.

The parsers themselves never raise; these are only used where a caller asks
for finished wind layers from a file and nothing usable can be produced.
"""

from typing import List, Optional


class WindImportError(Exception):
    """Base exception for wind import errors."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = list(errors or [])
        super().__init__(message)


class UnsupportedFileError(WindImportError):
    """Raised when a file belongs to another importer (e.g. trajectories)."""
    pass


class ProfileFormatError(WindImportError):
    """Raised when a saved wind profile cannot be read."""
    pass
