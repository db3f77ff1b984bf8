"""DXM Converter Error Handling Utilities

Custom exception classes for model loading and export with standardized error messages.
"""

from typing import Optional, Dict, Any


class DXMError(Exception):
    """Base exception for all converter errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize converter error.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidFormatError(DXMError):
    """Raised when a file is not what its extension claims.

    Examples:
    - DLM magic is not "DXM1"
    - Malformed OBJ statement
    - Face index outside the vertex table
    """

    pass


class UnsupportedFormatError(DXMError):
    """Raised when a file is valid but uses a feature the converter cannot read.

    Examples:
    - Interleaved or byte-packed encoding
    - LZ77 compression
    - Packed .dxm container without its .dlm payload
    - Unknown file extension
    """

    pass


class UnsupportedVersionError(DXMError):
    """Raised when the DLM header version is older than the loader supports."""

    pass


class TruncatedFileError(DXMError):
    """Raised when the file ends before a section is fully read."""

    pass


class ModelNotFoundError(DXMError):
    """Raised when the input model file doesn't exist."""

    pass


class ConversionError(DXMError):
    """Raised when loading or exporting fails for a reason outside the format itself.

    Examples:
    - Permission denied on the input or export folder
    - Disk full while writing the OBJ
    """

    pass


def handle_load_error(path: str, error: Exception) -> DXMError:
    """Convert an exception raised while reading a model to the appropriate error.

    Args:
        path: Model path being processed
        error: Original exception

    Returns:
        Appropriate DXMError subclass instance
    """
    if isinstance(error, DXMError):
        return error

    if isinstance(error, FileNotFoundError):
        return ModelNotFoundError(
            f"Model file not found: {path}",
            details={"path": path}
        )

    if isinstance(error, IsADirectoryError):
        return ConversionError(
            f"Expected a file but found a directory: {path}",
            details={"path": path}
        )

    if isinstance(error, PermissionError):
        return ConversionError(
            f"Permission denied: {path}",
            details={"path": path, "error": str(error)}
        )

    return ConversionError(
        f"Failed to process {path}: {error}",
        details={"path": path, "error": str(error), "type": type(error).__name__}
    )
