"""
Editor exceptions.

Every failure the editor reports derives from ``PixelsError`` so callers
(the desktop shell, scripts) can surface it with a single handler. None of
them are fatal: the operation that raised leaves the committed state intact.
"""


class PixelsError(Exception):
    """Base exception for editor operations."""
    pass


class NoImageLoaded(PixelsError):
    """Raised when an edit or export is attempted before an image is loaded."""
    pass


class InvalidDimensions(PixelsError, ValueError):
    """Raised when a resize is requested with missing or non-positive sizes."""
    pass


class InvalidRect(PixelsError, ValueError):
    """Raised when a crop rectangle falls outside the buffer or below the minimum size."""
    pass


class UnsupportedFileType(PixelsError):
    """Raised when a file is not an image the codec can decode."""
    pass


class CropNotActive(PixelsError):
    """Raised when a crop is applied while the crop tool is idle."""
    pass
