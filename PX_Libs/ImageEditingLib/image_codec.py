"""
Image decoding and encoding for Pixels.

Pillow does the format work; this module checks file types before any data
is touched, converts decoded images to RGBA PixelBuffers and packages PNG
exports with a timestamped file name.

Functions:
    check_file_type: Reject anything that is not a supported image
    decode_image: Decode image bytes into a PixelBuffer
    load_image_file: Read and decode an image from disk
    encode_png: Encode a PixelBuffer as PNG bytes
    decode_png: Decode PNG bytes produced by encode_png
    export_filename: Timestamped download file name

Classes:
    ExportResult: Encoded download ready to be written to disk
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

from PX_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    EXPORT_FILE_PREFIX,
    EXPORT_MIME_TYPE,
    EXPORT_TIMESTAMP_FORMAT,
    SUPPORTED_STANDARD_IMAGES,
)
from PX_Libs.errors import UnsupportedFileType
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.pillow_compat import DecompressionBombError, Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported image file extensions.

    Returns:
        Sorted list of extensions (e.g., ['.bmp', '.gif', ...])
    """
    return sorted(SUPPORTED_STANDARD_IMAGES)


def check_file_type(name: Optional[str] = None, mime_type: Optional[str] = None) -> None:
    """
    Validate a file by MIME type and/or extension.

    A MIME type, when given, must start with ``image/``. A name, when given,
    must end in a supported extension. At least one must be given.

    Raises:
        UnsupportedFileType: If the file is not a supported image
    """
    if name is None and mime_type is None:
        raise UnsupportedFileType("Please select a valid image file")

    if mime_type is not None and not str(mime_type).lower().startswith("image/"):
        raise UnsupportedFileType(f"Unsupported file type: {mime_type}")

    if name is not None:
        suffix = Path(name).suffix.lower()
        if suffix not in SUPPORTED_STANDARD_IMAGES:
            raise UnsupportedFileType(
                f"Unsupported file extension: '{suffix or name}'. "
                f"Supported: {', '.join(get_supported_image_formats())}"
            )


def decode_image(
    data: bytes,
    name: Optional[str] = None,
    mime_type: Optional[str] = None,
) -> PixelBuffer:
    """
    Decode image bytes into an RGBA PixelBuffer.

    Args:
        data: Encoded image file contents
        name: Optional file name, checked against the supported extensions
        mime_type: Optional MIME type, must be image/*

    Returns:
        Decoded PixelBuffer

    Raises:
        UnsupportedFileType: If the type check fails, Pillow cannot decode the data
            or the image exceeds Pillow's pixel limit
    """
    if name is not None or mime_type is not None:
        check_file_type(name, mime_type)

    if not data:
        raise UnsupportedFileType("Image data is empty")

    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            buffer = PixelBuffer.from_image(image)
    except (UnidentifiedImageError, DecompressionBombError, OSError) as e:
        raise UnsupportedFileType(f"Could not decode {name or 'image'}: {e}") from e

    logger.info(f"Decoded {name or 'image'}: {buffer.width}x{buffer.height}")
    return buffer


def load_image_file(path: Union[str, Path]) -> PixelBuffer:
    """
    Read and decode an image file.

    Raises:
        UnsupportedFileType: If the extension or contents are not a supported image
        OSError: If the file cannot be read
    """
    path = Path(path)
    check_file_type(path.name)
    return decode_image(path.read_bytes(), name=path.name)


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode a PixelBuffer as PNG bytes (lossless)."""
    output = BytesIO()
    buffer.to_image().save(output, format=DEFAULT_OUTPUT_FORMAT)
    return output.getvalue()


def decode_png(data: bytes) -> PixelBuffer:
    """Decode PNG bytes produced by encode_png."""
    with Image.open(BytesIO(data)) as image:
        image.load()
        return PixelBuffer.from_image(image)


def export_filename(now: Optional[datetime] = None) -> str:
    """
    Timestamped download name, e.g. ``pixels-edited-2024-05-01T13-45-10.png``.
    """
    stamp = (now or datetime.now()).strftime(EXPORT_TIMESTAMP_FORMAT)
    return f"{EXPORT_FILE_PREFIX}{stamp}.{DEFAULT_OUTPUT_FORMAT.lower()}"


@dataclass(frozen=True)
class ExportResult:
    """Encoded download.

    Attributes:
        filename: Suggested file name
        data: Encoded image bytes
        mime_type: MIME type of data
    """
    filename: str
    data: bytes
    mime_type: str = EXPORT_MIME_TYPE

    def save(self, directory: Union[str, Path], overwrite: bool = False) -> Path:
        """
        Write the export into ``directory``.

        Args:
            directory: Existing output directory
            overwrite: Replace an existing file of the same name

        Returns:
            Path of the written file

        Raises:
            OSError: If directory does not exist or is not a directory
            FileExistsError: If the file exists and overwrite=False
        """
        directory = Path(directory)
        if not directory.exists():
            raise OSError(f"Output directory does not exist: {directory}")

        if not directory.is_dir():
            raise OSError(f"Output path is not a directory: {directory}")

        output_file = directory / self.filename
        if output_file.exists() and not overwrite:
            raise FileExistsError(
                f"Output file already exists: {output_file}. "
                f"Set overwrite=True to replace."
            )

        output_file.write_bytes(self.data)
        logger.info(f"Saved export to {output_file} ({len(self.data)} bytes)")
        return output_file
