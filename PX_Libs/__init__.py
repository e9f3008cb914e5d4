"""
PX_Libs - Pixels Photo Editor Library Modules

This package contains core functionality for the Pixels editor,
organized into specialized sub-packages:

- ImageEditingLib: Pixel buffers, geometric transforms, color filters, sharpen, codecs
- EditSessionLib: Editing session state, crop tool, undo/redo history, shortcuts
"""

__version__ = "0.1.0"
