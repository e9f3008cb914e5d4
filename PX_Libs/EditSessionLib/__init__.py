"""
EditSessionLib - Editing session state

Holds what changes while a user edits: the crop tool, the undo/redo
history and the EditorContext that ties them to the image pipeline.
"""

from PX_Libs.EditSessionLib.crop_controller import CropController, CropState
from PX_Libs.EditSessionLib.history_stack import HistorySnapshot, HistoryStack
from PX_Libs.EditSessionLib.editor_context import EditorContext
from PX_Libs.EditSessionLib.shortcuts import resolve_shortcut

__all__ = [
    "CropController",
    "CropState",
    "HistorySnapshot",
    "HistoryStack",
    "EditorContext",
    "resolve_shortcut",
]
