"""
Keyboard shortcut resolution.

Maps a key chord to the name of an EditorContext command. The desktop shell
translates Qt key events into the arguments below; nothing here depends on Qt.
"""

from typing import Optional

OPEN = "open"
DOWNLOAD = "download"
UNDO = "undo"
REDO = "redo"
CANCEL_CROP = "cancel_crop"
APPLY_CROP = "apply_crop"

_COMMAND_KEYS = {
    "o": OPEN,
    "s": DOWNLOAD,
    "y": REDO,
}


def resolve_shortcut(
    key: str,
    ctrl: bool = False,
    shift: bool = False,
    meta: bool = False,
    cropping: bool = False,
) -> Optional[str]:
    """
    Resolve a key chord to a command name.

    Ctrl and Cmd (meta) are interchangeable. Escape and Enter only act while
    the crop tool is active.

    Args:
        key: Key name, e.g. "z", "Z", "Escape", "Enter", "Return"
        ctrl: Control held
        shift: Shift held
        meta: Command/Meta held
        cropping: Crop tool is active

    Returns:
        Command name, or None when the chord is not bound

    Example:
        >>> resolve_shortcut("z", ctrl=True, shift=True)
        'redo'
    """
    name = key.lower()

    if ctrl or meta:
        if name == "z":
            return REDO if shift else UNDO
        return _COMMAND_KEYS.get(name)

    if cropping and name in ("escape", "esc"):
        return CANCEL_CROP

    if cropping and name in ("enter", "return"):
        return APPLY_CROP

    return None
