"""
Unit tests for the shortcuts module.
"""

import pytest

from PX_Libs.EditSessionLib.shortcuts import (
    APPLY_CROP,
    CANCEL_CROP,
    DOWNLOAD,
    OPEN,
    REDO,
    UNDO,
    resolve_shortcut,
)


class TestResolveShortcut:
    """Tests for resolve_shortcut."""

    @pytest.mark.parametrize("modifier", ["ctrl", "meta"])
    def test_undo(self, modifier):
        """Ctrl+Z and Cmd+Z should undo."""
        assert resolve_shortcut("z", **{modifier: True}) == UNDO

    def test_redo_with_shift(self):
        """Ctrl+Shift+Z should redo."""
        assert resolve_shortcut("Z", ctrl=True, shift=True) == REDO

    def test_redo_with_y(self):
        """Ctrl+Y should redo."""
        assert resolve_shortcut("y", ctrl=True) == REDO

    def test_open_and_download(self):
        """Ctrl+O opens and Ctrl+S downloads."""
        assert resolve_shortcut("o", ctrl=True) == OPEN
        assert resolve_shortcut("s", meta=True) == DOWNLOAD

    def test_plain_letters_unbound(self):
        """Letters without a modifier should do nothing."""
        assert resolve_shortcut("z") is None
        assert resolve_shortcut("q", ctrl=True) is None

    def test_crop_keys_only_while_cropping(self):
        """Escape and Enter should only act in crop mode."""
        assert resolve_shortcut("Escape") is None
        assert resolve_shortcut("Enter") is None
        assert resolve_shortcut("Escape", cropping=True) == CANCEL_CROP
        assert resolve_shortcut("Return", cropping=True) == APPLY_CROP
