"""
Tests for the slider wiring of PixelsEditorWindow.

Runs the window on Qt's offscreen platform; nothing is shown on screen.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QAbstractSlider, QApplication  # noqa: E402

from PX_Libs.ImageEditingLib.image_editor_window import PixelsEditorWindow  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    """A single QApplication for the module."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def window(qapp, gradient_buffer):
    """An editor window with the 200x100 gradient loaded."""
    win = PixelsEditorWindow()
    win.context.load_buffer(gradient_buffer)
    win._sync_controls()
    yield win
    win.close()
    win.deleteLater()


class TestSliderCommits:
    """Tests for when slider changes reach the history."""

    def test_keyboard_step_commits(self, window):
        """A single step (arrow key) should preview and push one snapshot."""
        window.sliders["brightness"].triggerAction(QAbstractSlider.SliderSingleStepAdd)

        assert window.context.filters.brightness == 101
        assert len(window.context.history) == 2
        assert window.context.history.current.filters.brightness == 101

    def test_page_step_commits(self, window):
        """A page step (track click or PageUp) should push one snapshot."""
        window.sliders["contrast"].triggerAction(QAbstractSlider.SliderPageStepAdd)

        assert len(window.context.history) == 2

        window.context.undo()
        assert window.context.filters.contrast == 100

    def test_drag_commits_on_release_only(self, window):
        """Moves while the handle is held should preview without pushing."""
        slider = window.sliders["saturation"]
        slider.setSliderDown(True)
        slider.setValue(120)
        slider.setValue(140)

        assert window.context.filters.saturation == 140
        assert len(window.context.history) == 1

        slider.setSliderDown(False)

        assert len(window.context.history) == 2

    def test_release_without_move_does_not_push(self, window):
        """Pressing and releasing the handle in place should keep the history."""
        slider = window.sliders["hue"]
        slider.setSliderDown(True)
        slider.setSliderDown(False)

        assert len(window.context.history) == 1

    def test_sync_does_not_commit(self, window):
        """Moving sliders to the context's state should not push."""
        window.context.apply_preset("sepia")
        before = len(window.context.history)

        window._sync_controls()

        assert window.sliders["hue"].value() == 20
        assert len(window.context.history) == before
