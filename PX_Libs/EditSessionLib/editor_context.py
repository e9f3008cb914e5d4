"""
Editor session state and commands.

EditorContext is the one object holding a session's state: the base image,
the live filter state, the crop tool and the edit history. Every command the
desktop shell (or a script) can issue is a method here.

Live previews (``set_filter``, crop gestures) never touch the history;
committed edits push exactly one snapshot each. A command that fails raises
a PixelsError and leaves the session as it was.

Example:
    >>> context = EditorContext()
    >>> context.load_buffer(PixelBuffer.new(100, 100, (120, 80, 40, 255)))
    >>> context.set_filter("brightness", 150)      # preview only
    >>> context.commit_filters()                    # slider released
    >>> context.undo()                              # back to the loaded image
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union

from PX_Libs.constants import (
    HISTORY_LIMIT,
    SNAPSHOT_CROP,
    SNAPSHOT_FILTERS,
    SNAPSHOT_FLIP_HORIZONTAL,
    SNAPSHOT_FLIP_VERTICAL,
    SNAPSHOT_LOAD,
    SNAPSHOT_PRESET,
    SNAPSHOT_RESET,
    SNAPSHOT_RESIZE,
)
from PX_Libs.errors import CropNotActive, InvalidRect, NoImageLoaded, PixelsError
from PX_Libs.EditSessionLib.crop_controller import CropController, CropState
from PX_Libs.EditSessionLib.history_stack import HistorySnapshot, HistoryStack
from PX_Libs.ImageEditingLib.filter_pipeline import FilterState
from PX_Libs.ImageEditingLib.image_codec import (
    ExportResult,
    check_file_type,
    decode_image,
    encode_png,
    export_filename,
    load_image_file,
)
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.ImageEditingLib.presets import FilterPreset, apply_preset_values, get_preset
from PX_Libs.ImageEditingLib.render_pipeline import render
from PX_Libs.ImageEditingLib.transform_engine import crop, derive_resize_dimensions, resize

logger = logging.getLogger(__name__)


class EditorContext:
    """
    State and commands of one editing session.

    Attributes:
        buffer: Base image the filters are rendered from (None before a load)
        filters: Live filter state
        crop: Crop tool
        history: Committed states
        active_preset: Last preset applied since the last reset/geometry commit
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self.buffer: Optional[PixelBuffer] = None
        self.filters = FilterState()
        self.crop = CropController()
        self.history: HistoryStack[HistorySnapshot] = HistoryStack(history_limit)
        self.active_preset: Optional[FilterPreset] = None
        self._load_generation = 0

    @property
    def has_image(self) -> bool:
        return self.buffer is not None

    @property
    def is_cropping(self) -> bool:
        return self.crop.is_active

    def _require_image(self, action: str) -> PixelBuffer:
        if self.buffer is None:
            logger.warning(f"Rejected '{action}': no image loaded")
            raise NoImageLoaded("Please load an image first!")
        return self.buffer

    def _commit(self, label: str) -> None:
        self.history.push(HistorySnapshot.capture(label, self.buffer, self.filters))
        logger.info(
            f"Committed '{label}' ({self.buffer.width}x{self.buffer.height}), "
            f"history {self.history.cursor + 1}/{len(self.history)}"
        )

    def _replace_base(self, buffer: PixelBuffer) -> None:
        self.buffer = buffer
        self.filters = FilterState()
        self.active_preset = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_buffer(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Start a new session on a decoded buffer.

        Filters are reset, the crop tool cancelled and the history replaced
        by a single "load" snapshot.

        Returns:
            The rendered image
        """
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

        self.crop.cancel()
        self._replace_base(buffer)
        self.history.clear()
        self._commit(SNAPSHOT_LOAD)
        logger.info(f"Image loaded: {buffer.width}x{buffer.height}")
        return self.render()

    async def _load_latest(self, decode: Callable[..., PixelBuffer], *args: Any) -> bool:
        self._load_generation += 1
        generation = self._load_generation

        try:
            buffer = await asyncio.to_thread(decode, *args)
        except (PixelsError, OSError):
            if generation != self._load_generation:
                logger.warning("Superseded image load failed; ignoring")
                return False
            raise

        if generation != self._load_generation:
            logger.warning("Image load superseded by a newer one; discarding result")
            return False

        self.load_buffer(buffer)
        return True

    async def open_image(
        self,
        data: bytes,
        name: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> bool:
        """
        Decode image bytes off the event loop and load them.

        The file type is checked before anything is decoded. If another open
        starts before this one finishes decoding, this one's result is
        dropped and the session is left to the newer load.

        Returns:
            True if this image became the session's image, False if superseded

        Raises:
            UnsupportedFileType: If the data is not a supported image
        """
        if name is not None or mime_type is not None:
            check_file_type(name, mime_type)
        return await self._load_latest(decode_image, data, name, mime_type)

    async def open_image_file(self, path: Union[str, Path]) -> bool:
        """Same as open_image, reading from disk."""
        path = Path(path)
        check_file_type(path.name)
        return await self._load_latest(load_image_file, path)

    # ------------------------------------------------------------------
    # Rendering and filters
    # ------------------------------------------------------------------

    def render(self) -> PixelBuffer:
        """Render the base image under the live filter state."""
        return render(self._require_image("render"), self.filters)

    def set_filter(self, name: str, value: Any) -> Optional[PixelBuffer]:
        """
        Change one filter value for live preview. Nothing is pushed to history.

        Returns:
            The rendered image, or None when no image is loaded

        Raises:
            ValueError: If name is unknown or value out of range
        """
        self.filters = self.filters.with_value(name, value)
        if not self.has_image:
            return None
        return self.render()

    def commit_filters(self) -> PixelBuffer:
        """Record the current filter state (slider released); unchanged filters are not pushed."""
        self._require_image("commit_filters")
        current = self.history.current
        if current is not None and current.filters == self.filters:
            logger.debug("Filters unchanged since last snapshot, nothing to commit")
            return self.render()
        self._commit(SNAPSHOT_FILTERS)
        return self.render()

    def flip_horizontal(self) -> PixelBuffer:
        self._require_image("flip_horizontal")
        self.filters = replace(self.filters, flip_horizontal=not self.filters.flip_horizontal)
        self._commit(SNAPSHOT_FLIP_HORIZONTAL)
        logger.info("Flipped horizontally")
        return self.render()

    def flip_vertical(self) -> PixelBuffer:
        self._require_image("flip_vertical")
        self.filters = replace(self.filters, flip_vertical=not self.filters.flip_vertical)
        self._commit(SNAPSHOT_FLIP_VERTICAL)
        logger.info("Flipped vertically")
        return self.render()

    def apply_preset(self, name: Union[str, FilterPreset]) -> PixelBuffer:
        """
        Apply a named preset.

        Raises:
            NoImageLoaded: If no image is loaded
            ValueError: If name is not a known preset
        """
        self._require_image("apply_preset")
        preset = get_preset(name)
        self.filters = apply_preset_values(self.filters, preset)
        self.active_preset = preset
        self._commit(SNAPSHOT_PRESET)
        logger.info(f"Preset applied: {preset.value}")
        return self.render()

    def reset_filters(self) -> Optional[PixelBuffer]:
        """
        Restore every filter to its default, clear flips and cancel cropping.

        Recorded in history when an image is loaded.

        Returns:
            The rendered image, or None when no image is loaded
        """
        self.filters = FilterState()
        self.active_preset = None
        self.crop.cancel()
        logger.info("All filters reset")

        if not self.has_image:
            return None

        self._commit(SNAPSHOT_RESET)
        return self.render()

    # ------------------------------------------------------------------
    # Geometry commits
    # ------------------------------------------------------------------

    def apply_resize(self, width: Optional[int] = None, height: Optional[int] = None) -> PixelBuffer:
        """
        Resize the rendered image and make it the new base.

        A missing dimension is derived from the current aspect ratio. The
        filter state is reset because its effect is now part of the pixels.

        Raises:
            NoImageLoaded: If no image is loaded
            InvalidDimensions: If the dimensions are missing or not positive
        """
        buffer = self._require_image("apply_resize")
        new_width, new_height = derive_resize_dimensions(buffer.width, buffer.height, width, height)
        resized = resize(self.render(), new_width, new_height)

        self.crop.cancel()
        self._replace_base(resized)
        self._commit(SNAPSHOT_RESIZE)
        logger.info(f"Image resized to: {new_width}x{new_height}")
        return self.render()

    def start_crop(self) -> CropState:
        """
        Enter crop mode with the default inset rectangle.

        Raises:
            NoImageLoaded: If no image is loaded
        """
        buffer = self._require_image("start_crop")
        return self.crop.start(buffer.width, buffer.height)

    def cancel_crop(self) -> CropState:
        return self.crop.cancel()

    def crop_pointer_down(self, x: float, y: float, handle: Optional[str] = None) -> CropState:
        return self.crop.pointer_down(x, y, handle)

    def crop_pointer_move(self, x: float, y: float) -> CropState:
        return self.crop.pointer_move(x, y)

    def crop_pointer_up(self) -> CropState:
        return self.crop.pointer_up()

    def apply_crop(self) -> PixelBuffer:
        """
        Crop the rendered image to the pending rectangle and make it the new base.

        Raises:
            CropNotActive: If crop mode is not active
            InvalidRect: If the pending rectangle is inconsistent with the image
        """
        if not self.crop.is_active or not self.has_image:
            logger.warning("Rejected 'apply_crop': crop mode not active")
            raise CropNotActive("Please start crop mode first!")

        rect = self.crop.rect
        try:
            cropped = crop(self.render(), rect)
        except InvalidRect:
            logger.error(f"Crop controller produced an invalid rect {rect} for {self.buffer.size}")
            raise

        self.crop.cancel()
        self._replace_base(cropped)
        self._commit(SNAPSHOT_CROP)
        logger.info(f"Crop applied: {cropped.width}x{cropped.height}")
        return self.render()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _restore(self, snapshot: HistorySnapshot) -> PixelBuffer:
        self.crop.cancel()
        self.buffer = snapshot.restore_buffer()
        self.filters = snapshot.filters
        self.active_preset = None
        return self.render()

    def undo(self) -> Optional[PixelBuffer]:
        """Step back one committed edit; None when there is nothing to undo."""
        snapshot = self.history.undo()
        if snapshot is None:
            return None
        logger.info(f"Undo applied (back to '{snapshot.label}')")
        return self._restore(snapshot)

    def redo(self) -> Optional[PixelBuffer]:
        """Step forward one committed edit; None when there is nothing to redo."""
        snapshot = self.history.redo()
        if snapshot is None:
            return None
        logger.info(f"Redo applied ('{snapshot.label}')")
        return self._restore(snapshot)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def download(self, now: Optional[datetime] = None) -> ExportResult:
        """
        Encode the rendered image as PNG with a timestamped file name.

        Raises:
            NoImageLoaded: If no image is loaded
        """
        self._require_image("download")
        result = ExportResult(filename=export_filename(now), data=encode_png(self.render()))
        logger.info(f"Image exported as {result.filename}")
        return result
