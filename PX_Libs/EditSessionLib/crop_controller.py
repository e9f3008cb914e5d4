"""
Interactive crop rectangle state machine.

The crop tool is either idle or active. While active it tracks one CropRect
over the canvas and at most one pointer gesture:

- drag: pointer-down on the rect body, pointer-move moves the rect
- resize: pointer-down on one of the 8 handles (n, s, e, w, ne, nw, se, sw),
  pointer-move moves the named edges by the delta since the previous move

Every transition is a pure function taking a CropState and returning a new
one. CropController holds the current state for callers that want an object.

Example:
    >>> state = start(CropState(), 200, 100)
    >>> state = pointer_down(state, 100, 50)        # body: drag
    >>> state = pointer_move(state, 110, 50)
    >>> state = pointer_up(state)
    >>> state.rect.x
    30.0
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from PX_Libs.constants import CROP_HANDLE_TOLERANCE, CROP_HANDLES, CROP_INSET_RATIO
from PX_Libs.ImageEditingLib.transform_engine import CropRect, min_crop_size

logger = logging.getLogger(__name__)

BODY = "body"


class CropMode(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class Gesture(str, Enum):
    NONE = "none"
    DRAG = "drag"
    RESIZE = "resize"


@dataclass(frozen=True)
class CropState:
    """Snapshot of the crop tool.

    Attributes:
        mode: Idle or active
        canvas_width: Canvas width the rect is bounded by
        canvas_height: Canvas height the rect is bounded by
        rect: Pending crop rectangle (None while idle)
        gesture: Gesture in progress
        handle: Handle being dragged during a resize
        anchor: Grab offset during a drag, previous pointer position during a resize
    """
    mode: CropMode = CropMode.IDLE
    canvas_width: int = 0
    canvas_height: int = 0
    rect: Optional[CropRect] = None
    gesture: Gesture = Gesture.NONE
    handle: Optional[str] = None
    anchor: Tuple[float, float] = (0.0, 0.0)

    @property
    def is_active(self) -> bool:
        return self.mode == CropMode.ACTIVE

    @property
    def is_dragging(self) -> bool:
        return self.gesture == Gesture.DRAG

    @property
    def is_resizing(self) -> bool:
        return self.gesture == Gesture.RESIZE


def initial_rect(canvas_width: int, canvas_height: int) -> CropRect:
    """
    The rect shown when the crop tool starts: 10% inset on every side,
    grown around the centre when that would be below the minimum size.
    """
    min_width, min_height = min_crop_size(canvas_width, canvas_height)
    width = max(canvas_width * (1 - 2 * CROP_INSET_RATIO), min_width)
    height = max(canvas_height * (1 - 2 * CROP_INSET_RATIO), min_height)
    x = min(canvas_width * CROP_INSET_RATIO, (canvas_width - width) / 2)
    y = min(canvas_height * CROP_INSET_RATIO, (canvas_height - height) / 2)
    return CropRect(float(x), float(y), float(width), float(height))


def handle_points(rect: CropRect) -> Tuple[Tuple[str, float, float], ...]:
    """Handle positions, corners first."""
    mid_x = rect.x + rect.width / 2
    mid_y = rect.y + rect.height / 2
    return (
        ("nw", rect.x, rect.y),
        ("ne", rect.right, rect.y),
        ("sw", rect.x, rect.bottom),
        ("se", rect.right, rect.bottom),
        ("n", mid_x, rect.y),
        ("s", mid_x, rect.bottom),
        ("w", rect.x, mid_y),
        ("e", rect.right, mid_y),
    )


def hit_test(rect: CropRect, x: float, y: float, tolerance: float = CROP_HANDLE_TOLERANCE) -> Optional[str]:
    """
    Find what a pointer at (x, y) grabs.

    Returns:
        A handle name, "body" for the inside of the rect, or None
    """
    for name, hx, hy in handle_points(rect):
        if abs(x - hx) <= tolerance and abs(y - hy) <= tolerance:
            return name
    if rect.contains(x, y):
        return BODY
    return None


def start(state: CropState, canvas_width: int, canvas_height: int) -> CropState:
    """Idle -> Active with a fresh rect. Restarting an active tool resets the rect."""
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"Canvas dimensions must be positive, got {canvas_width}x{canvas_height}")
    return CropState(
        mode=CropMode.ACTIVE,
        canvas_width=int(canvas_width),
        canvas_height=int(canvas_height),
        rect=initial_rect(canvas_width, canvas_height),
    )


def cancel(state: CropState) -> CropState:
    """Active -> Idle, discarding the rect."""
    return CropState()


def pointer_down(state: CropState, x: float, y: float, handle: Optional[str] = None) -> CropState:
    """
    Begin a drag or resize.

    Args:
        state: Current state
        x, y: Pointer position in image coordinates
        handle: Handle the pointer went down on, if the caller already knows
            it; otherwise the position is hit-tested against the rect

    Returns:
        New state; unchanged when idle, when a gesture is already running or
        when the pointer misses the rect

    Raises:
        ValueError: If handle is not one of the 8 handle names
    """
    if not state.is_active or state.gesture != Gesture.NONE:
        return state

    if handle is not None and handle not in CROP_HANDLES:
        raise ValueError(f"Unknown crop handle: {handle}. Valid handles: {', '.join(CROP_HANDLES)}")

    target = handle or hit_test(state.rect, x, y)
    if target is None:
        return state

    if target == BODY:
        logger.debug(f"Crop drag started at ({x}, {y})")
        return replace(
            state,
            gesture=Gesture.DRAG,
            handle=None,
            anchor=(x - state.rect.x, y - state.rect.y),
        )

    logger.debug(f"Crop resize started on handle '{target}' at ({x}, {y})")
    return replace(state, gesture=Gesture.RESIZE, handle=target, anchor=(x, y))


def pointer_move(state: CropState, x: float, y: float) -> CropState:
    """Advance the running gesture; no-op without one."""
    if not state.is_active or state.gesture == Gesture.NONE:
        return state

    if state.gesture == Gesture.DRAG:
        grab_x, grab_y = state.anchor
        rect = move_rect(state.rect, x - grab_x, y - grab_y, state.canvas_width, state.canvas_height)
        return replace(state, rect=rect)

    last_x, last_y = state.anchor
    rect = resize_rect(
        state.rect,
        state.handle,
        x - last_x,
        y - last_y,
        state.canvas_width,
        state.canvas_height,
    )
    return replace(state, rect=rect, anchor=(x, y))


def pointer_up(state: CropState) -> CropState:
    """End any gesture."""
    if state.gesture == Gesture.NONE:
        return state
    return replace(state, gesture=Gesture.NONE, handle=None, anchor=(0.0, 0.0))


def move_rect(rect: CropRect, x: float, y: float, canvas_width: int, canvas_height: int) -> CropRect:
    """Place the rect's top-left at (x, y), clamped so it stays on the canvas."""
    x = max(0.0, min(x, canvas_width - rect.width))
    y = max(0.0, min(y, canvas_height - rect.height))
    return replace(rect, x=x, y=y)


def resize_rect(
    rect: CropRect,
    handle: str,
    dx: float,
    dy: float,
    canvas_width: int,
    canvas_height: int,
) -> CropRect:
    """
    Move the edges named by ``handle`` by (dx, dy).

    Each edge is clamped independently to the minimum size and the canvas.
    Moving the west or north edge shifts x or y so the opposite edge stays put.
    """
    min_width, min_height = min_crop_size(canvas_width, canvas_height)
    x, y, width, height = rect.x, rect.y, rect.width, rect.height

    if "e" in handle:
        width = max(min_width, min(width + dx, canvas_width - x))

    if "w" in handle:
        right = x + width
        width = min(max(min_width, width - dx), right)
        x = right - width

    if "s" in handle:
        height = max(min_height, min(height + dy, canvas_height - y))

    if "n" in handle:
        bottom = y + height
        height = min(max(min_height, height - dy), bottom)
        y = bottom - height

    return CropRect(x, y, width, height)


class CropController:
    """
    Holds the crop tool state and applies transitions to it.

    Each method returns the new state as well as storing it.
    """

    def __init__(self) -> None:
        self.state = CropState()

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    @property
    def rect(self) -> Optional[CropRect]:
        return self.state.rect

    def start(self, canvas_width: int, canvas_height: int) -> CropState:
        self.state = start(self.state, canvas_width, canvas_height)
        logger.info(f"Crop mode started on {canvas_width}x{canvas_height} canvas")
        return self.state

    def cancel(self) -> CropState:
        if self.state.is_active:
            logger.info("Crop cancelled")
        self.state = cancel(self.state)
        return self.state

    def pointer_down(self, x: float, y: float, handle: Optional[str] = None) -> CropState:
        self.state = pointer_down(self.state, x, y, handle)
        return self.state

    def pointer_move(self, x: float, y: float) -> CropState:
        self.state = pointer_move(self.state, x, y)
        return self.state

    def pointer_up(self) -> CropState:
        self.state = pointer_up(self.state)
        return self.state
