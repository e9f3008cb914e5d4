"""
Bounded undo/redo history.

HistoryStack keeps up to ``limit`` snapshots and a cursor pointing at the
current one. Pushing after an undo discards the redo branch for good; pushing
past the limit evicts the oldest snapshot.

Classes:
    HistorySnapshot: Immutable record of one committed editor state
    HistoryStack: The bounded stack with undo/redo
"""

import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from PX_Libs.constants import HISTORY_LIMIT
from PX_Libs.ImageEditingLib.filter_pipeline import FilterState
from PX_Libs.ImageEditingLib.image_codec import decode_png, encode_png
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistorySnapshot:
    """One committed editor state.

    Attributes:
        label: Edit that produced the state ("load", "crop", ...)
        width: Base buffer width
        height: Base buffer height
        png: Base buffer encoded as PNG
        filters: Filter state in force
    """
    label: str
    width: int
    height: int
    png: bytes
    filters: FilterState

    @classmethod
    def capture(cls, label: str, buffer: PixelBuffer, filters: FilterState) -> "HistorySnapshot":
        return cls(
            label=label,
            width=buffer.width,
            height=buffer.height,
            png=encode_png(buffer),
            filters=filters,
        )

    def restore_buffer(self) -> PixelBuffer:
        """Decode a fresh, independently owned copy of the base buffer."""
        return decode_png(self.png)


class HistoryStack(Generic[T]):
    """
    Bounded, branch-discarding snapshot stack.

    Example:
        >>> history = HistoryStack(limit=3)
        >>> for name in "abcd":
        ...     history.push(name)
        >>> history.snapshots, history.cursor
        (['b', 'c', 'd'], 2)
        >>> history.undo()
        'c'
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = int(limit)
        self._snapshots: List[T] = []
        self._cursor = -1

    @property
    def snapshots(self) -> List[T]:
        return list(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[T]:
        if not self._snapshots:
            return None
        return self._snapshots[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def push(self, snapshot: T) -> None:
        """
        Append a snapshot and make it current.

        Any redo branch beyond the cursor is dropped first. When the stack
        grows past its limit the oldest snapshot is evicted and the cursor
        shifts down so it still points at the snapshot just pushed.
        """
        if self.can_redo:
            dropped = len(self._snapshots) - (self._cursor + 1)
            del self._snapshots[self._cursor + 1:]
            logger.debug(f"Discarded {dropped} redo snapshot(s)")

        self._snapshots.append(snapshot)
        self._cursor += 1

        if len(self._snapshots) > self.limit:
            self._snapshots.pop(0)
            self._cursor -= 1

    def undo(self) -> Optional[T]:
        """Step back; returns the new current snapshot, or None at the oldest."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[T]:
        """Step forward; returns the new current snapshot, or None at the newest."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor]

    def clear(self) -> None:
        self._snapshots.clear()
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)
