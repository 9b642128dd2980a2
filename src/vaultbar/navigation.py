"""Wraparound single-selection cursor over an ordered list."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_SELECTION = -1


class ListNavigator(Generic[T]):
    """Selection cursor that is either ``-1`` or a valid index into ``items``.

    ``is_open`` reports whether the owning view is showing; navigation is a
    no-op while it is closed. ``on_select`` receives the item under the
    cursor when ``select_current`` fires.
    """

    def __init__(
        self,
        items: Sequence[T] = (),
        *,
        is_open: Callable[[], bool] | None = None,
        on_select: Callable[[T], None] | None = None,
    ) -> None:
        self._items: list[T] = list(items)
        self._index = NO_SELECTION
        self._is_open = is_open or (lambda: True)
        self._on_select = on_select

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> T | None:
        if self._index == NO_SELECTION:
            return None
        return self._items[self._index]

    def __len__(self) -> int:
        return len(self._items)

    def _can_move(self) -> bool:
        return bool(self._items) and self._is_open()

    def select_next(self) -> int:
        """Move down, wrapping past the end to 0. From -1 lands on 0."""
        if self._can_move():
            self._index = (self._index + 1) % len(self._items)
        return self._index

    def select_previous(self) -> int:
        """Move up, wrapping before 0 to the last index. From -1 lands on the last index."""
        if self._can_move():
            if self._index <= 0:
                self._index = len(self._items) - 1
            else:
                self._index -= 1
        return self._index

    def select_item(self, index: int) -> int:
        """Absolute set; out-of-range indices are ignored."""
        if NO_SELECTION <= index < len(self._items):
            self._index = index
        return self._index

    def reset(self) -> None:
        self._index = NO_SELECTION

    def select_current(self) -> T | None:
        """Invoke the selection callback with the current item; no-op at -1."""
        item = self.current
        if item is not None and self._on_select is not None:
            self._on_select(item)
        return item

    def replace_items(self, items: Sequence[T], *, keep_selection: bool = True) -> None:
        """Swap the list and revalidate or reset the cursor in the same step."""
        self._items = list(items)
        if not keep_selection or self._index >= len(self._items):
            if self._index != NO_SELECTION:
                logger.debug("Selection %d reset after list replacement", self._index)
            self._index = NO_SELECTION

    def clear(self) -> None:
        self._items = []
        self._index = NO_SELECTION


__all__ = [
    "NO_SELECTION",
    "ListNavigator",
]
