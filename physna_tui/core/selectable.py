"""
Ordered collection with a single optional selection and cyclic navigation.

Used for the folder list, the model table and the tenant picker. Navigation on
an empty collection is a no-op: ``selected`` stays ``None`` and no index is ever
computed from ``len(items) - 1``.
"""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class SelectableCollection(Generic[T]):
    """A list of items plus at most one selected index."""

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: List[T] = list(items or [])
        self._selected: Optional[int] = None

    def __repr__(self) -> str:
        return f"SelectableCollection(items={self._items!r}, selected={self._selected!r})"

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    @property
    def items(self) -> tuple[T, ...]:
        """Snapshot of the items (read-only)."""
        return tuple(self._items)

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    @property
    def selected_item(self) -> Optional[T]:
        if self._selected is None:
            return None
        return self._items[self._selected]

    def is_empty(self) -> bool:
        return not self._items

    def select(self, index: Optional[int]) -> None:
        """
        Select ``index`` directly (``None`` clears the selection).

        Raises:
            IndexError: If ``index`` does not address an item
        """
        if index is not None and not 0 <= index < len(self._items):
            raise IndexError(f"Selection {index} out of range for {len(self._items)} items")
        self._selected = index

    def next(self) -> None:
        if not self._items:
            return
        if self._selected is None or self._selected >= len(self._items) - 1:
            self._selected = 0
        else:
            self._selected += 1

    def previous(self) -> None:
        if not self._items:
            return
        if self._selected is None:
            self._selected = 0
        elif self._selected == 0:
            self._selected = len(self._items) - 1
        else:
            self._selected -= 1

    def first(self) -> None:
        if self._items:
            self._selected = 0

    def last(self) -> None:
        if not self._items:
            self.first()
            return
        self._selected = len(self._items) - 1

    def append(self, item: T) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()
        self._selected = None

    def replace_all(self, items: Iterable[T]) -> None:
        """Swap in a fresh list, preserving order. Nothing is selected afterwards."""
        self.clear()
        for item in items:
            self._items.append(item)


__all__ = ["SelectableCollection"]
