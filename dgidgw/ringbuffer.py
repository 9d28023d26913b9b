"""A bounded first-in first-out buffer that never holds more than length - 1 items."""

from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


class RingBufferOverflow(BufferError):
    """Raised when data does not fit into the buffer."""


class RingBufferUnderflow(BufferError):
    """Raised when more data is requested than the buffer holds."""


class RingBuffer(Generic[T]):
    """FIFO buffer of fixed size; one slot always stays free."""

    def __init__(self, length: int, name: str) -> None:
        if length <= 0:
            raise ValueError("ring buffer length must be positive")
        self._length = length
        self.name = name
        self._items: deque[T] = deque()

    def add_data(self, data: Iterable[T]) -> None:
        """Append all of ``data``; raise RingBufferOverflow if it does not fit."""
        items = list(data)
        free = self.free_space()
        if len(items) >= free:
            raise RingBufferOverflow(
                f"Overflow in {self.name} ring buffer, {len(items)} >= {free}"
            )
        self._items.extend(items)

    def get_data(self, count: int) -> list[T]:
        """Remove and return the oldest ``count`` items."""
        self._check_available(count, "Underflow")
        return [self._items.popleft() for _ in range(count)]

    def peek(self, count: int) -> list[T]:
        """Return the oldest ``count`` items without removing them."""
        self._check_available(count, "Underflow peek")
        return list(islice(self._items, count))

    def clear(self) -> None:
        self._items.clear()

    def free_space(self) -> int:
        return self._length - len(self._items)

    def data_size(self) -> int:
        return len(self._items)

    def has_space(self, length: int) -> bool:
        return self.free_space() > length

    def has_data(self) -> bool:
        return bool(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def _check_available(self, count: int, what: str) -> None:
        size = self.data_size()
        if size < count:
            raise RingBufferUnderflow(
                f"{what} in {self.name} ring buffer, {size} < {count}"
            )