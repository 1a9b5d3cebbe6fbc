"""
Binary min-heap priority queue with membership testing and decrease-key.

Items are ordered by ``(key(item), insertion sequence)``. The key is read
from the item itself, so a strategy can change an item's priority in place
and then call ``update()`` to restore the heap order. The insertion sequence
breaks ties, so items with equal keys leave the queue in the order they
entered it.

Every ``enqueue()`` creates its own heap entry. The same item, or two equal
items, may therefore be queued more than once; each entry leaves the queue
separately.
"""

import math
from dataclasses import dataclass
from numbers import Real
from operator import attrgetter
from typing import Callable, Dict, Generic, Iterator, List, Tuple, TypeVar

from ..exceptions import EmptyQueueError, InvariantViolationError


T = TypeVar("T")


@dataclass(eq=False)
class QueueEntry(Generic[T]):
    """
    One queued occurrence of an item.

    Attributes:
        item: The queued item
        sequence: Insertion counter used to break key ties
        index: Current slot of the entry in the heap list
    """

    item: T
    sequence: int
    index: int


class PriorityQueue(Generic[T]):
    """
    Min-heap over a dense 0-indexed list of entries.

    The parent of index ``i`` is ``(i - 1) // 2`` and its children are
    ``2i + 1`` and ``2i + 2``. Each entry records its own slot, and an
    index from item to entries gives O(1) membership tests and O(log n)
    key updates. Items must be hashable.
    """

    def __init__(self, key: Callable[[T], float] = attrgetter("priority")):
        """
        Initialize an empty queue.

        Args:
            key: Function returning an item's priority; defaults to the
                item's ``priority`` attribute
        """
        self._key = key
        self._heap: List[QueueEntry[T]] = []
        self._entries: Dict[T, List[QueueEntry[T]]] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, item: object) -> bool:
        return item in self._entries

    def __iter__(self) -> Iterator[T]:
        """Iterate over items in heap order."""
        return iter(self.snapshot())

    @property
    def count(self) -> int:
        return len(self._heap)

    def contains(self, item: T) -> bool:
        """Check whether an item is currently queued."""
        return item in self._entries

    def _checked_key(self, item: T) -> float:
        key = self._key(item)
        if isinstance(key, bool) or not isinstance(key, Real):
            raise InvariantViolationError(f"priority of {item!r} is not numeric: {key!r}")
        if math.isnan(key):
            raise InvariantViolationError(f"priority of {item!r} is NaN")
        return key

    def _order(self, index: int) -> Tuple[float, int]:
        entry = self._heap[index]
        return (self._key(entry.item), entry.sequence)

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        heap[i].index = i
        heap[j].index = j

    def _sift_up(self, child: int) -> int:
        while child > 0:
            parent = (child - 1) // 2
            if self._order(child) >= self._order(parent):
                break
            self._swap(child, parent)
            child = parent
        return child

    def _sift_down(self, parent: int) -> int:
        last = len(self._heap) - 1
        while True:
            child = parent * 2 + 1
            if child > last:
                break
            right = child + 1
            if right <= last and self._order(right) < self._order(child):
                child = right
            if self._order(parent) <= self._order(child):
                break
            self._swap(parent, child)
            parent = child
        return parent

    def enqueue(self, item: T) -> None:
        """
        Add an item to the queue.

        Raises:
            InvariantViolationError: If the item's key is NaN or not numeric
        """
        self._checked_key(item)
        entry = QueueEntry(item, self._counter, len(self._heap))
        self._counter += 1
        self._heap.append(entry)
        self._entries.setdefault(item, []).append(entry)
        self._sift_up(entry.index)

    def dequeue(self) -> T:
        """
        Remove and return the item with the lowest key.

        Raises:
            EmptyQueueError: If the queue is empty
        """
        if not self._heap:
            raise EmptyQueueError("dequeue from an empty priority queue")
        front = self._heap[0]
        last = self._heap.pop()
        if self._heap:
            self._heap[0] = last
            last.index = 0
            self._sift_down(0)

        siblings = self._entries[front.item]
        siblings.remove(front)
        if not siblings:
            del self._entries[front.item]
        return front.item

    def peek(self) -> T:
        """
        Return the item with the lowest key without removing it.

        Raises:
            EmptyQueueError: If the queue is empty
        """
        if not self._heap:
            raise EmptyQueueError("peek into an empty priority queue")
        return self._heap[0].item

    def update(self, item: T) -> None:
        """
        Restore heap order after an item's key changed in place.

        Every queued entry of the item is moved.

        Raises:
            KeyError: If the item is not queued
            InvariantViolationError: If the new key is NaN or not numeric
        """
        entries = self._entries[item]
        self._checked_key(item)
        for entry in entries:
            index = self._sift_up(entry.index)
            self._sift_down(index)

    def snapshot(self) -> List[T]:
        """
        Return the queued items in heap order.

        Only the first item is guaranteed to hold the lowest key; the rest
        are not sorted.
        """
        return [entry.item for entry in self._heap]

    def clear(self) -> None:
        self._heap.clear()
        self._entries.clear()
        self._counter = 0
