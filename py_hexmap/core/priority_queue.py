"""
Frontier priority queue for breadth-expanding cell searches.

Priorities are small non-negative integers (``distance + search_heuristic``),
so cells go into buckets indexed by priority instead of a binary heap.
Searches never clear per-cell state: every search starts a new phase and a
cell whose stored phase is older than the live one counts as unvisited.
"""

import sys
from typing import List, Optional

import structlog

from .errors import SearchPhaseError
from .hex_grid import HexGrid

logger = structlog.get_logger()


class HexCellPriorityQueue:
    """Min-priority bucket queue over cell indices."""

    def __init__(self, grid: HexGrid):
        self.grid = grid
        self._buckets: List[List[int]] = []
        self._count = 0
        self._minimum = sys.maxsize

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def priority(self, cell: int) -> int:
        return int(self.grid.distance[cell]) + int(self.grid.search_heuristic[cell])

    def enqueue(self, cell: int) -> None:
        priority = self.priority(cell)
        if priority < 0:
            raise ValueError(f"Negative search priority {priority} for cell {cell}")
        self._count += 1
        if priority < self._minimum:
            self._minimum = priority
        while priority >= len(self._buckets):
            self._buckets.append([])
        self._buckets[priority].append(cell)

    def dequeue(self) -> Optional[int]:
        """Pop a cell with the lowest priority, or None when empty."""
        if self._count == 0:
            return None
        while self._minimum < len(self._buckets):
            bucket = self._buckets[self._minimum]
            if bucket:
                self._count -= 1
                return bucket.pop()
            self._minimum += 1
        return None

    def change(self, cell: int, old_priority: int) -> None:
        """Move ``cell`` out of its ``old_priority`` bucket after its priority changed."""
        self._buckets[old_priority].remove(cell)
        self._count -= 1
        self.enqueue(cell)

    def clear(self) -> None:
        self._buckets = []
        self._count = 0
        self._minimum = sys.maxsize


class SearchFrontier:
    """
    A priority queue bound to a monotonically increasing search phase.

    ``begin_phase()`` starts a new search; cells stamped with an older phase
    are treated as unvisited no matter what distance they still store.
    """

    def __init__(self, grid: HexGrid):
        self.grid = grid
        self.queue = HexCellPriorityQueue(grid)
        self.phase = 0

    @property
    def count(self) -> int:
        return self.queue.count

    def begin_phase(self) -> int:
        self.queue.clear()
        self.phase += 1
        return self.phase

    def is_unvisited(self, cell: int) -> bool:
        return bool(self.grid.search_phase[cell] < self.phase)

    def visit(self, cell: int, distance: int, heuristic: int = 0) -> None:
        """Stamp ``cell`` with the live phase and queue it."""
        if self.phase == 0:
            raise SearchPhaseError("No search phase is active")
        self.grid.search_phase[cell] = self.phase
        self.grid.distance[cell] = distance
        self.grid.search_heuristic[cell] = heuristic
        self.enqueue(cell)

    def enqueue(self, cell: int) -> None:
        if self.phase == 0:
            raise SearchPhaseError("No search phase is active")
        if self.grid.search_phase[cell] != self.phase:
            raise SearchPhaseError(
                f"Cell {cell} is stamped with phase {int(self.grid.search_phase[cell])}, "
                f"live phase is {self.phase}"
            )
        self.queue.enqueue(cell)

    def dequeue(self) -> Optional[int]:
        return self.queue.dequeue()

    def clear(self) -> None:
        self.queue.clear()
