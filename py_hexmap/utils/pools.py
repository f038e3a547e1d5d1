"""Reusable scratch lists for hot generation loops."""

from typing import List


class ListPool:
    """
    Hands out cleared lists and takes them back for reuse.

    Sequential reuse only: two callers running at once would share lists.
    """

    def __init__(self, max_size: int = 16):
        self.max_size = max_size
        self._free: List[list] = []

    def get(self) -> list:
        if self._free:
            return self._free.pop()
        return []

    def release(self, items: list) -> None:
        items.clear()
        if len(self._free) < self.max_size:
            self._free.append(items)

    def __len__(self) -> int:
        return len(self._free)


# Shared by erosion target selection across generation runs
erosion_candidates = ListPool()
