"""
Render queue and z-order resolution.
"""

from typing import Iterable, List

from .model import RenderItem


def paint_order(item: RenderItem):
    return (item.z_index, item.dom_order)


class RenderQueue:
    """
    Flat collection of render items for one slide.

    Items are never modified; `ordered()` returns them stable-sorted by
    (z_index, dom_order), so items of one node keep their insertion order.
    """

    def __init__(self):
        self._items: List[RenderItem] = []

    def add(self, item: RenderItem) -> None:
        self._items.append(item)

    def extend(self, items: Iterable[RenderItem]) -> None:
        self._items.extend(items)

    def __len__(self) -> int:
        return len(self._items)

    def ordered(self) -> List[RenderItem]:
        return sorted(self._items, key=paint_order)
