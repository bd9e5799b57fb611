from __future__ import annotations

from dom_to_pptx.model import Geometry, ShapeItem
from dom_to_pptx.render_queue import RenderQueue

GEOMETRY = Geometry(0, 0, 1, 1)


def shape(z_index, dom_order, kind="rect"):
    return ShapeItem(z_index=z_index, dom_order=dom_order, geometry=GEOMETRY, kind=kind)


def test_orders_by_z_index_then_document_order() -> None:
    queue = RenderQueue()
    queue.extend([shape(1, 0), shape(0, 5), shape(0, 2), shape(-1, 9)])
    ordered = [(item.z_index, item.dom_order) for item in queue.ordered()]
    assert ordered == [(-1, 9), (0, 2), (0, 5), (1, 0)]


def test_equal_keys_keep_insertion_order() -> None:
    queue = RenderQueue()
    first = shape(0, 3, kind="rect")
    second = shape(0, 3, kind="ellipse")
    queue.add(first)
    queue.add(second)
    assert queue.ordered() == [first, second]
    assert len(queue) == 2


def test_ordering_does_not_consume_the_queue() -> None:
    queue = RenderQueue()
    queue.add(shape(2, 0))
    queue.add(shape(1, 1))
    assert queue.ordered() == queue.ordered()
    assert len(queue) == 2
