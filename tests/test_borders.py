from __future__ import annotations

import pytest

from dom_to_pptx.borders import composite_border_items, resolve_border
from dom_to_pptx.model import CompositeBorder, Geometry, StyleSnapshot, UniformBorder

from helpers import border


def test_identical_sides_resolve_to_uniform() -> None:
    resolved = resolve_border(StyleSnapshot(**border("4px", "rgb(0, 0, 255)", "dashed")), scale=1.0)
    assert isinstance(resolved, UniformBorder)
    assert resolved.color == "0000FF"
    assert resolved.width_px == 4
    assert resolved.width_inches == pytest.approx(4 / 96)
    assert resolved.dash_style == "dash"


def test_no_visible_border() -> None:
    assert resolve_border(StyleSnapshot(), scale=1.0) is None
    assert resolve_border(StyleSnapshot(**border("3px", line_style="none")), scale=1.0) is None
    assert resolve_border(StyleSnapshot(**border("3px", color="rgba(0, 0, 0, 0)")), scale=1.0) is None


def test_differing_sides_resolve_to_composite() -> None:
    style = StyleSnapshot(**border("4px", "rgb(255, 0, 0)", sides=("left",)))
    resolved = resolve_border(style, scale=1.0)
    assert isinstance(resolved, CompositeBorder)
    assert resolved.left.width_px == 4
    assert resolved.left.color == "FF0000"
    assert resolved.top.width_px == 0


def test_composite_items_hug_each_edge() -> None:
    style = StyleSnapshot(**{**border("96px", "rgb(0, 0, 0)"), **border("48px", "rgb(255, 0, 0)", sides=("right",))})
    resolved = resolve_border(style, scale=1.0)
    items = composite_border_items(resolved, Geometry(1, 1, 4, 2), scale=1.0, z_index=3, dom_order=7)

    assert len(items) == 4
    assert all(item.z_index == 4 and item.dom_order == 7 for item in items)
    top, right, bottom, left = (item.geometry for item in items)
    assert (top.x, top.y, top.w, top.h) == pytest.approx((1, 1, 4, 1))
    assert (right.x, right.y, right.w, right.h) == pytest.approx((4.5, 1, 0.5, 2))
    assert (bottom.x, bottom.y, bottom.w, bottom.h) == pytest.approx((1, 2, 4, 1))
    assert (left.x, left.y, left.w, left.h) == pytest.approx((1, 1, 1, 2))
    assert items[1].fill.color == "FF0000"
