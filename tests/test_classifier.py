from __future__ import annotations

import pytest

from dom_to_pptx.classifier import classify, parse_z_index
from dom_to_pptx.model import ImageItem, ShapeItem, TextItem

from helpers import CONFIG, PNG, FakeBackend, border, node, run


def classify_one(n, parent=None, backend=None, dom_order=0):
    return run(classify(n, parent, CONFIG, dom_order, backend or FakeBackend()))


@pytest.mark.parametrize("style", [
    {"display": "none"},
    {"visibility": "hidden"},
    {"opacity": "0"},
])
def test_hidden_nodes_produce_nothing(style) -> None:
    result = classify_one(node(background_color="rgb(255, 0, 0)", children=["text"], **style))
    assert result.items == ()


def test_display_none_stops_recursion_but_visibility_hidden_does_not() -> None:
    assert classify_one(node(display="none")).stop_recursion is True
    assert classify_one(node(opacity="0")).stop_recursion is True
    assert classify_one(node(visibility="hidden")).stop_recursion is False


@pytest.mark.parametrize("box", [(0, 0, 0, 50), (0, 0, 50, 0)])
def test_zero_area_nodes_produce_nothing(box) -> None:
    result = classify_one(node(box=box, background_color="rgb(255, 0, 0)"))
    assert result.items == ()


def test_plain_container_with_fill_is_a_rect() -> None:
    result = classify_one(node(box=(0, 0, 96, 48), background_color="rgba(255, 0, 0, 0.5)", opacity="0.5",
                               z_index="3"))
    assert result.stop_recursion is False
    (shape,) = result.items
    assert isinstance(shape, ShapeItem)
    assert shape.kind == "rect"
    assert shape.z_index == 3
    assert shape.fill.color == "FF0000"
    assert shape.fill.alpha == pytest.approx(0.25)
    assert (shape.geometry.w, shape.geometry.h) == pytest.approx((1.0, 0.5))


def test_container_without_paint_emits_nothing_and_recurses() -> None:
    result = classify_one(node(children=[node(children=["nested"])]))
    assert result.items == ()
    assert result.stop_recursion is False


def test_circle_and_round_rect_kinds() -> None:
    (circle,) = classify_one(node(box=(0, 0, 100, 100), border_radius="50px",
                                  background_color="rgb(0, 0, 0)")).items
    assert circle.kind == "ellipse"
    (pill,) = classify_one(node(box=(0, 0, 200, 100), border_radius="10px",
                                background_color="rgb(0, 0, 0)")).items
    assert pill.kind == "roundRect"
    assert pill.radius_fraction == pytest.approx(0.2)


def test_uniform_border_and_shadow_on_shape() -> None:
    n = node(box_shadow="rgba(0, 0, 0, 0.5) 4px 3px 5px 0px", **border("2px", "rgb(0, 0, 255)"))
    (shape,) = classify_one(n).items
    assert shape.fill is None
    assert shape.border.color == "0000FF"
    assert shape.shadow.distance_pt == pytest.approx(3.75)


def test_standalone_text_item() -> None:
    result = classify_one(node(children=["Hello"], color="rgb(0, 128, 0)"))
    assert result.stop_recursion is True
    (item,) = result.items
    assert isinstance(item, TextItem)
    assert item.text.runs[0].text == "Hello"


def test_text_merges_into_styled_shape() -> None:
    result = classify_one(node(children=["Badge"], background_color="rgb(0, 0, 0)", border_radius="4px"))
    assert result.stop_recursion is True
    (shape,) = result.items
    assert isinstance(shape, ShapeItem)
    assert shape.kind == "roundRect"
    assert shape.text.runs[0].text == "Badge"


def test_list_item_geometry_widens_leftward() -> None:
    plain = classify_one(node(box=(96, 0, 96, 48), children=["x"])).items[0]
    listed = classify_one(node("LI", box=(96, 0, 96, 48), display="list-item", font_size="16px",
                               children=["x"])).items[0]
    shift = 16 / 96 * 1.5
    assert listed.geometry.x == pytest.approx(plain.geometry.x - shift)
    assert listed.geometry.w == pytest.approx(plain.geometry.w + shift)


def test_svg_is_captured_whole() -> None:
    backend = FakeBackend()
    svg = node("SVG", box=(0, 0, 24, 24), children=[node("PATH", attributes={"d": "M0 0L24 24"})],
               attributes={"viewBox": "0 0 24 24"})
    result = classify_one(svg, backend=backend)
    assert result.stop_recursion is True
    (image,) = result.items
    assert isinstance(image, ImageItem)
    assert image.payload == PNG
    markup, width, height = backend.svgs[0]
    assert (width, height) == (24, 24)
    assert "path" in markup


def test_image_uses_clipping_parent_radius() -> None:
    backend = FakeBackend()
    parent = node(box=(0, 0, 100, 100), overflow="hidden", border_radius="50px")
    img = node("IMG", box=(0, 0, 100, 100), attributes={"src": "https://example.com/a.png"}, object_fit="cover")
    result = classify_one(img, parent=parent, backend=backend)
    assert result.stop_recursion is True
    src, spec = backend.images[0]
    assert src == "https://example.com/a.png"
    assert spec.radius == 50
    assert spec.ellipse is True
    assert spec.object_fit == "cover"


def test_image_ignores_parent_radius_when_not_clipped() -> None:
    backend = FakeBackend()
    parent = node(box=(0, 0, 100, 100), border_radius="50px")
    img = node("IMG", box=(0, 0, 100, 100), attributes={"src": "a.png"})
    classify_one(img, parent=parent, backend=backend)
    assert backend.images[0][1].radius == 0


def test_failed_raster_yields_no_item() -> None:
    img = node("IMG", attributes={"src": "blocked.png"})
    result = classify_one(img, backend=FakeBackend(payload=None))
    assert result.items == ()
    assert result.stop_recursion is True


def test_image_wrapper_suppresses_background_and_recurses() -> None:
    wrapper = node(box=(0, 0, 100, 100), background_color="rgb(255, 0, 0)",
                   children=[node("IMG", box=(1, 1, 99, 99), attributes={"src": "a.png"})])
    result = classify_one(wrapper)
    assert result.items == ()
    assert result.stop_recursion is False


def test_gradient_background_becomes_image_with_text_above() -> None:
    backend = FakeBackend()
    n = node(background_image="linear-gradient(to right, rgb(0, 0, 0), rgb(255, 255, 255))",
             children=["On gradient"], z_index="2")
    result = classify_one(n, backend=backend, dom_order=5)
    image, text = result.items
    assert isinstance(image, ImageItem)
    assert isinstance(text, TextItem)
    assert (image.z_index, text.z_index) == (2, 3)
    assert image.dom_order == text.dom_order == 5
    assert "linearGradient" in backend.svgs[0][0]


def test_gradient_text_does_not_paint_background() -> None:
    backend = FakeBackend()
    n = node(background_image="linear-gradient(to right, rgb(1, 2, 3), rgb(4, 5, 6))", background_clip="text",
             color="rgba(0, 0, 0, 0)", children=["Shiny"])
    (text,) = classify_one(n, backend=backend).items
    assert isinstance(text, TextItem)
    assert text.text.runs[0].color == "010203"
    assert backend.svgs == []


def test_soft_edge_blur_expands_geometry() -> None:
    backend = FakeBackend()
    n = node(box=(0, 0, 96, 96), background_color="rgb(0, 0, 255)", filter="blur(8px)")
    (image,) = classify_one(n, backend=backend).items
    pad = 24 / 96
    assert image.geometry.x == pytest.approx(-pad)
    assert image.geometry.w == pytest.approx(1 + pad * 2)
    assert backend.svgs[0][1] == pytest.approx(96 + 48)


def test_composite_border_square_corners_uses_edge_rects() -> None:
    n = node(background_color="rgb(255, 255, 255)", **border("4px", "rgb(255, 0, 0)", sides=("left",)))
    items = classify_one(n).items
    base, left = items
    assert base.z_index == 0
    assert left.z_index == 1
    assert left.fill.color == "FF0000"
    assert left.geometry.w == pytest.approx(4 / 96)


def test_composite_border_rounded_uses_overlay() -> None:
    backend = FakeBackend()
    style = {**border("4px", "rgb(255, 0, 0)", sides=("top",)), **border("1px", "rgb(0, 0, 0)", sides=("bottom",))}
    n = node(border_radius="12px", background_color="rgb(255, 255, 255)", **style)
    base, overlay = classify_one(n, backend=backend).items
    assert isinstance(base, ShapeItem)
    assert base.border is None
    assert isinstance(overlay, ImageItem)
    assert overlay.z_index == base.z_index + 1
    assert backend.svgs[0][0].count("<path") == 2


def test_parse_z_index() -> None:
    assert parse_z_index("auto") == 0
    assert parse_z_index("10") == 10
    assert parse_z_index("-1") == -1
    assert parse_z_index("weird") == 0


def test_rotated_composite_border_uses_overlay() -> None:
    backend = FakeBackend()
    n = node(box=(0, 0, 100, 50), transform="matrix(0, 1, -1, 0, 0, 0)", background_color="rgb(255, 255, 255)",
             **border("4px", "rgb(255, 0, 0)", sides=("left",)))
    base, overlay = classify_one(n, backend=backend).items
    assert base.geometry.rotation == 90
    assert isinstance(overlay, ImageItem)
    assert overlay.geometry == base.geometry
    assert overlay.z_index == base.z_index + 1
    assert backend.svgs[0][0].count("<path") == 1


def test_text_container_hands_back_inline_icons() -> None:
    icon = node("SVG", box=(4, 4, 16, 16), display="inline")
    result = classify_one(node(children=[icon, " Label"]))
    (text,) = result.items
    assert [r.text for r in text.text.runs] == ["Label"]
    assert result.stop_recursion is True
    assert result.embedded == (icon,)
