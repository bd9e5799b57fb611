from __future__ import annotations

from lxml import etree

from dom_to_pptx.gradients import parse_linear_gradient
from dom_to_pptx.model import BorderSide, Box, CompositeBorder, StyleSnapshot, TextNode, VisualNode
from dom_to_pptx.svg import SVG_NS, XLINK_NS, blurred_svg, composite_border_svg, gradient_svg, svg_document

GRADIENT = parse_linear_gradient("linear-gradient(to right, rgb(255, 0, 0), rgb(0, 0, 255))")


def parse(markup):
    return etree.fromstring(markup.encode("utf-8"))


def q(tag):
    return "{%s}%s" % (SVG_NS, tag)


def test_gradient_svg_stops_and_axis() -> None:
    root = parse(gradient_svg(200, 100, GRADIENT))
    assert root.get("viewBox") == "0 0 200 100"
    grad = root.find("%s/%s" % (q("defs"), q("linearGradient")))
    assert (grad.get("x1"), grad.get("x2")) == ("0%", "100%")
    assert (grad.get("y1"), grad.get("y2")) == ("0%", "0%")
    stops = grad.findall(q("stop"))
    assert [s.get("stop-color") for s in stops] == ["#FF0000", "#0000FF"]
    assert [s.get("offset") for s in stops] == ["0%", "100%"]
    rect = root.find(q("rect"))
    assert rect.get("fill") == "url(#grad)"


def test_gradient_svg_stroke_stays_inside_the_box() -> None:
    root = parse(gradient_svg(100, 60, GRADIENT, radius=10, stroke=("000000", 4)))
    rect = root.find(q("rect"))
    assert (rect.get("x"), rect.get("y")) == ("2", "2")
    assert (rect.get("width"), rect.get("height")) == ("96", "56")
    assert rect.get("rx") == "8"
    assert rect.get("stroke") == "#000000"
    assert rect.get("stroke-width") == "4"


def test_gradient_svg_circle() -> None:
    root = parse(gradient_svg(80, 80, GRADIENT, radius=40))
    assert root.find(q("rect")) is None
    ellipse = root.find(q("ellipse"))
    assert (ellipse.get("cx"), ellipse.get("rx")) == ("40", "40")


def test_blurred_svg_is_padded() -> None:
    markup, padding = blurred_svg(100, 50, "00FF00", 0, 4)
    assert padding == 12
    root = parse(markup)
    assert (root.get("width"), root.get("height")) == ("124", "74")
    blur = root.find("%s/%s/%s" % (q("defs"), q("filter"), q("feGaussianBlur")))
    assert blur.get("stdDeviation") == "4"
    rect = root.find(q("rect"))
    assert (rect.get("x"), rect.get("fill"), rect.get("filter")) == ("12", "#00FF00", "url(#f1)")


def test_composite_border_svg_draws_visible_sides_only() -> None:
    border = CompositeBorder(
        top=BorderSide(4, "FF0000"),
        right=BorderSide(0, "000000"),
        bottom=BorderSide(2, "0000FF"),
        left=BorderSide(3, None),
    )
    root = parse(composite_border_svg(100, 50, 10, border))
    paths = root.findall(q("path"))
    assert [p.get("stroke") for p in paths] == ["#FF0000", "#0000FF"]
    assert all(p.get("fill") == "none" for p in paths)
    assert paths[0].get("d").startswith("M ")


def test_composite_border_svg_nothing_visible() -> None:
    empty = BorderSide(0, None)
    assert composite_border_svg(100, 50, 10, CompositeBorder(empty, empty, empty, empty)) is None


def svg_node(tag, local_name, attributes=None, children=(), **style):
    return VisualNode(tag=tag, box=Box(0, 0, 24, 24), style=StyleSnapshot(**style),
                      attributes=attributes or {}, local_name=local_name, children=tuple(children))


def test_svg_document_inlines_computed_styles() -> None:
    stop = svg_node("STOP", "stop", {"offset": "0"})
    gradient = svg_node("LINEARGRADIENT", "linearGradient", {"id": "g"}, [stop])
    path = svg_node("PATH", "path", {"d": "M0 0", "style": "fill: var(--x)"}, fill="rgb(255, 0, 0)",
                    stroke="none", stroke_width="2px")
    label = svg_node("TEXT", "text", {"xlink:href": "#g"}, [TextNode("Hi")])
    root = svg_node("SVG", "svg", {"viewBox": "0 0 24 24", "@click": "go", "xmlns": SVG_NS},
                    [gradient, path, label])

    doc = parse(svg_document(root, 48, 48))
    assert doc.tag == q("svg")
    assert (doc.get("width"), doc.get("height"), doc.get("viewBox")) == ("48", "48", "0 0 24 24")
    assert set(doc.keys()) == {"viewBox", "width", "height", "style"}
    assert doc.find(q("linearGradient")).find(q("stop")).get("offset") == "0"

    drawn = doc.find(q("path"))
    assert drawn.get("stroke") == "none"
    assert "fill: rgb(255, 0, 0)" in drawn.get("style")
    assert "stroke-width: 2px" in drawn.get("style")
    assert "var(--x)" not in drawn.get("style")

    text = doc.find(q("text"))
    assert text.text == "Hi"
    assert text.get("{%s}href" % XLINK_NS) == "#g"
