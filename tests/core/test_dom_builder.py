# tests/core/test_dom_builder.py
import pytest

from ludwig.dom.builder import DOMBuilder, parse
from ludwig.dom.core import ParseError
from ludwig.dom.query import direct_children, find_all, iter_elements


@pytest.fixture
def builder():
    return DOMBuilder()


def test_root_is_body(builder):
    root = builder.parse_doc("<html><head><title>t</title></head><body><p>Hi</p></body></html>")
    assert root.tag == "body"
    assert [child.tag for child in root.children] == ["p"]


def test_missing_body_is_synthesized(builder):
    """Fragments without <body> still get a body root, without the <head>."""
    root = builder.parse_doc("<head><title>x</title></head><form></form><table></table>")
    assert root.tag == "body"
    assert root.markup == ""
    assert [child.tag for child in root.children] == ["form", "table"]


def test_markup_matches_single_line_source(builder):
    """Outer markup reproduces single-line source, including unclosed void elements."""
    source = '<body><label for="a">Name</label><input id="a" type="text"><img src="x.png" alt=""></body>'
    root = builder.parse_doc(source)
    markups = [node.markup for node in iter_elements(root)]
    assert markups == [
        '<label for="a">Name</label>',
        '<input id="a" type="text">',
        '<img src="x.png" alt="">',
    ]


def test_attributes_are_flat_strings(builder):
    root = builder.parse_doc('<body><div class="a b" hidden></div></body>')
    div = root.children[0]
    assert div.get("class") == "a b"
    assert div.get("hidden") == ""
    assert div.get("missing") is None
    assert div.has("hidden")


def test_sourceline_is_recorded(builder):
    root = builder.parse_doc("<body>\n<p>one</p>\n<p>two</p>\n</body>")
    assert [p.sourceline for p in find_all(root, "p")] == [2, 3]


def test_tree_is_immutable(builder):
    root = builder.parse_doc("<body><p>x</p></body>")
    with pytest.raises(Exception):
        root.tag = "div"


def test_empty_source_gives_empty_body():
    root = parse("")
    assert root.tag == "body"
    assert root.children == ()


def test_bom_is_stripped():
    root = parse("\ufeff<body><p>x</p></body>")
    assert root.children[0].markup == "<p>x</p>"


@pytest.mark.parametrize("bad", [None, 42, b"\xff\xfe\xfa"])
def test_unparseable_input_raises_parse_error(bad):
    with pytest.raises(ParseError):
        parse(bad)


def test_query_helpers_preserve_document_order():
    root = parse("<body><form><label>a</label><div><label>nested</label></div><label>b</label></form></body>")
    form = find_all(root, "form")[0]
    assert [l.text for l in direct_children(form, "label")] == ["a", "b"]
    assert [l.text for l in find_all(root, "label")] == ["a", "nested", "b"]


def test_deep_nesting_builds_full_tree():
    depth = 1200
    root = parse("<body>" + "<div>" * depth + "<p>x</p>" + "</div>" * depth + "</body>")
    nodes = list(iter_elements(root))
    assert len(nodes) == depth + 1
    assert nodes[-1].markup == "<p>x</p>"
    assert nodes[-2].children[0] is nodes[-1]
