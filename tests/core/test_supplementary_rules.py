# tests/core/test_supplementary_rules.py
from ludwig.dom.builder import parse
from ludwig.rules.critical.image_alt import check_image_alt
from ludwig.rules.serious.iframe_title import check_iframe_title
from ludwig.rules.serious.link_name import check_link_name


def test_image_alt():
    root = parse(
        '<body><img src="a.png"><img src="b.png" alt=""><img src="c.png" alt="Logo">'
        '<img src="d.png" role="presentation"><img src="e.png" aria-hidden="true"></body>'
    )
    assert [f.key for f in check_image_alt(root)] == ['<img src="a.png">']


def test_iframe_title():
    root = parse(
        '<body><iframe src="a.html"></iframe><iframe src="b.html" title=" "></iframe>'
        '<iframe src="c.html" title="Map"></iframe></body>'
    )
    findings = check_iframe_title(root)
    assert [f.key for f in findings] == [
        '<iframe src="a.html"></iframe>',
        '<iframe src="b.html" title=" "></iframe>',
    ]
    assert "empty" in findings[1].description


def test_link_name():
    root = parse(
        '<body><a href="/a"></a><a href="/b">Home</a><a href="/c" aria-label="Close"></a>'
        '<a href="/d"><img src="x.png" alt="Profile"></a><a name="anchor"></a></body>'
    )
    assert [f.key for f in check_link_name(root)] == ['<a href="/a"></a>']
