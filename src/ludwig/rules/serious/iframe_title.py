# src/ludwig/rules/serious/iframe_title.py
from typing import List

from ludwig.dom.core import ElementBase, Finding, RuleDefinition, Severity
from ludwig.dom.query import attr, find_all


def check_iframe_title(root: ElementBase) -> List[Finding]:
    """Rule: an <iframe> needs a non-blank title."""
    results = []
    for iframe in find_all(root, 'iframe'):
        title = attr(iframe, 'title')
        if title is None:
            results.append(DEFINITION.finding(iframe, "Iframe does not have a title attribute."))
        elif not title.strip():
            results.append(DEFINITION.finding(iframe, "Iframe title attribute is empty."))
    return results


DEFINITION = RuleDefinition(
    name="iframe-title",
    tier=Severity.SERIOUS,
    evaluate=check_iframe_title,
    summary="Frames must have an accessible name",
    links=["https://dequeuniversity.com/rules/axe/4.8/frame-title"],
)
