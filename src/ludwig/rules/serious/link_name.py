# src/ludwig/rules/serious/link_name.py
from typing import List

from ludwig.dom.core import ElementBase, Finding, RuleDefinition, Severity
from ludwig.dom.query import attr, find_all, has_descendant


def _has_accessible_name(link: ElementBase) -> bool:
    if link.text:
        return True
    if (attr(link, 'aria-label') or '').strip() or attr(link, 'aria-labelledby'):
        return True
    # A linked image is named by its alt text
    return has_descendant(link, lambda n: n.tag == 'img' and (attr(n, 'alt') or '').strip() != '')


def check_link_name(root: ElementBase) -> List[Finding]:
    """Rule: a link with an href must have text, an aria-label or a named image."""
    results = []
    for link in find_all(root, 'a'):
        if not link.has('href'):
            continue
        if not _has_accessible_name(link):
            results.append(DEFINITION.finding(
                link,
                f"Link to {attr(link, 'href')!r} has no accessible name. "
                "Add link text or an aria-label."
            ))
    return results


DEFINITION = RuleDefinition(
    name="link-name",
    tier=Severity.SERIOUS,
    evaluate=check_link_name,
    summary="Links must have discernible text",
    links=["https://dequeuniversity.com/rules/axe/4.8/link-name"],
)
