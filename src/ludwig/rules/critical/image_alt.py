# src/ludwig/rules/critical/image_alt.py
from typing import List

from ludwig.dom.core import ElementBase, Finding, RuleDefinition, Severity
from ludwig.dom.query import attr, find_all

PRESENTATIONAL_ROLES = {"presentation", "none"}


def check_image_alt(root: ElementBase) -> List[Finding]:
    """
    Rule: an <img> needs an alt attribute.
    alt="" is accepted (decorative image), as are images hidden from assistive technology.
    """
    res = []
    for img in find_all(root, 'img'):
        if img.has('alt'):
            continue
        if attr(img, 'role') in PRESENTATIONAL_ROLES or attr(img, 'aria-hidden') == 'true':
            continue
        res.append(DEFINITION.finding(
            img,
            f"Image is missing an alt attribute: {attr(img, 'src') or '(no src)'}. "
            "Describe the image in alt, or use alt=\"\" if it is purely decorative."
        ))
    return res


DEFINITION = RuleDefinition(
    name="image-alt",
    tier=Severity.CRITICAL,
    evaluate=check_image_alt,
    summary="Images must have alternate text",
    links=[
        "https://www.w3.org/WAI/tutorials/images/",
        "https://dequeuniversity.com/rules/axe/4.8/image-alt",
    ],
)
