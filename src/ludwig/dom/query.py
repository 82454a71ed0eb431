# src/ludwig/dom/query.py
from typing import Iterator, List, Optional

from .core import ElementBase


def iter_elements(root: Optional[ElementBase]) -> Iterator[ElementBase]:
    """Yields every descendant of ``root`` in document (preorder) order, excluding the root."""
    if root is None:
        return
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_all(root: Optional[ElementBase], *tags: str) -> List[ElementBase]:
    """Returns all descendants whose tag is one of ``tags``, in document order."""
    wanted = {t.lower() for t in tags}
    return [node for node in iter_elements(root) if node.tag in wanted]


def direct_children(node: ElementBase, tag: str) -> List[ElementBase]:
    """Returns the direct children of ``node`` with the given tag."""
    tag = tag.lower()
    return [child for child in node.children if child.tag == tag]


def attr(node: ElementBase, name: str) -> Optional[str]:
    """Safe attribute access: ``None`` when absent."""
    return node.attrs.get(name)


def attr_in(node: ElementBase, name: str, allowed) -> bool:
    """True if the attribute is present and its exact value is in ``allowed``."""
    value = node.attrs.get(name)
    return value is not None and value in allowed


def has_descendant(node: ElementBase, predicate) -> bool:
    return any(predicate(child) for child in iter_elements(node))
