# src/ludwig/dom/builder.py
import logging
from typing import Dict, List, Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .core import ElementBase, ParseError

logger = logging.getLogger(__name__)


class SourceFormatter(HTMLFormatter):
    """
    Serializes a tag as close to its source text as the soup allows: minimal
    escaping, unclosed void elements ('<input id="a">', not '<input id="a"/>')
    and attributes in source order instead of sorted.
    """

    def __init__(self):
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml,
            void_element_close_prefix=None,
        )

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


SOURCE_FORMATTER = SourceFormatter()


class DOMBuilder:
    """
    Builder responsible for parsing raw HTML into the immutable Document Tree.
    The tree root is always a ``body`` element.
    """

    def __init__(self, features: str = "html.parser"):
        self.features = features

    def parse_doc(self, html: Union[str, bytes]) -> ElementBase:
        """
        Parses raw HTML content into a tree rooted at the document body.

        Args:
            html: The raw HTML source. Bytes must be UTF-8.

        Returns:
            ElementBase: The body node of a freshly built tree.

        Raises:
            ParseError: If the source is not text or the parser rejects it.
        """
        if isinstance(html, bytes):
            try:
                html = html.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Source is not valid UTF-8: {e}") from e
        if not isinstance(html, str):
            raise ParseError(f"Expected markup text, got {type(html).__name__}")

        # Strip a BOM so the first line still matches its key
        clean_html = html.replace('\ufeff', '')
        try:
            soup = BeautifulSoup(clean_html, self.features)
        except ParserRejectedMarkup as e:
            raise ParseError(f"Markup rejected by parser: {e}") from e

        try:
            return self._root_of(soup)
        except RecursionError as e:
            # Older bs4 releases serialize recursively
            raise ParseError(f"Markup nested too deeply to serialize: {e}") from e

    def _root_of(self, soup: BeautifulSoup) -> ElementBase:
        """Builds the tree from <body>, or from a synthesized body when there is none."""
        body = soup.find('body')
        if isinstance(body, Tag):
            return self._build_tree(body)

        # No <body> in the source: synthesize one from the top-level elements
        container = soup.find('html')
        if not isinstance(container, Tag):
            container = soup
        children = tuple(
            self._build_tree(child)
            for child in container.children
            if isinstance(child, Tag) and child.name != 'head'
        )
        logger.debug(f"No <body> found, synthesized root with {len(children)} children")
        return ElementBase(tag='body', children=children)

    def _build_tree(self, root: Tag) -> ElementBase:
        """
        Converts a BeautifulSoup Tag into an ElementBase without recursion, so
        deeply nested markup cannot hit the interpreter's recursion limit.
        Nodes are assembled post-order: a node is built once all its children are.
        """
        built: Dict[int, List[ElementBase]] = {}
        stack: List[Tuple[Tag, bool]] = [(root, False)]
        result = None

        while stack:
            tag, expanded = stack.pop()
            if not expanded:
                stack.append((tag, True))
                child_tags = [child for child in tag.children if isinstance(child, Tag)]
                stack.extend((child, False) for child in reversed(child_tags))
                continue

            node = ElementBase(
                tag=tag.name,
                attrs=self._flatten_attrs(tag.attrs),
                text=tag.get_text(" ", strip=True),
                markup=tag.decode(formatter=SOURCE_FORMATTER),
                sourceline=tag.sourceline,
                children=tuple(built.pop(id(tag), [])),
            )
            if tag is root:
                result = node
            else:
                built.setdefault(id(tag.parent), []).append(node)

        return result

    @staticmethod
    def _flatten_attrs(attrs: Dict[str, object]) -> Dict[str, str]:
        """Joins multi-valued attributes (e.g. ``class``) into plain strings."""
        flat: Dict[str, str] = {}
        for name, value in attrs.items():
            if isinstance(value, (list, tuple)):
                flat[name] = " ".join(str(v) for v in value)
            elif value is None:
                flat[name] = ""
            else:
                flat[name] = str(value)
        return flat


def parse(html: Union[str, bytes]) -> ElementBase:
    """Shortcut for ``DOMBuilder().parse_doc(html)``."""
    return DOMBuilder().parse_doc(html)
