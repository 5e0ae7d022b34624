"""
DOM module for scrape_it.

Thin selection layer over BeautifulSoup/soupsieve. A Selection is an ordered
list of nodes supporting scoped queries, positional picks, ancestor lookup and
a fixed set of named content accessors.
"""

import logging
from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, PageElement, PreformattedString, Script, Stylesheet, TemplateString

logger = logging.getLogger(__name__)

Markup = Union[str, bytes]

# Strings that count as element text, including script, style and template bodies
TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)


def parse(markup: Markup) -> BeautifulSoup:
    """
    Parse markup into a document tree.

    Attributes such as ``class`` are kept as plain strings so attribute reads
    return the value exactly as written.
    """
    return BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)


def is_text_node(node: PageElement) -> bool:
    """True for plain text nodes; comments, CDATA and doctypes are excluded."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class Selection:
    """Ordered, duplicate free set of document nodes."""

    ACCESSORS = frozenset({"text", "html", "outer_html", "val", "data"})

    def __init__(self, nodes: Optional[List[PageElement]] = None):
        self.nodes: List[PageElement] = list(nodes or [])

    @classmethod
    def of(cls, source: Union["Selection", PageElement]) -> "Selection":
        """Wrap a document, tag or existing selection."""
        if isinstance(source, Selection):
            return source
        return cls([source])

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[PageElement]:
        return iter(self.nodes)

    def __repr__(self) -> str:
        return f"Selection({len(self.nodes)} nodes)"

    @property
    def first(self) -> Optional[PageElement]:
        return self.nodes[0] if self.nodes else None

    def each(self) -> List["Selection"]:
        """Split into one single-node selection per node."""
        return [Selection([node]) for node in self.nodes]

    def find(self, selector: str) -> "Selection":
        """Descendants of the selected nodes matching ``selector``."""
        found: List[PageElement] = []
        seen = set()
        for node in self.nodes:
            if not isinstance(node, Tag):
                continue
            for match in node.select(selector):
                if id(match) not in seen:
                    seen.add(id(match))
                    found.append(match)
        return Selection(found)

    def eq(self, index: int) -> "Selection":
        """The node at ``index``; negative values count from the end."""
        if index < 0:
            index += len(self.nodes)
        if 0 <= index < len(self.nodes):
            return Selection([self.nodes[index]])
        return Selection()

    def contents(self) -> "Selection":
        """Direct children (elements and text) of every selected element."""
        children: List[PageElement] = []
        for node in self.nodes:
            if isinstance(node, Tag):
                children.extend(node.contents)
        return Selection(children)

    def text_nodes(self) -> "Selection":
        return Selection([child for child in self.contents() if is_text_node(child)])

    def closest(self, selector: str) -> "Selection":
        """
        Nearest ancestor matching ``selector`` for each node.

        The search starts at the node itself; text nodes start at their parent.
        """
        found: List[PageElement] = []
        seen = set()
        for node in self.nodes:
            start = node if isinstance(node, Tag) else node.parent
            if start is None or isinstance(start, BeautifulSoup):
                continue
            match = start.css.closest(selector)
            if match is not None and id(match) not in seen:
                seen.add(id(match))
                found.append(match)
        return Selection(found)

    def attr(self, name: str) -> Optional[str]:
        node = self.first
        if not isinstance(node, Tag):
            return None
        value = node.get(name)
        if isinstance(value, list):
            # Documents parsed elsewhere may still split multi-valued attributes
            value = " ".join(value)
        return value

    # Named accessors

    def text(self) -> str:
        parts = []
        for node in self.nodes:
            if isinstance(node, Tag):
                parts.append(node.get_text(types=TEXT_TYPES))
            elif is_text_node(node):
                parts.append(str(node))
        return "".join(parts)

    def html(self) -> Optional[str]:
        node = self.first
        if not isinstance(node, Tag):
            return None
        return node.decode_contents()

    def outer_html(self) -> str:
        return "".join(str(node) for node in self.nodes)

    def val(self) -> Optional[Union[str, List[str]]]:
        """Form value of the first element, following browser form rules."""
        node = self.first
        if not isinstance(node, Tag):
            return None
        if node.name == "textarea":
            return node.get_text()
        if node.name == "select":
            selected = [option for option in node.find_all("option") if option.has_attr("selected")]
            values = [_option_value(option) for option in selected]
            if node.has_attr("multiple"):
                return values
            if values:
                return values[0]
            first_option = node.find("option")
            return _option_value(first_option) if first_option is not None else None
        if node.name == "option":
            return _option_value(node)
        return node.get("value")

    def data(self) -> Optional[str]:
        """Raw content of a selected text node."""
        node = self.first
        if node is not None and is_text_node(node):
            return str(node)
        return None

    def read(self, accessor: str):
        """Invoke the named accessor."""
        if accessor not in self.ACCESSORS:
            raise ValueError(f"Unknown accessor: {accessor}")
        return getattr(self, accessor)()


def _option_value(option: Tag) -> str:
    value = option.get("value")
    return value if value is not None else option.get_text()
