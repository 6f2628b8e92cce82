# markup.py
"""
Markup construction helper for server-rendered pages.

Pages are element trees built with nested h(tag, props, *children) calls
and serialized to HTML with render_html(). Text and attribute values are
escaped with MarkupSafe; a Markup instance passes through untouched.
"""
from typing import Any, Dict, List, Optional, Union

from markupsafe import Markup, escape

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})


class Element:
    """One node of a page tree."""

    __slots__ = ("tag", "props", "children")

    def __init__(self, tag: str, props: Optional[Dict[str, Any]], children: List[Any]):
        self.tag = tag
        self.props = props or {}
        self.children = children

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.props!r}, {len(self.children)} children)"

    def find(self, element_id: str) -> Optional["Element"]:
        """Depth-first search for the element with the given id."""
        if self.props.get("id") == element_id:
            return self
        for child in self.children:
            if isinstance(child, Element):
                found = child.find(element_id)
                if found is not None:
                    return found
        return None

    def text(self) -> str:
        """Concatenated text content of the subtree."""
        parts = []
        for child in self.children:
            parts.append(child.text() if isinstance(child, Element) else str(child))
        return "".join(parts)


Child = Union[Element, str, int, float, None, list, tuple]


def _flatten(children, out: List[Any]) -> List[Any]:
    for child in children:
        if child is None or child is False:
            continue
        if isinstance(child, (list, tuple)):
            _flatten(child, out)
        else:
            out.append(child)
    return out


def h(tag: str, props: Optional[Dict[str, Any]] = None, *children: Child) -> Element:
    """Builds an element; nested lists of children are flattened."""
    return Element(tag, props, _flatten(children, []))


def _render_attrs(props: Dict[str, Any]) -> str:
    parts = []
    for name, value in props.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {escape(name)}")
        else:
            parts.append(f' {escape(name)}="{escape(value)}"')
    return "".join(parts)


def render_html(node: Child) -> Markup:
    """Serializes a tree (or a list of trees) to HTML."""
    if node is None or node is False:
        return Markup("")
    if isinstance(node, (list, tuple)):
        return Markup("").join(render_html(child) for child in node)
    if not isinstance(node, Element):
        return escape(node)

    attrs = _render_attrs(node.props)
    if node.tag in VOID_ELEMENTS:
        return Markup(f"<{node.tag}{attrs}>")
    inner = Markup("").join(render_html(child) for child in node.children)
    return Markup(f"<{node.tag}{attrs}>{inner}</{node.tag}>")
