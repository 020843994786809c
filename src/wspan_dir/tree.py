"""Ordered, parent-linked tree for decoded DIR messages.

Each node carries:

  id        unique within one tree; root = message type code, children
            derive ``parent.id + separator + index-at-append-time``
  name      section / field type code
  path      dotted type codes from the root (display only)
  value     raw text on leaves, None on branches
  depth     0 at the root

Children are owned by their parent and keep a plain back-reference to it.
Detaching a node clears that link, so a removed subtree becomes its own root.

Traversals deduplicate by ``id`` within one call and stop as soon as the
visitor returns ``False`` (``None`` keeps going).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeAlias

from wspan_dir.errors import TreeMutationError


ID_SEPARATOR = "/"
TEXT_MARKER = "|"
TEXT_SEPARATOR = "|- "
XML_INDENT = "  "

Visitor: TypeAlias = Callable[["DIRTree"], bool | None]


def node_id(parent: DIRTree, separator: str = ID_SEPARATOR) -> str:
    """Id for the next child appended to ``parent``."""
    return f"{parent.id}{separator}{len(parent.children)}"


class DIRTree:
    """One node of a decoded message; the root node stands for the tree."""

    __slots__ = (
        "id", "name", "path", "value", "depth", "children",
        "parent", "_separator",
    )

    def __init__(
        self,
        name: str,
        *,
        parent: DIRTree | None = None,
        value: str | None = None,
        path: str | None = None,
        id: str | None = None,
        separator: str = ID_SEPARATOR,
    ) -> None:
        self.name = name
        self.value = value
        self.children: list[DIRTree] = []
        if parent is None:
            self.parent: DIRTree | None = None
            self._separator = separator
            self.depth = 0
            self.path = path if path is not None else name
            self.id = id if id is not None else name
        else:
            self.parent = parent
            self._separator = parent._separator
            self.depth = parent.depth + 1
            self.path = path if path is not None else f"{parent.path}.{name}"
            self.id = id if id is not None else node_id(parent, self._separator)

    # -- structure ---------------------------------------------------------

    @property
    def is_leaf(self) -> bool:
        return self.value is not None

    def is_root(self) -> bool:
        return self.parent is None

    def root(self) -> DIRTree:
        node = self
        while (parent := node.parent) is not None:
            node = parent
        return node

    def append_child(
        self,
        name: str,
        *,
        value: str | None = None,
        path: str | None = None,
        id: str | None = None,
    ) -> DIRTree:
        """Create a node under this one and return it."""
        child = DIRTree(name, parent=self, value=value, path=path, id=id)
        self.children.append(child)
        return child

    def remove_child(self, arg: int | DIRTree) -> DIRTree:
        """Detach a child by position or by identity and return it."""
        if isinstance(arg, DIRTree):
            for index, child in enumerate(self.children):
                if child is arg:
                    return self._detach(index)
            raise TreeMutationError(f"Node {arg.id!r} is not a child of {self.id!r}")
        if isinstance(arg, int) and not isinstance(arg, bool) and 0 <= arg < len(self.children):
            return self._detach(arg)
        raise TreeMutationError(f"Invalid argument {arg!r}")

    def remove(self) -> DIRTree:
        """Detach this node from its parent."""
        parent = self.parent
        if parent is None:
            raise TreeMutationError(f"Cannot remove root node {self.id!r}")
        return parent.remove_child(self)

    def _detach(self, index: int) -> DIRTree:
        child = self.children.pop(index)
        child.parent = None
        return child

    # -- traversal ---------------------------------------------------------

    def walk(self) -> Iterator[DIRTree]:
        """Pre-order walk of this subtree, each id yielded once."""
        visited: set[str] = set()
        stack: list[DIRTree] = [self]
        while stack:
            node = stack.pop()
            if node.id not in visited:
                visited.add(node.id)
                yield node
            stack.extend(reversed(node.children))

    def walk_up(self) -> Iterator[DIRTree]:
        """This node and its children, then each ancestor and its children."""
        visited: set[str] = set()
        node: DIRTree | None = self
        while node is not None:
            for candidate in (node, *node.children):
                if candidate.id not in visited:
                    visited.add(candidate.id)
                    yield candidate
            node = node.parent

    def traverse_down(self, visitor: Visitor) -> None:
        for node in self.walk():
            if visitor(node) is False:
                return

    def traverse_up(self, visitor: Visitor) -> None:
        for node in self.walk_up():
            if visitor(node) is False:
                return

    def find(self, name: str) -> list[DIRTree]:
        """All nodes in this subtree whose type code is ``name``."""
        return [node for node in self.walk() if node.name == name]

    # -- serialization -----------------------------------------------------

    def to_text(self) -> str:
        return render_text(self)

    def to_xml(self) -> str:
        return render_xml(self)

    def to_dict(self) -> dict[str, Any]:
        """Nested mapping of this subtree; leaves carry ``value``, branches ``children``."""
        root: dict[str, Any] = {}
        stack: list[tuple[DIRTree, dict[str, Any]]] = [(self, root)]
        while stack:
            node, out = stack.pop()
            out.update(id=node.id, name=node.name, path=node.path, depth=node.depth)
            if node.value is not None:
                out["value"] = node.value
                continue
            children: list[dict[str, Any]] = [{} for _ in node.children]
            out["children"] = children
            stack.extend(zip(node.children, children))
        return root

    def __iter__(self) -> Iterator[DIRTree]:
        return iter(self.children)

    def __str__(self) -> str:
        return render_text(self)

    def __repr__(self) -> str:
        if self.value is not None:
            return f"DIRTree(id={self.id!r}, name={self.name!r}, value={self.value!r})"
        return f"DIRTree(id={self.id!r}, name={self.name!r}, children={len(self.children)})"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_text(
    tree: DIRTree,
    *,
    marker: str = TEXT_MARKER,
    separator: str = TEXT_SEPARATOR,
) -> str:
    """Indented listing: the root id, then one ``||- path = value`` per node."""
    lines: list[str] = []
    for node in tree.walk():
        if node.depth == 0:
            lines.append(node.id)
            continue
        line = f"{marker * node.depth}{separator}{node.path}"
        if node.value:
            line += f" = {node.value}"
        lines.append(line)
    return "\n".join(lines)


def render_xml(tree: DIRTree, *, indent: str = XML_INDENT) -> str:
    """XML document; element names drop ``/`` and leaf text is not escaped."""
    lines: list[str] = []
    # Entries are nodes to open, or already-built closing tags.
    stack: list[DIRTree | str] = [tree]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
            continue
        pad = indent * item.depth
        tag = item.name.replace("/", "")
        if item.children:
            lines.append(f"{pad}<{tag}>")
            stack.append(f"{pad}</{tag}>")
            stack.extend(reversed(item.children))
        else:
            lines.append(f"{pad}<{tag}>{item.value or ''}</{tag}>")
    return "\n".join(lines)
