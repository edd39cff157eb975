"""
Tree enumeration, expansion state and the row render model.

All walks use an explicit work-stack so that deeply nested input cannot
exhaust the interpreter's call stack.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

from .paths import JsonPath
from .values import (
    JsonValue,
    Kind,
    classify,
    format_value,
    is_container,
    summarize,
)

logger = logging.getLogger(__name__)


def _children(value: JsonValue, path: JsonPath) -> List[Tuple[JsonPath, JsonValue]]:
    if isinstance(value, dict):
        return [(path.child_of_object(key), child) for key, child in value.items()]
    if isinstance(value, list):
        return [(path.child_of_array(index), child) for index, child in enumerate(value)]
    return []


def iter_nodes(value: JsonValue) -> Iterator[Tuple[JsonPath, JsonValue, int]]:
    """
    Depth-first pre-order walk yielding ``(path, node, depth)``.

    Objects are descended in insertion order, arrays by increasing index.
    """
    stack = [(JsonPath.ROOT, value, 0)]
    while stack:
        path, node, depth = stack.pop()
        yield path, node, depth
        # Reversed so the first child is popped first
        for child_path, child in reversed(_children(node, path)):
            stack.append((child_path, child, depth + 1))


def iter_paths(value: JsonValue) -> Iterator[JsonPath]:
    """Lazy pre-order sequence of every path in the tree, root first."""
    for path, _, _ in iter_nodes(value):
        yield path


def enumerate_all_paths(value: JsonValue) -> Set[JsonPath]:
    """The set of every addressable path in ``value``, root included."""
    return set(iter_paths(value))


def find_value(value: JsonValue, path: JsonPath) -> JsonValue:
    """
    Resolve ``path`` inside ``value``.

    Raises:
        KeyError: If an object segment does not exist.
        IndexError: If an array segment is out of range.
    """
    node = value
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(node, list) or not 0 <= segment < len(node):
                raise IndexError(f"No element [{segment}] at {path}")
            node = node[segment]
        else:
            if not isinstance(node, dict) or segment not in node:
                raise KeyError(f"No field {segment!r} at {path}")
            node = node[segment]
    return node


def copy_text(value: JsonValue, path: JsonPath) -> str:
    """Text a view puts on the clipboard for the leaf at ``path``."""
    node = find_value(value, path)
    return format_value(node, classify(node), quote_strings=False)


class ExpansionState:
    """
    The set of open paths for one loaded JSON value, plus the selected path.

    Loading a new root value resets the state to "everything open"; collapsing
    all leaves only the root open.

    Example:
        >>> state = ExpansionState()
        >>> state.load({"a": [1, 2]})
        >>> state.is_expanded(JsonPath.parse("a"))
        True
        >>> state.collapse_all()
        >>> state.is_expanded(JsonPath.parse("a"))
        False
    """

    def __init__(self):
        self._open: Set[JsonPath] = {JsonPath.ROOT}
        self._root: JsonValue = None
        self._loaded = False
        self.selected: Optional[JsonPath] = None

    @property
    def open_paths(self) -> Set[JsonPath]:
        return set(self._open)

    def load(self, value: JsonValue) -> None:
        """Reset for a root value, unless it is the value already loaded."""
        if self._loaded and self._root is value:
            return
        self._root = value
        self._loaded = True
        self.selected = None
        self.expand_all(value)

    def toggle(self, path: JsonPath) -> None:
        if path in self._open:
            self._open.discard(path)
        else:
            self._open.add(path)

    def expand_all(self, value: JsonValue) -> None:
        self._open = enumerate_all_paths(value)
        logger.debug("Expanded %d paths", len(self._open))

    def collapse_all(self) -> None:
        self._open = {JsonPath.ROOT}

    def is_expanded(self, path: JsonPath) -> bool:
        return path in self._open

    def select(self, path: Optional[JsonPath]) -> None:
        """
        Select ``path``, or clear the selection with None.

        Raises:
            LookupError: If ``path`` does not exist in the loaded value.
        """
        if path is not None:
            if not self._loaded:
                raise LookupError("No JSON value loaded")
            find_value(self._root, path)
        self.selected = path

    def is_selected(self, path: JsonPath) -> bool:
        return self.selected is not None and self.selected == path


@dataclass(frozen=True)
class TreeRow:
    """One visible row of the tree view."""

    path: JsonPath
    label: str
    kind: Kind
    depth: int
    expandable: bool
    expanded: bool
    selected: bool
    display: Optional[str]
    """Formatted value for leaves and collapsed containers, None when expanded."""
    summary: Optional[str]
    """"N items" / "N properties" for containers."""


def render_rows(value: JsonValue, state: ExpansionState, quote_strings: bool) -> List[TreeRow]:
    """
    Flatten ``value`` into the rows a view draws, in pre-order.

    Children of collapsed containers are skipped.
    """
    rows = []
    stack = [(JsonPath.ROOT, value, 0)]
    while stack:
        path, node, depth = stack.pop()
        kind = classify(node)
        expandable = is_container(kind)
        expanded = expandable and state.is_expanded(path)
        rows.append(
            TreeRow(
                path=path,
                label=path.last_segment_label(),
                kind=kind,
                depth=depth,
                expandable=expandable,
                expanded=expanded,
                selected=state.is_selected(path),
                display=None if expanded else format_value(node, kind, quote_strings),
                summary=summarize(node, kind),
            )
        )
        if expanded:
            for child_path, child in reversed(_children(node, path)):
                stack.append((child_path, child, depth + 1))
    return rows
