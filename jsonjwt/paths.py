"""
Path model for addressing nodes inside a JSON value.

A path is an ordered sequence of segments: a ``str`` segment names an object
field, an ``int`` segment is an array index. The empty path is the root.
"""

import re
from typing import Iterator, Tuple, Union

Segment = Union[str, int]

ROOT_LABEL = "root"

_TOKEN_RE = re.compile(r"\[(\d+)\]|\.?([^.\[\]]+)")


class JsonPath:
    """
    Immutable, hashable address of one node in a JSON tree.

    Example:
        >>> path = JsonPath().child_of_object("b").child_of_array(0)
        >>> str(path)
        'b[0]'
        >>> path.last_segment_label()
        '0'
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Tuple[Segment, ...] = ()):
        self._segments = tuple(segments)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def is_root(self) -> bool:
        return not self._segments

    def child_of_object(self, key: str) -> "JsonPath":
        """Path of the field ``key`` of the object at this path."""
        return JsonPath(self._segments + (key,))

    def child_of_array(self, index: int) -> "JsonPath":
        """Path of element ``index`` of the array at this path."""
        return JsonPath(self._segments + (index,))

    def last_segment_label(self) -> str:
        """Display name of the final segment, or "root" for the empty path."""
        if not self._segments:
            return ROOT_LABEL
        return str(self._segments[-1])

    @classmethod
    def parse(cls, text: str) -> "JsonPath":
        """
        Parse the dotted/bracketed form produced by ``str()``.

        Args:
            text: Address such as ``"b[0]"`` or ``"a.b"``; empty for the root.

        Raises:
            ValueError: If the text is not a well-formed address.
        """
        text = text.strip()
        segments = []
        pos = 0
        while pos < len(text):
            match = _TOKEN_RE.match(text, pos)
            if not match or (match.group(2) is not None and pos > 0 and text[pos] != "."):
                raise ValueError(f"Malformed path {text!r} at position {pos}")
            if match.group(1) is not None:
                segments.append(int(match.group(1)))
            else:
                segments.append(match.group(2))
            pos = match.end()
        return cls(tuple(segments))

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonPath):
            return NotImplemented
        # type() keeps the field "0" apart from the index 0
        return [(type(s), s) for s in self._segments] == [
            (type(s), s) for s in other._segments
        ]

    def __hash__(self) -> int:
        return hash(tuple((type(s).__name__, s) for s in self._segments))

    def __str__(self) -> str:
        out = []
        for segment in self._segments:
            if isinstance(segment, int):
                out.append(f"[{segment}]")
            elif out:
                out.append(f".{segment}")
            else:
                out.append(segment)
        return "".join(out)

    def __repr__(self) -> str:
        return f"JsonPath({str(self)!r})"


JsonPath.ROOT = JsonPath()


def child_of_object(path: JsonPath, key: str) -> JsonPath:
    return path.child_of_object(key)


def child_of_array(path: JsonPath, index: int) -> JsonPath:
    return path.child_of_array(index)


def last_segment_label(path: JsonPath) -> str:
    return path.last_segment_label()
