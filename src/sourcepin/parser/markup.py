"""
Located markup tree.

The tree mirrors the markup layer of a parsed file: elements, their
attributes and their children. All offsets are code-point indices into the
source text exactly as it was read (no newline translation), so slicing the
text with them is always safe. Lines are 1-based and end at '\\n'; columns
are 0-based code-point counts from the start of the line.
"""

import html
import re
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Any, List, Optional, Tuple, Union


class SourceText:
    """Source text with byte/char offset conversion and line lookup."""

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode("utf-8")
        self._ascii = len(self.data) == len(text)
        self._char_byte_starts: List[int] = []
        if not self._ascii:
            # Byte offset at which each character starts
            self._char_byte_starts = [0] + list(
                accumulate(len(ch.encode("utf-8")) for ch in text)
            )
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def char_offset(self, byte_offset: int) -> int:
        """Convert a UTF-8 byte offset into a character offset."""
        if self._ascii:
            return byte_offset
        return bisect_left(self._char_byte_starts, byte_offset)

    def position(self, offset: int) -> Tuple[int, int]:
        """Return the (line, column) of a character offset."""
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index]

    def line(self, number: int) -> str:
        """Text of a 1-based line without its '\\n' or '\\r\\n' ending."""
        start = self._line_starts[number - 1]
        if number < len(self._line_starts):
            end = self._line_starts[number] - 1
        else:
            end = len(self.text)
        text = self.text[start:end]
        return text[:-1] if text.endswith("\r") else text

    @property
    def line_count(self) -> int:
        """Number of lines; a final '\\n' does not open another one."""
        if not self.text or self.text.endswith("\n"):
            return len(self._line_starts) - 1
        return len(self._line_starts)


@dataclass
class MarkupAttribute:
    """
    A single attribute on an opening tag.

    value_kind is one of:
    - "literal": quoted string, value holds the decoded text
    - "expression": {...} interpolation
    - "element": markup used directly as the value
    - "none": bare boolean attribute
    - "spread": {...props}; name is None
    """
    name: Optional[str]
    start: int
    end: int
    value_kind: str
    value: Optional[str] = None
    value_start: Optional[int] = None
    value_end: Optional[int] = None

    @property
    def is_literal(self) -> bool:
        return self.value_kind == "literal"

    @property
    def content_start(self) -> Optional[int]:
        """Offset just inside the opening quote of a literal value."""
        if not self.is_literal:
            return None
        return self.value_start + 1

    @property
    def content_end(self) -> Optional[int]:
        """Offset of the closing quote of a literal value."""
        if not self.is_literal:
            return None
        return self.value_end - 1


@dataclass
class TextChild:
    """A maximal run of literal text between non-text children."""
    start: int
    end: int
    raw: str

    @property
    def value(self) -> str:
        return html.unescape(self.raw)

    @property
    def is_blank(self) -> bool:
        return not self.raw.strip()

    @property
    def content_start(self) -> int:
        """Offset of the first non-whitespace character (start if blank)."""
        if self.is_blank:
            return self.start
        return self.start + (len(self.raw) - len(self.raw.lstrip()))

    @property
    def content_end(self) -> int:
        """Offset just past the last non-whitespace character (end if blank)."""
        if self.is_blank:
            return self.end
        return self.end - (len(self.raw) - len(self.raw.rstrip()))


@dataclass
class ExpressionChild:
    """A {...} interpolation child."""
    start: int
    end: int
    text: str


@dataclass
class MarkupElement:
    """
    A markup element.

    name is None for fragments, which are kept in child lists (they are
    nested markup) but never annotated or located.
    """
    name: Optional[str]
    start: int
    end: int
    open_start: int
    open_end: int
    name_end: int
    insert_at: int
    line: int
    column: int
    self_closing: bool
    node: Any = None
    attributes: List[MarkupAttribute] = field(default_factory=list)
    children: List["Child"] = field(default_factory=list)

    @property
    def is_fragment(self) -> bool:
        return self.name is None

    def get_attribute(self, name: str) -> Optional[MarkupAttribute]:
        """Return the first attribute called name, if any."""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def literal_attribute(self, name: str) -> Optional[str]:
        """Return the decoded value of a literal attribute, else None."""
        attr = self.get_attribute(name)
        if attr is not None and attr.is_literal:
            return attr.value
        return None

    @property
    def text_children(self) -> List[TextChild]:
        return [child for child in self.children if isinstance(child, TextChild)]


Child = Union[TextChild, ExpressionChild, MarkupElement]


@dataclass
class MarkupTree:
    """Result of a successful parse."""
    filename: str
    language: str
    source: SourceText
    syntax_tree: Any
    elements: List[MarkupElement] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.source.text

    def element_at(self, line: int, column: int) -> Optional[MarkupElement]:
        """First element, in document order, whose opening tag starts at (line, column)."""
        for element in self.elements:
            if element.line == line and element.column == column:
                return element
        return None


@dataclass
class ParseFailure:
    """Returned instead of a tree when the source cannot be parsed."""
    filename: str
    message: str
