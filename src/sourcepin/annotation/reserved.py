"""
Reserved metadata attributes.

Everything the annotator injects lives under a fixed set of names derived
from the attribute prefix. Before a file is annotated or searched, those
attributes are stripped again so that coordinates always refer to the
un-annotated source.
"""

import html
from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Tuple, Union

from sourcepin.parser import MarkupTree, ParseFailure, parse


# Injection order of the metadata attributes
ATTRIBUTE_SUFFIXES = (
    "info",
    "position",
    "element-id",
    "file",
    "line",
    "column",
    "component",
    "function",
    "static-content",
    "children-source",
)


class AttributeNames:
    """Reserved attribute names for one prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.info = f"{prefix}-info"
        self.position = f"{prefix}-position"
        self.element_id = f"{prefix}-element-id"
        self.file = f"{prefix}-file"
        self.line = f"{prefix}-line"
        self.column = f"{prefix}-column"
        self.component = f"{prefix}-component"
        self.function = f"{prefix}-function"
        self.static_content = f"{prefix}-static-content"
        self.children_source = f"{prefix}-children-source"
        self.all = frozenset(f"{prefix}-{suffix}" for suffix in ATTRIBUTE_SUFFIXES)

    def __contains__(self, name: str) -> bool:
        return name in self.all


def quote_attribute_value(value: str) -> str:
    """
    Quote a value for use as a JSX string attribute.

    JSX strings have no backslash escapes, so the quote character is picked
    to fit the value. Values holding both quote kinds, or an ampersand that
    would be read back as an entity, are entity-escaped inside double quotes.
    """
    if "&" in value or ('"' in value and "'" in value):
        return '"' + html.escape(value, quote=False).replace('"', "&quot;") + '"'
    if '"' in value:
        return "'" + value + "'"
    return '"' + value + '"'


def render_attribute(name: str, value: str) -> str:
    return f"{name}={quote_attribute_value(value)}"


class OffsetMap:
    """Maps offsets in stripped text back to the text the spans were removed from."""

    def __init__(self, removed: List[Tuple[int, int]]):
        self.removed = removed
        self._clean_starts: List[int] = []
        self._shifts: List[int] = []
        shift = 0
        for start, end in removed:
            self._clean_starts.append(start - shift)
            shift += end - start
            self._shifts.append(shift)

    def to_original(self, offset: int) -> int:
        # Spans removed exactly at offset stay after it
        index = bisect_left(self._clean_starts, offset)
        return offset + (self._shifts[index - 1] if index else 0)


@dataclass
class PreparedSource:
    """A parsed tree of the stripped text plus the way back to the input text."""
    tree: MarkupTree
    original: str
    offsets: OffsetMap


def reserved_spans(tree: MarkupTree, names: AttributeNames) -> List[Tuple[int, int]]:
    """Spans of every reserved attribute, each with the whitespace character before it."""
    text = tree.text
    spans = []
    for element in tree.elements:
        for attr in element.attributes:
            if attr.name is None or attr.name not in names:
                continue
            start = attr.start
            if start > 0 and text[start - 1].isspace():
                start -= 1
            spans.append((start, attr.end))
    spans.sort()
    return spans


def strip_reserved(text: str, spans: List[Tuple[int, int]]) -> str:
    parts = []
    cursor = 0
    for start, end in spans:
        parts.append(text[cursor:start])
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def prepare_source(code: str, filename: str, names: AttributeNames) -> Union[PreparedSource, ParseFailure]:
    """
    Parse code with any previously injected metadata removed.

    Returns a ParseFailure when either the input or the stripped text does
    not parse.
    """
    tree = parse(code, filename)
    if isinstance(tree, ParseFailure):
        return tree

    spans = reserved_spans(tree, names)
    if not spans:
        return PreparedSource(tree=tree, original=code, offsets=OffsetMap([]))

    clean = parse(strip_reserved(code, spans), filename)
    if isinstance(clean, ParseFailure):
        return clean
    return PreparedSource(tree=clean, original=code, offsets=OffsetMap(spans))
