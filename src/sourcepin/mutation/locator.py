"""
ElementLocator: map a (file, line, column) coordinate to a markup element.

Coordinates always refer to the un-annotated source. Injected metadata is
stripped before searching, so raw and annotated text resolve the same
coordinate to the same element.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from sourcepin.annotation.reserved import AttributeNames, OffsetMap, prepare_source
from sourcepin.config import DEFAULT_ATTRIBUTE_PREFIX
from sourcepin.logging_config import logger
from sourcepin.parser import MarkupElement, MarkupTree, ParseFailure


@dataclass
class ElementRef:
    """
    A located element.

    element and tree describe the stripped text; original is the text that
    was searched. Offsets taken from the element must go through
    to_original() before they are used to slice or patch original. names
    are the metadata attributes stripped before the search.
    """
    element: MarkupElement
    tree: MarkupTree
    original: str
    offsets: OffsetMap
    names: Optional[AttributeNames] = None

    def to_original(self, offset: int) -> int:
        return self.offsets.to_original(offset)

    def span(self, start: int, end: int) -> Tuple[int, int]:
        """Map a [start, end) span of the stripped text onto original."""
        return self.to_original(start), self.to_original(end)

    def original_text(self, start: int, end: int) -> str:
        start, end = self.span(start, end)
        return self.original[start:end]


@dataclass
class NotFound:
    """Why a coordinate did not resolve to an element."""
    file_path: str
    line: int
    column: int
    reason: str
    parse_failed: bool = False


def locate(
    code: str,
    filename: str,
    line: int,
    column: int,
    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX,
) -> Union[ElementRef, NotFound]:
    """
    Find the element whose opening tag starts exactly at (line, column).

    The first element in document order wins; there is no nearest match.
    """
    return ElementLocator(attribute_prefix).locate(code, filename, line, column)


class ElementLocator:
    """Locate elements by source coordinate."""

    def __init__(self, attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX):
        self.names = AttributeNames(attribute_prefix)

    def locate(self, code: str, filename: str, line: int, column: int) -> Union[ElementRef, NotFound]:
        prepared = prepare_source(code, filename, self.names)
        if isinstance(prepared, ParseFailure):
            logger.warning(f"Cannot locate element in {filename}: {prepared.message}")
            return NotFound(filename, line, column, prepared.message, parse_failed=True)

        element = prepared.tree.element_at(line, column)
        if element is None:
            logger.debug(f"No element starts at {filename}:{line}:{column}")
            return NotFound(filename, line, column, "no element starts at this position")

        return ElementRef(
            element=element,
            tree=prepared.tree,
            original=code,
            offsets=prepared.offsets,
            names=self.names,
        )

    def locate_file(self, path, line: int, column: int, filename: str = None) -> Union[ElementRef, NotFound]:
        """
        Read path and locate an element in it.

        Raises:
            OSError, UnicodeDecodeError: If the file cannot be read
        """
        with open(path, "r", encoding="utf-8", newline="") as f:
            code = f.read()
        return self.locate(code, filename or str(path), line, column)
