"""
Element identity.

An element id fingerprints a markup element by its source coordinate and
shape: "{file}:{line}:{col}_{tag}[-{class}][#{id}]". It is stable across
runs on unchanged source but carries no uniqueness guarantee.
"""

import re
from typing import Optional

from sourcepin.parser import MarkupElement
from sourcepin.schemas import SourceLocation

_WHITESPACE_RE = re.compile(r"\s+")
# The first ":{line}:{col}_" ends the file part; drive letters never match it
_ELEMENT_ID_RE = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+)_")


def class_attribute_value(element: MarkupElement) -> Optional[str]:
    """Literal className (or class) of an element, if any."""
    value = element.literal_attribute("className")
    if value is None:
        value = element.literal_attribute("class")
    return value


def generate_element_id(element: MarkupElement, location: SourceLocation) -> str:
    """Build the element id of an element at location."""
    tag = element.name.lower()
    class_name = (class_attribute_value(element) or "").strip()
    id_value = element.literal_attribute("id")

    element_id = f"{location.file}:{location.line}:{location.column}_{tag}"
    if class_name:
        element_id += "-" + _WHITESPACE_RE.sub("-", class_name)
    if id_value:
        element_id += f"#{id_value}"
    return element_id


def parse_element_id(element_id: str) -> Optional[SourceLocation]:
    """Recover the source location encoded in an element id."""
    match = _ELEMENT_ID_RE.match(element_id or "")
    if not match:
        return None
    line = int(match.group("line"))
    if line < 1:
        return None
    return SourceLocation(
        file=match.group("file"),
        line=line,
        column=int(match.group("column")),
    )
