"""
Patcher: turn an EditRequest into a minimal text splice.

Each edit rewrites one span of the opening tag or of a text child and leaves
every other character of the file alone. Planning is pure; writing the
result is the facade's job.
"""

import re
from typing import Optional

from sourcepin.annotation.classifier import first_text_child
from sourcepin.annotation.reserved import quote_attribute_value, render_attribute
from sourcepin.config import DEFAULT_ATTRIBUTE_PREFIX
from sourcepin.exceptions import (
    AttributeShapeError,
    LocationNotFoundError,
    ParserError,
    StaleEditError,
)
from sourcepin.logging_config import logger
from sourcepin.schemas import EditRequest

from .editor import Splice
from .locator import ElementLocator, ElementRef, NotFound

STYLE_ATTRIBUTES = ("className", "class")

_ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$\-]*(:[A-Za-z_$][A-Za-z0-9_$\-]*)?$")

# Characters that would end or change a run of JSX text
_TEXT_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "{": "&#123;",
    "}": "&#125;",
}


def escape_text(value: str) -> str:
    """Escape a value so it stays one literal JSX text child."""
    return "".join(_TEXT_ESCAPES.get(ch, ch) for ch in value)


def _check_original(original_value: Optional[str], found: Optional[str]) -> None:
    if original_value is None or found is None:
        return
    if original_value.strip() != found.strip():
        raise StaleEditError(original_value, found)


def _insert_attribute(ref: ElementRef, name: str, value: str) -> Splice:
    offset = ref.to_original(ref.element.insert_at)
    return offset, offset, " " + render_attribute(name, value)


def _replace_literal(ref: ElementRef, attr, value: str) -> Splice:
    start, end = ref.span(attr.value_start, attr.value_end)
    return start, end, quote_attribute_value(value)


def plan_style_edit(ref: ElementRef, request: EditRequest) -> Splice:
    """Replace the literal className (else class); insert className when there is none."""
    element = ref.element
    for name in STYLE_ATTRIBUTES:
        attr = element.get_attribute(name)
        if attr is not None and attr.is_literal:
            _check_original(request.original_value, attr.value)
            return _replace_literal(ref, attr, request.new_value)

    dynamic = element.get_attribute("className")
    if dynamic is not None:
        logger.debug(f"className on {element.name} is dynamic, inserting a literal one")
    else:
        _check_original(request.original_value, "")
    return _insert_attribute(ref, "className", request.new_value)


def plan_content_edit(ref: ElementRef, request: EditRequest) -> Splice:
    """Replace the first literal text child, keeping its surrounding whitespace."""
    element = ref.element
    text_child = first_text_child(element)
    if text_child is None:
        raise AttributeShapeError(
            "children",
            f"<{element.name}> has no literal text child to edit",
        )

    _check_original(request.original_value, text_child.value)
    start, end = ref.span(text_child.content_start, text_child.content_end)
    return start, end, escape_text(request.new_value)


def plan_attribute_edit(ref: ElementRef, request: EditRequest) -> Splice:
    """Replace or insert a named literal attribute."""
    name = request.attribute_name
    if not name:
        raise ValueError("attributeName is required for attribute edits")
    if not _ATTRIBUTE_NAME_RE.match(name):
        raise ValueError(f"'{name}' is not a valid attribute name")
    if ref.names is not None and name in ref.names:
        raise AttributeShapeError(name, f"Attribute '{name}' holds source metadata and cannot be edited")

    attr = ref.element.get_attribute(name)
    if attr is None:
        _check_original(request.original_value, "")
        return _insert_attribute(ref, name, request.new_value)

    if attr.is_literal:
        _check_original(request.original_value, attr.value)
        return _replace_literal(ref, attr, request.new_value)

    if attr.value_kind == "none":
        # Bare boolean attribute becomes name="value"
        start, end = ref.span(attr.start, attr.end)
        return start, end, render_attribute(name, request.new_value)

    raise AttributeShapeError(name)


_PLANNERS = {
    "style": plan_style_edit,
    "content": plan_content_edit,
    "attribute": plan_attribute_edit,
}


def plan_edit(ref: ElementRef, request: EditRequest) -> Splice:
    """
    Compute the splice for one edit.

    Raises:
        AttributeShapeError: A literal is required but the source holds an expression
        StaleEditError: original_value no longer matches the source
        ValueError: The request is incomplete for its kind
    """
    return _PLANNERS[request.kind](ref, request)


def resolve_element(
    code: str,
    request: EditRequest,
    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX,
) -> ElementRef:
    """
    Locate the element an edit targets.

    Raises:
        ParserError: The source does not parse
        LocationNotFoundError: No element starts at the coordinate
    """
    found = ElementLocator(attribute_prefix).locate(code, request.file_path, request.line, request.column)
    if isinstance(found, NotFound):
        if found.parse_failed:
            raise ParserError(request.file_path, found.reason)
        raise LocationNotFoundError(request.file_path, request.line, request.column)
    return found


def patch_source(
    code: str,
    request: EditRequest,
    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX,
) -> str:
    """Apply one edit to source text and return the new text."""
    ref = resolve_element(code, request, attribute_prefix)
    start, end, replacement = plan_edit(ref, request)
    return code[:start] + replacement + code[end:]
