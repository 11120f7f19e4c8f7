"""
Annotation package: inject source-location metadata into markup.

Every element gets attributes naming the file, line and column of its
opening tag, an element id, its enclosing component and function, and
where its literal text lives.
"""

from .annotator import SourceAnnotator, annotate, annotate_file, compute_element_metadata
from .classifier import first_text_child, has_literal_text, is_static_text
from .identity import class_attribute_value, generate_element_id, parse_element_id
from .reserved import (
    ATTRIBUTE_SUFFIXES,
    AttributeNames,
    OffsetMap,
    PreparedSource,
    prepare_source,
    quote_attribute_value,
    render_attribute,
)
from .scope import ARROW_FUNCTION_NAME, ScopeInfo, collect_scopes, resolve_scope

__all__ = [
    # Annotator
    "SourceAnnotator",
    "annotate",
    "annotate_file",
    "compute_element_metadata",

    # Classification and identity
    "is_static_text",
    "first_text_child",
    "has_literal_text",
    "class_attribute_value",
    "generate_element_id",
    "parse_element_id",

    # Reserved attributes
    "ATTRIBUTE_SUFFIXES",
    "AttributeNames",
    "OffsetMap",
    "PreparedSource",
    "prepare_source",
    "quote_attribute_value",
    "render_attribute",

    # Scopes
    "ARROW_FUNCTION_NAME",
    "ScopeInfo",
    "collect_scopes",
    "resolve_scope",
]
