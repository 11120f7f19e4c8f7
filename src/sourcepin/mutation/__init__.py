"""
Mutation package: write visual-editor edits back into source.

Edits target an element by the (line, column) of its opening tag and
rewrite only the span they need: a className literal, a text child or a
named attribute.
"""

from .facade import (
    MutationFacade,
    apply_batch,
    apply_edit,
    check_static_text,
    get_source_context,
    validate_edit_request,
)
from .locator import ElementLocator, ElementRef, NotFound, locate
from .editor import SourceEditor
from .patcher import escape_text, patch_source, plan_edit, resolve_element

__all__ = [
    # Main facade
    "MutationFacade",
    "apply_edit",
    "apply_batch",
    "get_source_context",
    "check_static_text",
    "validate_edit_request",

    # Components
    "ElementLocator",
    "ElementRef",
    "NotFound",
    "locate",
    "SourceEditor",
    "plan_edit",
    "patch_source",
    "resolve_element",
    "escape_text",
]
