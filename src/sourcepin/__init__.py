"""
sourcepin - source-location metadata for visual UI editing

Annotates JSX/TSX markup with the file, line and column of every element and
writes edits made on the rendered page back into that exact source span.
"""

__version__ = "0.1.0"

# Core exports
from sourcepin.annotation import annotate, annotate_file
from sourcepin.mutation import (
    MutationFacade,
    apply_batch,
    apply_edit,
    check_static_text,
    get_source_context,
    locate,
    validate_edit_request,
)
from sourcepin.schemas import (
    AnnotateOptions,
    BatchResult,
    EditRequest,
    EditResult,
    ElementMetadata,
    SourceContext,
    SourceLocation,
)

__all__ = [
    "__version__",
    "annotate",
    "annotate_file",
    "locate",
    "apply_edit",
    "apply_batch",
    "get_source_context",
    "check_static_text",
    "validate_edit_request",
    "MutationFacade",
    "AnnotateOptions",
    "BatchResult",
    "EditRequest",
    "EditResult",
    "ElementMetadata",
    "SourceContext",
    "SourceLocation",
]
