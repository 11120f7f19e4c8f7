"""
This facade exposes the public API for the parser module.
"""
from .facade import parse, walk, NodeVisitor
from .markup import (
    MarkupTree,
    MarkupElement,
    MarkupAttribute,
    TextChild,
    ExpressionChild,
    ParseFailure,
    SourceText,
)

__all__ = [
    "parse",
    "walk",
    "NodeVisitor",
    "MarkupTree",
    "MarkupElement",
    "MarkupAttribute",
    "TextChild",
    "ExpressionChild",
    "ParseFailure",
    "SourceText",
]
