"""
Component and function names for markup elements.

Names come from the ancestor chain of each opening tag: the nearest
enclosing function or class, possibly renamed by the variable declarator
that binds it.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from sourcepin.parser import MarkupTree, NodeVisitor, walk
from sourcepin.parser.config import OPENING_TYPES

FUNCTION_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
)
CLASS_TYPES = ("class_declaration", "abstract_class_declaration", "class")

ARROW_FUNCTION_NAME = "anonymous-arrow-function"

_COMPONENT_NAME_RE = re.compile(r"^[A-Z]")


@dataclass
class ScopeInfo:
    component_name: Optional[str] = None
    function_name: Optional[str] = None


def _node_name(node) -> Optional[str]:
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type not in ("identifier", "type_identifier"):
        return None
    return name_node.text.decode("utf-8")


def resolve_scope(ancestors: List) -> ScopeInfo:
    """Work out the scope names from an ancestor chain (root first)."""
    info = ScopeInfo()

    function_index = None
    for index in range(len(ancestors) - 1, -1, -1):
        node_type = ancestors[index].type
        if node_type in FUNCTION_TYPES or node_type in CLASS_TYPES:
            function_index = index
            break

    if function_index is not None:
        owner = ancestors[function_index]
        if owner.type == "arrow_function":
            info.function_name = ARROW_FUNCTION_NAME
        else:
            name = _node_name(owner)
            if name:
                info.function_name = name
                if owner.type in CLASS_TYPES or _COMPONENT_NAME_RE.match(name):
                    info.component_name = name

    # const Card = (...) => ..., const Card = memo(function (...) {...})
    search_from = function_index - 1 if function_index is not None else len(ancestors) - 1
    for index in range(search_from, -1, -1):
        node = ancestors[index]
        if node.type in FUNCTION_TYPES or node.type in CLASS_TYPES:
            break
        if node.type == "variable_declarator":
            name = _node_name(node)
            if name:
                info.function_name = name
                if _COMPONENT_NAME_RE.match(name):
                    info.component_name = name
            break

    return info


class ScopeCollector(NodeVisitor):
    """Records the scope of every opening tag, keyed by its start byte."""

    def __init__(self):
        self.scopes: Dict[int, ScopeInfo] = {}

    def on_node(self, node, ancestors: List) -> None:
        if node.type in OPENING_TYPES:
            self.scopes[node.start_byte] = resolve_scope(ancestors)


def collect_scopes(tree: MarkupTree) -> Dict[int, ScopeInfo]:
    collector = ScopeCollector()
    walk(tree, collector)
    return collector.scopes
