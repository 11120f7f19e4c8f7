import html
from typing import List, Optional, Union

from sourcepin.logging_config import logger
from .config import (
    ELEMENT_TYPES,
    EXPRESSION_CHILD_TYPES,
    FRAGMENT_TYPES,
    NON_TEXT_CHILD_TYPES,
    language_for_filename,
)
from .language_manager import get_parser
from .markup import (
    ExpressionChild,
    MarkupAttribute,
    MarkupElement,
    MarkupTree,
    ParseFailure,
    SourceText,
    TextChild,
)


def parse(source: str, filename: str) -> Union[MarkupTree, ParseFailure]:
    """
    Parse markup-bearing source into a located markup tree.

    The grammar is picked from the filename extension. Source containing
    syntax errors yields a ParseFailure; this function never raises.
    """
    language = language_for_filename(filename)
    try:
        text = SourceText(source)
        syntax_tree = get_parser(language).parse(text.data)
    except Exception as e:
        logger.debug(f"Parser setup failed for {filename}: {e}")
        return ParseFailure(filename, f"{type(e).__name__}: {e}")

    root = syntax_tree.root_node
    if root.has_error:
        return ParseFailure(filename, _describe_error(root, text))

    builder = _TreeBuilder(text)
    try:
        builder.scan(root)
    except RecursionError:
        return ParseFailure(filename, "Markup nested too deeply")

    logger.debug(f"Parsed {filename} ({language}): {len(builder.elements)} elements")
    return MarkupTree(
        filename=filename,
        language=language,
        source=text,
        syntax_tree=syntax_tree,
        elements=builder.elements,
    )


class NodeVisitor:
    """
    Callback interface for walk().

    on_node receives each syntax node together with its ancestor chain,
    ordered from the root down to the direct parent. The list is shared
    between calls and must not be mutated or kept.
    """

    def on_node(self, node, ancestors: List) -> None:
        pass


def walk(tree: MarkupTree, visitor: NodeVisitor) -> None:
    """Visit every syntax node of a parsed tree in document order."""
    ancestors: List = []
    stack = [(tree.syntax_tree.root_node, 0)]
    while stack:
        node, depth = stack.pop()
        del ancestors[depth:]
        visitor.on_node(node, ancestors)
        ancestors.append(node)
        stack.extend((child, depth + 1) for child in reversed(node.children))


def _describe_error(root, text: SourceText) -> str:
    """Describe the first ERROR or MISSING node below root."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            line, column = text.position(text.char_offset(node.start_byte))
            if node.is_missing:
                return f"Missing '{node.type}' at line {line}, column {column}"
            return f"Syntax error at line {line}, column {column}"
        if node.has_error:
            stack.extend(reversed(node.children))
    return "Syntax error"


class _TreeBuilder:
    """Collects markup elements from a tree-sitter syntax tree."""

    def __init__(self, source: SourceText):
        self.source = source
        self.elements: List[MarkupElement] = []

    def _start(self, node) -> int:
        return self.source.char_offset(node.start_byte)

    def _end(self, node) -> int:
        return self.source.char_offset(node.end_byte)

    def _text(self, node) -> str:
        return self.source.text[self._start(node):self._end(node)]

    def scan(self, node) -> None:
        """Find markup anywhere below node, in document order."""
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in ELEMENT_TYPES or current.type in FRAGMENT_TYPES:
                self.build_element(current)
                continue
            stack.extend(reversed(current.children))

    def build_element(self, node) -> MarkupElement:
        if node.type == "jsx_self_closing_element":
            opening, closing = node, None
        elif node.type == "jsx_fragment":
            opening, closing = None, None
        else:
            opening = _child_of_type(node, "jsx_opening_element")
            closing = _child_of_type(node, "jsx_closing_element")

        name_node = opening.child_by_field_name("name") if opening is not None else None
        start = self._start(node)
        line, column = self.source.position(start)

        if opening is not None:
            open_end = self._end(opening)
        else:
            open_end = self.source.char_offset(_first_token(node, ">").end_byte)
        name_end = self._end(name_node) if name_node is not None else start + 1

        element = MarkupElement(
            name=self._text(name_node) if name_node is not None else None,
            start=start,
            end=self._end(node),
            open_start=start,
            open_end=open_end,
            name_end=name_end,
            insert_at=name_end,
            line=line,
            column=column,
            self_closing=node.type == "jsx_self_closing_element",
            node=opening,
        )
        if name_node is not None:
            self.elements.append(element)
            element.attributes = self._build_attributes(element, opening, name_node)

        if node.type == "jsx_self_closing_element":
            return element

        if closing is not None:
            content_end_byte = closing.start_byte
        else:
            content_end_byte = _last_token(node, "<").start_byte
        content_start_byte = opening.end_byte if opening is not None else _first_token(node, ">").end_byte
        element.children = self._build_children(node, content_start_byte, content_end_byte)
        return element

    def _build_attributes(self, element: MarkupElement, opening, name_node) -> List[MarkupAttribute]:
        attributes = []
        for child in opening.named_children:
            if child == name_node:
                continue
            if child.type == "type_arguments":
                # Attributes can only follow the type arguments
                element.insert_at = self._end(child)
            elif child.type == "jsx_attribute":
                attributes.append(self._build_attribute(child))
            elif child.type in EXPRESSION_CHILD_TYPES:
                attributes.append(MarkupAttribute(
                    name=None,
                    start=self._start(child),
                    end=self._end(child),
                    value_kind="spread",
                ))
                self.scan(child)
        return attributes

    def _build_attribute(self, node) -> MarkupAttribute:
        parts = [child for child in node.named_children if child.type != "comment"]
        attr = MarkupAttribute(
            name=self._text(parts[0]),
            start=self._start(node),
            end=self._end(node),
            value_kind="none",
        )
        if len(parts) < 2:
            return attr

        value_node = parts[-1]
        attr.value_start = self._start(value_node)
        attr.value_end = self._end(value_node)
        if value_node.type == "string":
            attr.value_kind = "literal"
            attr.value = html.unescape(self.source.text[attr.value_start + 1:attr.value_end - 1])
        elif value_node.type in ELEMENT_TYPES or value_node.type in FRAGMENT_TYPES:
            attr.value_kind = "element"
            self.build_element(value_node)
        else:
            attr.value_kind = "expression"
            self.scan(value_node)
        return attr

    def _build_children(self, node, content_start_byte: int, content_end_byte: int) -> list:
        children = []
        cursor = content_start_byte
        for child in node.children:
            if child.start_byte < content_start_byte or child.end_byte > content_end_byte:
                continue
            if child.type not in NON_TEXT_CHILD_TYPES:
                continue
            if child.start_byte > cursor:
                children.append(self._text_child(cursor, child.start_byte))
            if child.type in EXPRESSION_CHILD_TYPES:
                children.append(ExpressionChild(
                    start=self._start(child),
                    end=self._end(child),
                    text=self._text(child),
                ))
                self.scan(child)
            else:
                children.append(self.build_element(child))
            cursor = child.end_byte
        if content_end_byte > cursor:
            children.append(self._text_child(cursor, content_end_byte))
        return children

    def _text_child(self, start_byte: int, end_byte: int) -> TextChild:
        start = self.source.char_offset(start_byte)
        end = self.source.char_offset(end_byte)
        return TextChild(start=start, end=end, raw=self.source.text[start:end])


def _child_of_type(node, node_type: str) -> Optional[object]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _first_token(node, token: str):
    for child in node.children:
        if child.type == token:
            return child
    return node


def _last_token(node, token: str):
    for child in reversed(node.children):
        if child.type == token:
            return child
    return node
