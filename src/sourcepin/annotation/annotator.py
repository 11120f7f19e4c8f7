"""
SourceAnnotator: inject source-location metadata into markup.

Every element gets a fixed set of attributes that tie the rendered DOM node
back to the line and column that produced it. Attributes are inserted right
after the tag name as plain text; no other byte of the file changes.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from sourcepin.logging_config import logger
from sourcepin.parser import MarkupElement, MarkupTree, ParseFailure
from sourcepin.schemas import AnnotateOptions, ElementMetadata, SourceLocation

from .classifier import first_text_child, has_literal_text, is_static_text
from .identity import generate_element_id
from .reserved import AttributeNames, prepare_source, render_attribute
from .scope import ScopeInfo, collect_scopes

# Receives (filename, message) when a file is passed through unannotated
ErrorSink = Callable[[str, str], None]


def compute_element_metadata(
    element: MarkupElement,
    filename: str,
    scope: Optional[ScopeInfo] = None,
) -> ElementMetadata:
    """Compute the metadata for one element."""
    scope = scope or ScopeInfo()
    location = SourceLocation(file=filename, line=element.line, column=element.column)
    return ElementMetadata(
        location=location,
        tag_name=element.name,
        component_name=scope.component_name,
        function_name=scope.function_name,
        element_id=generate_element_id(element, location),
        is_static_text=is_static_text(element),
    )


class SourceAnnotator:
    """
    Annotate markup source with location metadata.

    The annotator is idempotent: metadata already present under the
    configured prefix is stripped before coordinates are computed and then
    written again, so repeated passes produce identical output.
    """

    def __init__(
        self,
        options: Optional[AnnotateOptions] = None,
        on_error: Optional[ErrorSink] = None,
    ):
        self.options = options or AnnotateOptions()
        self.names = AttributeNames(self.options.attribute_prefix)
        self.on_error = on_error

    def annotate(self, code: str, filename: str) -> str:
        """
        Return code with metadata injected on every element.

        Never raises: on any failure the input is returned unchanged and the
        error sink (if any) is told why.
        """
        try:
            prepared = prepare_source(code, filename, self.names)
            if isinstance(prepared, ParseFailure):
                self._report(filename, prepared.message)
                return code
            return self._annotate_tree(prepared.tree)
        except Exception as e:
            logger.warning(f"Annotation failed for {filename}: {e}")
            self._report(filename, f"{type(e).__name__}: {e}")
            return code

    def _report(self, filename: str, message: str) -> None:
        logger.debug(f"Passing {filename} through unannotated: {message}")
        if self.on_error is not None:
            self.on_error(filename, message)

    def _annotate_tree(self, tree: MarkupTree) -> str:
        scopes = collect_scopes(tree)
        insertions = []
        for element in tree.elements:
            scope = scopes.get(element.node.start_byte) if element.node is not None else None
            metadata = compute_element_metadata(element, tree.filename, scope)
            attributes = self.metadata_attributes(element, metadata, tree)
            chunk = "".join(" " + render_attribute(name, value) for name, value in attributes.items())
            insertions.append((element.insert_at, chunk))

        text = tree.text
        parts: List[str] = []
        cursor = 0
        for offset, chunk in sorted(insertions, key=lambda item: item[0]):
            parts.append(text[cursor:offset])
            parts.append(chunk)
            cursor = offset
        parts.append(text[cursor:])

        logger.debug(f"Annotated {len(insertions)} elements in {tree.filename}")
        return "".join(parts)

    def metadata_attributes(
        self,
        element: MarkupElement,
        metadata: ElementMetadata,
        tree: MarkupTree,
    ) -> Dict[str, str]:
        """Reserved attribute name -> value, in injection order."""
        names = self.names
        location = metadata.location

        info = {
            "fileName": location.file,
            "lineNumber": location.line,
            "columnNumber": location.column,
            "elementType": metadata.tag_name,
            "componentName": metadata.component_name,
            "functionName": metadata.function_name,
            "elementId": metadata.element_id,
        }
        info = {key: value for key, value in info.items() if value is not None}

        attributes = {
            names.info: json.dumps(info, separators=(",", ":"), ensure_ascii=False),
            names.position: f"{location.line}:{location.column}",
            names.element_id: metadata.element_id,
            names.file: location.file,
            names.line: str(location.line),
            names.column: str(location.column),
        }
        if metadata.component_name is not None:
            attributes[names.component] = metadata.component_name
        if metadata.function_name is not None:
            attributes[names.function] = metadata.function_name

        # Checked again against the element itself, not only the metadata
        if metadata.is_static_text and is_static_text(element):
            attributes[names.static_content] = "true"

        if has_literal_text(element):
            text_child = first_text_child(element)
            line, column = tree.source.position(text_child.content_start)
            attributes[names.children_source] = f"{location.file}:{line}:{column}"

        return attributes


def _coerce_options(options: Union[AnnotateOptions, dict, None]) -> AnnotateOptions:
    if options is None:
        return AnnotateOptions()
    if isinstance(options, AnnotateOptions):
        return options
    return AnnotateOptions.model_validate(options)


def annotate(
    code: str,
    filename: str,
    options: Union[AnnotateOptions, dict, None] = None,
    on_error: Optional[ErrorSink] = None,
) -> str:
    """
    Annotate markup source with location metadata.

    Args:
        code: Source text
        filename: Name recorded in the metadata; its extension picks the grammar
        options: AnnotateOptions or a dict such as {"attributePrefix": "data-x"}
        on_error: Optional sink told why a file was passed through unchanged

    Returns:
        The annotated source, or code unchanged if it could not be annotated
    """
    try:
        resolved = _coerce_options(options)
    except ValueError as e:
        logger.warning(f"Invalid annotate options for {filename}: {e}")
        if on_error is not None:
            on_error(filename, str(e))
        return code
    return SourceAnnotator(resolved, on_error).annotate(code, filename)


def annotate_file(
    path: Union[str, Path],
    options: Union[AnnotateOptions, dict, None] = None,
    write: bool = False,
    filename: Optional[str] = None,
    on_error: Optional[ErrorSink] = None,
) -> str:
    """
    Annotate a file on disk.

    Args:
        path: File to read
        options: Annotation options
        write: If True, write the annotated text back (only when it changed)
        filename: Name to record in the metadata (defaults to path as given)
        on_error: Optional error sink

    Returns:
        The annotated text

    Raises:
        OSError: If the file cannot be read or written
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        code = f.read()

    annotated = annotate(code, filename or str(path), options, on_error)

    if write and annotated != code:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(annotated)
        logger.info(f"Wrote annotated source to {path}")

    return annotated
