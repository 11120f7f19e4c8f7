"""Annotation and element lookup tools."""
from pathlib import Path
from typing import List, Optional

from sourcepin.annotation import SourceAnnotator, collect_scopes, compute_element_metadata
from sourcepin.config import get_attribute_prefix
from sourcepin.exceptions import ConfigError
from sourcepin.mutation import MutationFacade, NotFound
from sourcepin.schemas import AnnotateOptions


def register(mcp):
    @mcp.tool()
    def annotate_source(
        code: str,
        filename: str,
        attribute_prefix: Optional[str] = None,
    ) -> dict:
        """
        Inject source-location metadata into every element of a TSX/JSX source.

        Args:
            code: Source text
            filename: Name recorded in the metadata; its extension picks the grammar
            attribute_prefix: Metadata attribute prefix (default from config)

        Returns:
            Annotated code, plus errors if the source was passed through unchanged
        """
        errors: List[str] = []
        try:
            options = AnnotateOptions(attribute_prefix=attribute_prefix or get_attribute_prefix())
        except (ConfigError, ValueError) as e:
            return {"status": "error", "message": str(e)}

        annotator = SourceAnnotator(options, on_error=lambda name, message: errors.append(message))
        annotated = annotator.annotate(code, filename)
        return {
            "status": "error" if errors else "ok",
            "code": annotated,
            "changed": annotated != code,
            "errors": errors,
        }

    @mcp.tool()
    def locate_element(
        file_path: str,
        line: int,
        column: int,
        root_dir: str = ".",
    ) -> dict:
        """
        Describe the element whose opening tag starts at (line, column).

        Args:
            file_path: File path, absolute or relative to root_dir
            line: 1-based line
            column: 0-based column
            root_dir: Project root

        Returns:
            Element metadata (tag, element id, component, function, static text)
        """
        try:
            facade = MutationFacade(root_dir)
        except ConfigError as e:
            return {"status": "error", "message": str(e)}

        try:
            found = facade.locator.locate_file(facade.resolve_path(file_path), line, column, filename=file_path)
        except (OSError, UnicodeDecodeError) as e:
            return {"status": "error", "message": f"Failed to read {file_path}: {e}"}

        if isinstance(found, NotFound):
            return {"status": "error", "message": found.reason, "parseFailed": found.parse_failed}

        element = found.element
        scope = collect_scopes(found.tree).get(element.node.start_byte)
        metadata = compute_element_metadata(element, file_path, scope).to_wire()
        metadata["openTag"] = found.original_text(element.open_start, element.open_end)
        metadata["status"] = "ok"
        return metadata

    @mcp.tool()
    def element_source(
        element_id: str,
        root_dir: str = ".",
        radius: int = 5,
    ) -> dict:
        """
        Return the source lines an element id points at.

        Args:
            element_id: Id from the element-id metadata attribute
            root_dir: Project root
            radius: Context lines before and after the target line

        Returns:
            Target line and surrounding context
        """
        try:
            context = MutationFacade(Path(root_dir)).get_source_context(element_id, radius)
        except ConfigError as e:
            return {"status": "error", "message": str(e)}
        if context is None:
            return {"status": "error", "message": f"No source found for element id '{element_id}'"}
        data = context.to_wire()
        data["status"] = "ok"
        return data
