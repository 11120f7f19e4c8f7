"""Source edit tools for the visual editor."""
from typing import List, Optional

from sourcepin import mutation


def register(mcp):
    @mcp.tool()
    def apply_edit(
        file_path: str,
        line: int,
        column: int,
        kind: str,
        new_value: str,
        original_value: Optional[str] = None,
        attribute_name: Optional[str] = None,
        root_dir: str = ".",
    ) -> dict:
        """
        Write one visual edit back into source.

        Args:
            file_path: File path, absolute or relative to root_dir
            line: 1-based line of the element's opening tag
            column: 0-based column of the element's opening tag
            kind: "style" (className), "content" (text) or "attribute"
            new_value: New className, text or attribute value
            original_value: Value the source must still hold, if known
            attribute_name: Attribute to set when kind is "attribute"
            root_dir: Project root

        Returns:
            EditResult with success, message and a unified diff
        """
        result = mutation.apply_edit(root_dir, {
            "filePath": file_path,
            "line": line,
            "column": column,
            "kind": kind,
            "newValue": new_value,
            "originalValue": original_value,
            "attributeName": attribute_name,
        })
        return result.to_wire()

    @mcp.tool()
    def apply_batch(
        requests: List[dict],
        root_dir: str = ".",
    ) -> dict:
        """
        Apply edit requests in order; a failing edit does not stop the rest.

        Args:
            requests: Edit requests ({filePath, line, column, kind, newValue, ...})
            root_dir: Project root

        Returns:
            Per-edit results and a total/success/failed summary
        """
        return mutation.apply_batch(root_dir, requests).to_wire()
