"""
MutationFacade: apply visual-editor edits to source files.

Main entry point for single edits, ordered batches and source lookups.
Every failure is turned into a structured result; nothing raises past
apply_edit() or apply_batch().
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from sourcepin.annotation.classifier import is_static_text
from sourcepin.annotation.identity import parse_element_id
from sourcepin.config import load_config
from sourcepin.exceptions import ConfigError, SourcepinError
from sourcepin.logging_config import logger
from sourcepin.parser import SourceText
from sourcepin.schemas import (
    BatchResult,
    BatchSummary,
    EditRequest,
    EditResult,
    SourceContext,
)

from .editor import SourceEditor
from .locator import ElementLocator, NotFound
from .patcher import plan_edit, resolve_element

RequestLike = Union[EditRequest, Dict[str, Any]]


def _format_validation_error(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "request"
        messages.append(f"{field}: {item.get('msg', 'invalid value')}")
    return messages


def _payload_failure(payload: RequestLike, message: str) -> EditResult:
    """Failed result for a request that never reached the patcher."""
    if isinstance(payload, EditRequest):
        file_path, kind = payload.file_path, payload.kind
    elif isinstance(payload, dict):
        file_path = payload.get("filePath", payload.get("file_path", ""))
        kind = payload.get("kind", payload.get("type", ""))
    else:
        file_path, kind = "", ""
    return EditResult(
        success=False,
        message=message,
        file_path=str(file_path or ""),
        kind=str(kind or ""),
    )


def _batch_result(results: List[EditResult]) -> BatchResult:
    succeeded = sum(1 for result in results if result.success)
    summary = BatchSummary(
        total=len(results),
        success=succeeded,
        failed=len(results) - succeeded,
    )
    logger.info(f"Batch complete: {summary.success}/{summary.total} edits applied")
    return BatchResult(results=results, summary=summary)


class MutationFacade:
    """
    Main facade for edit operations.

    Pipeline for one edit:
    1. Resolve the file against root_dir and read it
    2. Locate the element (ElementLocator)
    3. Plan the splice for the edit kind (patcher)
    4. Optionally back up, then write atomically (SourceEditor)
    """

    def __init__(
        self,
        root_dir: Union[str, Path, None] = None,
        attribute_prefix: Optional[str] = None,
        backup: Optional[bool] = None,
        backup_dir: Union[str, Path, None] = None,
    ):
        """
        Args:
            root_dir: Base for relative file paths (defaults to CWD)
            attribute_prefix: Metadata prefix (defaults to configuration)
            backup: Back up files before writing (defaults to configuration)
            backup_dir: Where backups go (defaults to configuration)

        Raises:
            ConfigError: If configuration has to be loaded and is invalid
        """
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()

        if attribute_prefix is None or backup is None or backup_dir is None:
            config = load_config(self.root_dir)
            attribute_prefix = attribute_prefix or config["annotate"]["attribute_prefix"]
            backup = config["edit"]["backup"] if backup is None else backup
            backup_dir = backup_dir or config["edit"]["backup_dir"]

        self.attribute_prefix = attribute_prefix
        self.backup = bool(backup)
        self.locator = ElementLocator(attribute_prefix)
        self.editor = SourceEditor(backup_dir if self.backup else None)

        logger.debug(f"MutationFacade initialized for {self.root_dir}")

    def resolve_path(self, file_path: str) -> Path:
        path = Path(file_path)
        if path.is_absolute():
            return path
        return self.root_dir / path

    def apply_edit(self, request: RequestLike) -> EditResult:
        """
        Apply one edit.

        Returns:
            EditResult; on failure success is False and the file is untouched
        """
        if not isinstance(request, EditRequest):
            try:
                request = EditRequest.model_validate(request)
            except ValidationError as e:
                return self._invalid_request(request, e)

        try:
            return self._apply(request)
        except Exception as e:
            logger.error(f"Unexpected error applying {request.kind} edit to {request.file_path}: {e}")
            return self._failure(request, f"Unexpected error: {type(e).__name__}: {e}")

    def _apply(self, request: EditRequest) -> EditResult:
        path = self.resolve_path(request.file_path)
        logger.info(f"Applying {request.kind} edit at {request.file_path}:{request.line}:{request.column}")

        try:
            original = self.editor.read_source(path)
        except FileNotFoundError:
            return self._failure(request, f"File not found: {request.file_path}")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return self._failure(request, f"Failed to read {request.file_path}: {e}")

        try:
            ref = resolve_element(original, request, self.attribute_prefix)
            splice = plan_edit(ref, request)
            modified = self.editor.splice(original, [splice])
        except (SourcepinError, ValueError) as e:
            logger.warning(f"Rejected {request.kind} edit: {e}")
            return self._failure(request, str(e))

        if modified == original:
            return EditResult(
                success=True,
                message="Source already up to date",
                file_path=request.file_path,
                kind=request.kind,
                diff="",
            )

        try:
            backup_path = self.editor.create_backup(path) if self.backup else None
            self.editor.write_source(path, modified)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            return self._failure(request, f"Failed to write {request.file_path}: {e}")

        message = f"Updated {request.kind} of <{ref.element.name}> at {request.file_path}:{request.line}:{request.column}"
        if backup_path:
            message += f" (backup: {backup_path})"
        logger.info(message)

        return EditResult(
            success=True,
            message=message,
            file_path=request.file_path,
            kind=request.kind,
            diff=self.editor.generate_unified_diff(request.file_path, original, modified),
        )

    def _failure(self, request: EditRequest, message: str) -> EditResult:
        return EditResult(
            success=False,
            message=message,
            file_path=request.file_path,
            kind=request.kind,
        )

    def _invalid_request(self, payload: Any, error: ValidationError) -> EditResult:
        message = "Invalid edit request: " + "; ".join(_format_validation_error(error))
        logger.warning(message)
        return _payload_failure(payload, message)

    def apply_batch(self, requests: Iterable[RequestLike]) -> BatchResult:
        """
        Apply edits one after another, in order.

        Each edit re-reads its file, so later edits see earlier ones. A failed
        edit never stops the batch.
        """
        return _batch_result([self.apply_edit(request) for request in requests])

    def get_source_context(self, element_id: str, radius: int = 5) -> Optional[SourceContext]:
        """
        Return the source lines around the location encoded in an element id.

        Returns None when the id is malformed or the line does not exist.
        """
        location = parse_element_id(element_id)
        if location is None:
            logger.warning(f"Malformed element id: {element_id}")
            return None

        try:
            text = self.editor.read_source(self.resolve_path(location.file))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read source for {element_id}: {e}")
            return None

        source = SourceText(text)
        total = source.line_count
        if location.line > total:
            logger.warning(f"Line {location.line} is past the end of {location.file}")
            return None

        radius = max(radius, 0)
        first = max(1, location.line - radius)
        last = min(total, location.line + radius)
        return SourceContext(
            location=location,
            target_line=source.line(location.line),
            context_lines=[source.line(number) for number in range(first, last + 1)],
            context_start=first,
            total_lines=total,
        )

    def check_static_text(self, file_path: str, line: int, column: int) -> bool:
        """True if the element at (line, column) holds only literal text."""
        try:
            found = self.locator.locate_file(self.resolve_path(file_path), line, column, filename=file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {file_path}: {e}")
            return False
        if isinstance(found, NotFound):
            return False
        return is_static_text(found.element)

    def validate_edit_request(self, payload: Any) -> List[str]:
        """Return human-readable problems with an edit payload (empty if valid)."""
        if isinstance(payload, EditRequest):
            request = payload
        elif not isinstance(payload, dict):
            return ["Request must be a JSON object"]
        else:
            try:
                request = EditRequest.model_validate(payload)
            except ValidationError as e:
                return _format_validation_error(e)

        errors = []
        if request.kind == "attribute" and not request.attribute_name:
            errors.append("attributeName: required when kind is 'attribute'")
        if not self.resolve_path(request.file_path).is_file():
            errors.append(f"filePath: file not found: {request.file_path}")
        return errors


def apply_edit(root_dir: Union[str, Path], request: RequestLike) -> EditResult:
    """Apply one edit relative to root_dir. A bad configuration fails the edit."""
    try:
        facade = MutationFacade(root_dir)
    except ConfigError as e:
        logger.error(f"Cannot apply edit: {e}")
        return _payload_failure(request, f"Configuration error: {e}")
    return facade.apply_edit(request)


def apply_batch(root_dir: Union[str, Path], requests: Iterable[RequestLike]) -> BatchResult:
    """Apply an ordered list of edits relative to root_dir. A bad configuration fails every edit."""
    try:
        facade = MutationFacade(root_dir)
    except ConfigError as e:
        logger.error(f"Cannot apply batch: {e}")
        return _batch_result([_payload_failure(request, f"Configuration error: {e}") for request in requests])
    return facade.apply_batch(requests)


def get_source_context(root_dir: Union[str, Path], element_id: str, radius: int = 5) -> Optional[SourceContext]:
    return MutationFacade(root_dir).get_source_context(element_id, radius)


def check_static_text(root_dir: Union[str, Path], file_path: str, line: int, column: int) -> bool:
    return MutationFacade(root_dir).check_static_text(file_path, line, column)


def validate_edit_request(root_dir: Union[str, Path], payload: Any) -> List[str]:
    return MutationFacade(root_dir).validate_edit_request(payload)
