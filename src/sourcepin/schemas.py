from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional

from sourcepin.config import DEFAULT_ATTRIBUTE_PREFIX, validate_attribute_prefix
from sourcepin.exceptions import ConfigError


EditKind = Literal["style", "content", "attribute"]


class WireModel(BaseModel):
    """
    Base for models exchanged with the browser overlay.

    Fields are emitted as camelCase (filePath, newValue, ...) and accepted in
    either spelling.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SourceLocation(WireModel):
    """
    A coordinate in a source file.
    Lines are 1-based, columns are 0-based code-point offsets.
    """
    file: str
    line: int = Field(ge=1)
    column: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


class ElementMetadata(WireModel):
    """
    Metadata computed for one markup element during an annotation pass.
    Derived from the source text, never stored on its own.
    """
    location: SourceLocation
    tag_name: str
    component_name: Optional[str] = None
    function_name: Optional[str] = None
    element_id: str
    is_static_text: bool = False


class AnnotateOptions(WireModel):
    """Options for an annotation pass."""
    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX

    @field_validator("attribute_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        try:
            return validate_attribute_prefix(value)
        except ConfigError as e:
            raise ValueError(str(e)) from e


class EditRequest(WireModel):
    """
    A single edit captured by the visual editor.

    line/column locate the opening tag of the element that was edited.
    attribute_name is required when kind is "attribute".
    original_value, when given, must match the literal currently in the source.
    """
    file_path: str = Field(min_length=1)
    line: int = Field(ge=1)
    column: int = Field(ge=0)
    new_value: str
    kind: EditKind = Field(validation_alias=AliasChoices("kind", "type"))
    original_value: Optional[str] = None
    attribute_name: Optional[str] = None


class EditResult(WireModel):
    """Outcome of one edit."""
    success: bool
    message: str
    file_path: str
    kind: str
    diff: Optional[str] = None


class BatchSummary(WireModel):
    total: int = 0
    success: int = 0
    failed: int = 0


class BatchResult(WireModel):
    """Outcome of an ordered list of edits."""
    results: List[EditResult] = Field(default_factory=list)
    summary: BatchSummary = Field(default_factory=BatchSummary)


class SourceContext(WireModel):
    """Lines around the source location an element id points at."""
    location: SourceLocation
    target_line: str
    context_lines: List[str]
    context_start: int
    total_lines: int
