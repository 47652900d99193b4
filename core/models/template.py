# =============================================================================
# core/models/template.py - Message Template Schemas
# =============================================================================
# These models define the template document and its API contract:
# - ColumnConfig: One column of the message (text around a column value)
# - ValidationConfig: Per-value cleanup rules applied when messages run
# - TemplateConfig: The JSON document stored in message_templates.config
# - TemplateSave: Input for create-or-update
# - Template: Stored template returned to clients
#
# The config document is stored with camelCase keys (allowedValues,
# errorMessage). Both camelCase and snake_case are accepted on input.
# =============================================================================

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

TemplateType = Literal["csv", "txt"]
ValidationRule = Literal["trim", "skipBlanks"]


class _ConfigDocument(BaseModel):
    """Base for the stored config document (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ColumnConfig(_ConfigDocument):
    """
    One column of a message template.

    When the message is built, each selected column contributes
    `preface + value + closing` on its own line.
    """

    id: str | None = None
    name: str
    selected: bool = False
    order: int | None = None
    preface: str = ""
    closing: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if len(value) < 1:
            raise PydanticCustomError("column_name_required", "Column name is required")
        return value

    @field_validator("preface", "closing", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ValidationConfig(_ConfigDocument):
    """Cleanup rules applied to column values."""

    rules: list[ValidationRule] = Field(default_factory=list)
    allowed_values: list[str] | None = None
    error_message: str = ""


class TemplateConfig(_ConfigDocument):
    """
    The stored template document.

    Example:
        {
            "type": "csv",
            "intro": "Hello team,",
            "columns": [
                {"id": "col-0", "name": "Region", "selected": true,
                 "order": 0, "preface": "Region: ", "closing": ""}
            ],
            "conclusion": "Thanks",
            "validation": {"rules": ["trim"], "errorMessage": ""}
        }
    """

    type: TemplateType
    intro: str = ""
    columns: list[ColumnConfig]
    conclusion: str = ""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    def to_document(self) -> dict[str, Any]:
        """Dump in the stored (camelCase) form."""
        return self.model_dump(mode="json", by_alias=True)


class TemplateSave(BaseModel):
    """
    Schema for creating or updating a template.

    Passing `id` updates that template; omitting it creates a new one.
    The config document must be of the same type as the template.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: UUID | None = None
    name: str
    description: str | None = None
    type: TemplateType
    config: TemplateConfig
    folder_id: UUID | None = Field(default=None, alias="folderId")

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: str) -> str:
        if len(value) < 3:
            raise PydanticCustomError(
                "template_name_too_short",
                "Template name must be at least 3 characters",
            )
        return value

    @field_validator("config")
    @classmethod
    def config_matches_type(cls, value: TemplateConfig, info: ValidationInfo) -> TemplateConfig:
        template_type = info.data.get("type")
        if template_type is not None and value.type != template_type:
            raise PydanticCustomError(
                "config_type_mismatch",
                "Config type must match template type",
            )
        return value


class Template(BaseModel):
    """One row of the message_templates table."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    description: str | None = None
    type: TemplateType
    config: TemplateConfig
    folder_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TemplateSummary(BaseModel):
    """Template entry in the folder listing."""
    id: UUID
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    folder_id: UUID | None = None


class TemplateSaveResponse(BaseModel):
    success: bool = True
    template_id: UUID
    message: str


class TemplatePreviewResponse(BaseModel):
    """A saved template rendered against a file's first row."""
    template_id: UUID
    file_id: UUID | None = None
    preview: str
