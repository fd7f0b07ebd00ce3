"""Tool contract for the Magic Patterns create_design tool.

This module is the single source of truth for the tool's callable surface:
its name, description, capability annotations, the parameter model and the
structured result model. Every field carries a description because the
calling agent has no other source of guidance about what a field means.

Wire names are camelCase (``presetId``, ``sourceFiles``); the Python
attributes are snake_case and the models are populated and dumped by alias.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Mapping

from mcp.types import ToolAnnotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

# =============================================================================
# Tool Declaration
# =============================================================================

TOOL_NAME = "create_design"

TOOL_TITLE = "Create Design"

TOOL_DESCRIPTION = (
    "Creates a new design pattern using the Magic Patterns API based on the "
    "provided prompt, design system, and styling preferences."
)

PROMPT_DESCRIPTION = (
    "The prompt for the new design. BE AGGRESSIVE with your prompt - provide as "
    "much context and detail as possible! Include full React code if modifying "
    "existing components, detailed specifications, styling requirements, "
    "behavior descriptions, or any other relevant context. The more information "
    "you provide, the better the result. No prompt is too long or too detailed."
)

MODE_DESCRIPTION = (
    "The mode to use for the new design. 'best' provides higher quality results "
    "and should be preferred unless you need a quick fix for simple changes. "
    "'fast' is for time-sensitive, easy design fixes only. Defaults to 'best'."
)

PRESET_ID_DESCRIPTION = (
    "If nothing is provided, then html-tailwind is used. Can be either a default "
    "combination ('html-tailwind', 'shadcn-tailwind', 'chakraUi-inline', "
    "'mantine-inline') or a custom configuration ID."
)

# Creates a design upstream (not read-only) but never deletes or overwrites one.
TOOL_ANNOTATIONS = ToolAnnotations(
    title=TOOL_TITLE,
    readOnlyHint=False,
    destructiveHint=False,
    idempotentHint=False,
    openWorldHint=True,
)


class DesignMode(str, Enum):
    """Generation quality/speed trade-off."""

    FAST = "fast"
    BEST = "best"


DEFAULT_MODE = DesignMode.BEST

DEFAULT_PRESET_ID = "html-tailwind"

# Built-in presets. Custom configuration IDs are accepted as well.
KNOWN_PRESET_IDS = (
    "html-tailwind",
    "shadcn-tailwind",
    "chakraUi-inline",
    "mantine-inline",
)


class SourceFileType(str, Enum):
    """Kind of a generated source artifact."""

    JAVASCRIPT = "javascript"
    CSS = "css"
    ASSET = "asset"


class CompiledFileType(str, Enum):
    """Kind of a hosted build output."""

    JAVASCRIPT = "javascript"
    CSS = "css"
    FONT = "font"


class MessageContentKind(str, Enum):
    """Which case of the chat message content union is present."""

    PLAIN = "plain"  # a single string
    BLOCKS = "blocks"  # an ordered list of ContentBlock


# =============================================================================
# Models
# =============================================================================


class ContractModel(BaseModel):
    """Base for all contract shapes.

    Instances are immutable, accept both wire and attribute names, serialize
    with wire names, and ignore unknown fields so that additive upstream
    changes do not break parsing.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        serialize_by_alias=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict using wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


class CreateDesignParameters(ContractModel):
    """Arguments of one create_design invocation.

    Defaults for ``mode`` and ``preset_id`` are documented here but applied by
    the request adapter, so an omitted value stays ``None`` after validation.
    """

    model_config = ConfigDict(extra="forbid")

    prompt: str = Field(..., min_length=1, description=PROMPT_DESCRIPTION)
    mode: DesignMode | None = Field(None, description=MODE_DESCRIPTION)
    preset_id: str | None = Field(
        None, alias="presetId", description=PRESET_ID_DESCRIPTION
    )

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class SourceFile(ContractModel):
    """One generated source artifact."""

    id: str = Field(..., description="Unique identifier for the source file")
    name: str = Field(..., description="Name of the source file")
    code: str = Field(..., description="The actual source code content")
    type: SourceFileType = Field(..., description="The type of source file")


class CompiledFile(ContractModel):
    """One build output artifact, hosted by Magic Patterns."""

    id: str = Field(..., description="Unique identifier for the compiled file")
    file_name: str = Field(
        ..., alias="fileName", description="Name of the compiled file"
    )
    hosted_url: str = Field(
        ..., alias="hostedUrl", description="URL where the compiled file is hosted"
    )
    type: CompiledFileType = Field(..., description="The type of compiled file")


class ContentBlock(ContractModel):
    """A structured piece of chat message content."""

    type: Literal["text"] = Field(..., description="The type of content block")
    text: str = Field(..., description="The text content of the block")


class ChatMessage(ContractModel):
    """One message of the design conversation.

    ``content`` is either a plain string or an ordered list of content blocks.
    Use ``content_kind`` to branch on the case, or ``text()`` for a flat view.
    """

    role: str = Field(
        ...,
        description="The role of the message sender (e.g. user, assistant)",
    )
    content: str | list[ContentBlock] = Field(
        ...,
        description=(
            "The content of the message - can be a string or array of content blocks"
        ),
    )

    @property
    def content_kind(self) -> MessageContentKind:
        if isinstance(self.content, str):
            return MessageContentKind.PLAIN
        return MessageContentKind.BLOCKS

    def text(self) -> str:
        """Return the message text, joining blocks with newlines."""
        if self.content_kind is MessageContentKind.PLAIN:
            return self.content  # type: ignore[return-value]
        return "\n".join(block.text for block in self.content)  # type: ignore[union-attr]


class CreateDesignResponse(ContractModel):
    """The design bundle returned by a successful create_design call."""

    id: str = Field(..., description="The unique ID of the created design")
    source_files: list[SourceFile] = Field(
        ..., alias="sourceFiles", description="The source files for the design"
    )
    compiled_files: list[CompiledFile] = Field(
        ...,
        alias="compiledFiles",
        description="The compiled/processed files for the design",
    )
    editor_url: str = Field(
        ..., alias="editorUrl", description="URL to access the editor interface"
    )
    preview_url: str = Field(
        ..., alias="previewUrl", description="URL to preview the generated design"
    )
    chat_messages: list[ChatMessage] = Field(
        ...,
        alias="chatMessages",
        description="The conversation history for this design",
    )


# =============================================================================
# Validation
# =============================================================================


class ValidationError(Exception):
    """Structured input did not match a contract.

    Attributes:
        contract: Name of the model being validated.
        location: Dotted path of the first mismatch (wire names).
        message: Description of the first mismatch.
        error_count: Total number of mismatches found.
    """

    def __init__(
        self,
        contract: str,
        location: str,
        message: str,
        error_count: int = 1,
    ):
        self.contract = contract
        self.location = location
        self.message = message
        self.error_count = error_count
        detail = f"{contract}: {location}: {message}"
        if error_count > 1:
            detail += f" (and {error_count - 1} more)"
        super().__init__(detail)

    @classmethod
    def from_pydantic(
        cls, contract: str, exc: PydanticValidationError
    ) -> "ValidationError":
        errors = exc.errors(include_url=False, include_input=False)
        if not errors:
            return cls(contract, "<root>", str(exc))
        first = errors[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        return cls(contract, location, first["msg"], error_count=len(errors))


def validate_parameters(raw: Mapping[str, Any]) -> CreateDesignParameters:
    """Validate tool arguments.

    Structural only: types, enum membership, requiredness and a non-blank
    prompt. No defaults are substituted.

    Raises:
        ValidationError: On the first mismatch.
    """
    try:
        return CreateDesignParameters.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic("CreateDesignParameters", e) from e


def validate_result(raw: Mapping[str, Any] | str | bytes) -> CreateDesignResponse:
    """Validate an upstream response body.

    Args:
        raw: Decoded JSON object, or the raw JSON text.

    Raises:
        ValidationError: On the first mismatch. Nothing is partially accepted.
    """
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return CreateDesignResponse.model_validate_json(raw)
        return CreateDesignResponse.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic("CreateDesignResponse", e) from e


# =============================================================================
# Schema Export
# =============================================================================


def export_parameters_schema() -> dict[str, Any]:
    """JSON Schema of the tool arguments, using wire names."""
    return CreateDesignParameters.model_json_schema(by_alias=True)


def export_result_schema() -> dict[str, Any]:
    """JSON Schema of the structured result, using wire names."""
    return CreateDesignResponse.model_json_schema(by_alias=True, mode="serialization")


def find_undocumented_fields(schema: Mapping[str, Any]) -> list[str]:
    """List object properties in a JSON Schema that lack a description.

    Checks the root object and every entry under ``$defs``.

    Returns:
        Paths like ``"SourceFile.name"``; empty when fully documented.
    """
    missing: list[str] = []
    objects = [(schema.get("title", "<root>"), schema)]
    objects.extend(schema.get("$defs", {}).items())
    for title, obj in objects:
        for prop, prop_schema in obj.get("properties", {}).items():
            if not prop_schema.get("description"):
                missing.append(f"{title}.{prop}")
    return missing


__all__ = [
    # Declaration
    "TOOL_NAME",
    "TOOL_TITLE",
    "TOOL_DESCRIPTION",
    "TOOL_ANNOTATIONS",
    "PROMPT_DESCRIPTION",
    "MODE_DESCRIPTION",
    "PRESET_ID_DESCRIPTION",
    "DEFAULT_MODE",
    "DEFAULT_PRESET_ID",
    "KNOWN_PRESET_IDS",
    # Enums
    "DesignMode",
    "SourceFileType",
    "CompiledFileType",
    "MessageContentKind",
    # Models
    "ContractModel",
    "CreateDesignParameters",
    "SourceFile",
    "CompiledFile",
    "ContentBlock",
    "ChatMessage",
    "CreateDesignResponse",
    # Validation
    "ValidationError",
    "validate_parameters",
    "validate_result",
    # Export
    "export_parameters_schema",
    "export_result_schema",
    "find_undocumented_fields",
]
