"""Tool contract: the create_design name, parameters and result shapes."""

from .lib import (
    DEFAULT_MODE,
    DEFAULT_PRESET_ID,
    KNOWN_PRESET_IDS,
    MODE_DESCRIPTION,
    PRESET_ID_DESCRIPTION,
    PROMPT_DESCRIPTION,
    TOOL_ANNOTATIONS,
    TOOL_DESCRIPTION,
    TOOL_NAME,
    TOOL_TITLE,
    ChatMessage,
    CompiledFile,
    CompiledFileType,
    ContentBlock,
    ContractModel,
    CreateDesignParameters,
    CreateDesignResponse,
    DesignMode,
    MessageContentKind,
    SourceFile,
    SourceFileType,
    ValidationError,
    export_parameters_schema,
    export_result_schema,
    find_undocumented_fields,
    validate_parameters,
    validate_result,
)

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
