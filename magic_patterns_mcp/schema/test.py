"""Tests for the create_design tool contract."""

import copy
import json

import pytest

from .lib import (
    DEFAULT_MODE,
    DEFAULT_PRESET_ID,
    TOOL_ANNOTATIONS,
    TOOL_NAME,
    ChatMessage,
    CreateDesignParameters,
    CreateDesignResponse,
    DesignMode,
    MessageContentKind,
    ValidationError,
    export_parameters_schema,
    export_result_schema,
    find_undocumented_fields,
    validate_parameters,
    validate_result,
)

# =============================================================================
# Declaration
# =============================================================================


class TestToolDeclaration:
    """Tests for the tool name, flags and defaults."""

    @pytest.mark.unit
    def test_tool_name(self):
        assert TOOL_NAME == "create_design"

    @pytest.mark.unit
    def test_annotations(self):
        """Tool creates designs but never destroys anything."""
        hints = TOOL_ANNOTATIONS.model_dump(by_alias=True)
        assert hints["readOnlyHint"] is False
        assert hints["destructiveHint"] is False

    @pytest.mark.unit
    def test_defaults(self):
        assert DEFAULT_MODE == DesignMode.BEST
        assert DEFAULT_PRESET_ID == "html-tailwind"


# =============================================================================
# Parameter Validation
# =============================================================================


class TestValidateParameters:
    """Tests for validate_parameters."""

    @pytest.mark.unit
    def test_prompt_only(self):
        """Omitted optional fields stay unset."""
        params = validate_parameters({"prompt": "pricing page"})
        assert params.prompt == "pricing page"
        assert params.mode is None
        assert params.preset_id is None

    @pytest.mark.unit
    def test_all_fields_by_wire_name(self):
        params = validate_parameters(
            {"prompt": "navbar", "mode": "fast", "presetId": "shadcn-tailwind"}
        )
        assert params.mode == "fast"
        assert params.preset_id == "shadcn-tailwind"

    @pytest.mark.unit
    def test_custom_preset_accepted(self):
        """Custom configuration IDs are not limited to built-in presets."""
        params = validate_parameters({"prompt": "x", "presetId": "cfg_7781"})
        assert params.preset_id == "cfg_7781"

    @pytest.mark.unit
    def test_missing_prompt(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_parameters({"mode": "best"})
        assert exc_info.value.location == "prompt"

    @pytest.mark.unit
    @pytest.mark.parametrize("prompt", ["", "   \n"])
    def test_empty_prompt(self, prompt):
        with pytest.raises(ValidationError) as exc_info:
            validate_parameters({"prompt": prompt})
        assert exc_info.value.location == "prompt"

    @pytest.mark.unit
    def test_unknown_mode(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_parameters({"prompt": "x", "mode": "turbo"})
        assert exc_info.value.location == "mode"

    @pytest.mark.unit
    def test_wrong_type(self):
        with pytest.raises(ValidationError, match="prompt"):
            validate_parameters({"prompt": 42})

    @pytest.mark.unit
    def test_unknown_argument_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_parameters({"prompt": "x", "images": ["a.png"]})
        assert exc_info.value.location == "images"

    @pytest.mark.unit
    def test_parameters_are_frozen(self):
        params = CreateDesignParameters(prompt="x")
        with pytest.raises(Exception):
            params.prompt = "y"  # type: ignore[misc]


# =============================================================================
# Result Validation
# =============================================================================


class TestValidateResult:
    """Tests for validate_result."""

    @pytest.mark.unit
    def test_valid_payload(self, design_payload):
        result = validate_result(design_payload)
        assert isinstance(result, CreateDesignResponse)
        assert result.id == "design_8f2c"
        assert [f.name for f in result.source_files] == ["App.tsx", "index.css"]
        assert result.compiled_files[0].hosted_url.endswith("bundle.js")
        assert result.editor_url == "https://www.magicpatterns.com/c/design_8f2c"

    @pytest.mark.unit
    def test_accepts_json_text(self, design_payload):
        result = validate_result(json.dumps(design_payload))
        assert result.id == "design_8f2c"

    @pytest.mark.unit
    def test_round_trip_preserves_everything(self, design_payload):
        """Validate then re-serialize reproduces the payload exactly."""
        original = copy.deepcopy(design_payload)
        result = validate_result(design_payload)
        assert result.to_wire() == original
        assert json.dumps(result.to_wire()) == json.dumps(original)

    @pytest.mark.unit
    def test_missing_editor_url(self, design_payload):
        del design_payload["editorUrl"]
        with pytest.raises(ValidationError) as exc_info:
            validate_result(design_payload)
        assert exc_info.value.location == "editorUrl"
        assert exc_info.value.contract == "CreateDesignResponse"

    @pytest.mark.unit
    def test_wrong_literal(self, design_payload):
        design_payload["chatMessages"][2]["content"][0]["type"] = "image"
        with pytest.raises(ValidationError) as exc_info:
            validate_result(design_payload)
        assert exc_info.value.location.startswith("chatMessages.2.content")

    @pytest.mark.unit
    def test_unknown_file_type(self, design_payload):
        design_payload["compiledFiles"][0]["type"] = "wasm"
        with pytest.raises(ValidationError) as exc_info:
            validate_result(design_payload)
        assert exc_info.value.location == "compiledFiles.0.type"

    @pytest.mark.unit
    def test_wrong_element_type(self, design_payload):
        design_payload["sourceFiles"][1] = "index.css"
        with pytest.raises(ValidationError) as exc_info:
            validate_result(design_payload)
        assert exc_info.value.location == "sourceFiles.1"

    @pytest.mark.unit
    def test_error_count_reported(self, design_payload):
        del design_payload["editorUrl"]
        del design_payload["previewUrl"]
        with pytest.raises(ValidationError) as exc_info:
            validate_result(design_payload)
        assert exc_info.value.error_count == 2
        assert "1 more" in str(exc_info.value)

    @pytest.mark.unit
    def test_extra_fields_ignored(self, design_payload):
        design_payload["createdAt"] = "2026-01-01T00:00:00Z"
        design_payload["sourceFiles"][0]["size"] = 51
        result = validate_result(design_payload)
        assert "createdAt" not in result.to_wire()

    @pytest.mark.unit
    def test_empty_collections(self, design_payload):
        design_payload["sourceFiles"] = []
        design_payload["compiledFiles"] = []
        design_payload["chatMessages"] = []
        result = validate_result(design_payload)
        assert result.source_files == []

    @pytest.mark.unit
    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            validate_result([1, 2, 3])  # type: ignore[arg-type]


# =============================================================================
# Chat Message Content
# =============================================================================


class TestChatMessageContent:
    """Tests for the plain/blocks content union."""

    @pytest.mark.unit
    def test_plain(self):
        message = ChatMessage.model_validate({"role": "user", "content": "hi"})
        assert message.content_kind is MessageContentKind.PLAIN
        assert message.text() == "hi"

    @pytest.mark.unit
    def test_blocks(self):
        message = ChatMessage.model_validate(
            {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "one"},
                    {"type": "text", "text": "two"},
                ],
            }
        )
        assert message.content_kind is MessageContentKind.BLOCKS
        assert message.text() == "one\ntwo"

    @pytest.mark.unit
    def test_empty_block_list(self):
        message = ChatMessage.model_validate({"role": "assistant", "content": []})
        assert message.content_kind is MessageContentKind.BLOCKS
        assert message.text() == ""


# =============================================================================
# Schema Export
# =============================================================================


class TestSchemaExport:
    """Tests for JSON Schema export and field documentation."""

    @pytest.mark.unit
    def test_parameter_schema_uses_wire_names(self):
        schema = export_parameters_schema()
        assert set(schema["properties"]) == {"prompt", "mode", "presetId"}
        assert schema["required"] == ["prompt"]

    @pytest.mark.unit
    def test_result_schema_uses_wire_names(self):
        schema = export_result_schema()
        assert "sourceFiles" in schema["properties"]
        assert "editorUrl" in schema["required"]

    @pytest.mark.unit
    def test_every_parameter_field_documented(self):
        assert find_undocumented_fields(export_parameters_schema()) == []

    @pytest.mark.unit
    def test_every_result_field_documented(self):
        assert find_undocumented_fields(export_result_schema()) == []

    @pytest.mark.unit
    def test_undocumented_field_detected(self):
        schema = {
            "title": "Thing",
            "properties": {"a": {"type": "string"}},
            "$defs": {"Inner": {"properties": {"b": {"description": "ok"}}}},
        }
        assert find_undocumented_fields(schema) == ["Thing.a"]
