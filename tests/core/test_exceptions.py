"""
Tests for the fieldlog exception hierarchy.
"""

import pytest

from fieldlog.core.exceptions import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    FieldlogError,
    HandlerError,
    TemplateEvaluationError,
    ValidationError,
)


class TestFieldlogError:
    """Test the base error."""

    def test_defaults(self):
        error = FieldlogError("Something broke")
        assert error.error_code == ErrorCode.UNKNOWN_ERROR
        assert error.context == ErrorContext()
        assert error.get_user_message() == "Error: Something broke"

    def test_user_message_with_code(self):
        error = ValidationError("Missing operation", error_code=ErrorCode.VALIDATION_MISSING_FIELD)
        assert error.get_user_message() == "Error: Missing operation\nError Code: 5002"


class TestSubclasses:
    """Test the specialized errors."""

    def test_missing_settings_file_suggests_config_option(self):
        error = ConfigurationError(
            "Missing file",
            error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            config_key="config_file",
            config_value="settings.yaml"
        )
        assert error.context.stage == "settings"
        assert error.context.details == {'config_key': "config_file", 'config_value': "settings.yaml"}
        assert "--config" in error.get_user_message()

    def test_validation_error_records_field(self):
        error = ValidationError("Missing operation", field_name="operation")
        assert error.context.details['field_name'] == "operation"
        assert not error.suggestions

    def test_handler_load_failure_suggests_reinstall(self):
        cause = ImportError("no module named nowhere")
        error = HandlerError("Broken", error_code=ErrorCode.HANDLER_LOAD_FAILED, handler_key="pota", cause=cause)
        assert error.context.handler_key == "pota"
        assert error.cause is cause
        assert "Command: pip install" in error.get_user_message()

    def test_handler_error_keeps_given_context(self):
        context = ErrorContext(stage="key_for_ref", option_key="pota-adif-export")
        error = HandlerError("Broken", handler_key="pota", context=context)
        assert error.context is context
        assert error.context.handler_key == "pota"
        assert error.error_code == ErrorCode.HANDLER_SUGGESTION_FAILED

    def test_template_evaluation_error(self):
        error = TemplateEvaluationError("'x' is undefined", template="{{ x() }}")
        assert error.error_code == ErrorCode.TEMPLATE_EVALUATION_FAILED
        assert error.context.stage == "render"
        assert error.context.details['template'] == "{{ x() }}"

    @pytest.mark.parametrize("error_class", [ConfigurationError, ValidationError, HandlerError, TemplateEvaluationError])
    def test_all_are_fieldlog_errors(self, error_class):
        with pytest.raises(FieldlogError):
            raise error_class("failure")
