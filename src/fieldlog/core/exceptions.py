"""
Exceptions for fieldlog

Errors raised by settings loading, input validation, handler loading and
template evaluation. Handler failures during export planning are not raised:
the collector and resolver record them as ``HandlerError`` objects and go on.
"""

from enum import Enum
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class ErrorCode(Enum):
    """Error codes, grouped by area."""

    # Configuration errors (3000-3999)
    CONFIG_INVALID_FORMAT = 3001
    CONFIG_INVALID_VALUE = 3003
    CONFIG_FILE_NOT_FOUND = 3004
    CONFIG_SCHEMA_VALIDATION = 3006

    # Template errors (4000-4999)
    TEMPLATE_EVALUATION_FAILED = 4002

    # Validation errors (5000-5999)
    VALIDATION_INVALID_INPUT = 5001
    VALIDATION_MISSING_FIELD = 5002
    VALIDATION_TYPE_MISMATCH = 5003

    # Handler errors (7000-7999)
    HANDLER_LOAD_FAILED = 7002
    HANDLER_SUGGESTION_FAILED = 7004
    HANDLER_INVALID_TAG = 7005
    HANDLER_IDENTITY_FAILED = 7006
    HANDLER_SETTINGS_INVALID = 7007

    UNKNOWN_ERROR = 9000


@dataclass
class ErrorContext:
    """Where in export planning an error happened."""

    stage: str = ""
    handler_key: Optional[str] = None
    option_key: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RecoverySuggestion:
    """A hint shown to the user below the error message."""

    action: str
    description: str
    command: Optional[str] = None


class FieldlogError(Exception):
    """
    Base exception for all fieldlog errors.

    Carries an error code, a context describing where the error happened,
    the underlying exception and any suggestions for the user.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = list(suggestions or [])

    def get_user_message(self) -> str:
        """User-facing message with code and suggestions, as shown by the CLI."""
        lines = [f"Error: {self.message}"]

        if self.error_code != ErrorCode.UNKNOWN_ERROR:
            lines.append(f"Error Code: {self.error_code.value}")

        if self.suggestions:
            lines.append("\nSuggested solutions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion.action}")
                lines.append(f"     {suggestion.description}")
                if suggestion.command:
                    lines.append(f"     Command: {suggestion.command}")

        return "\n".join(lines)


class ConfigurationError(FieldlogError):
    """Settings could not be loaded or validated."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_FORMAT,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or ErrorContext(stage="settings")
        if config_key:
            context.details['config_key'] = config_key
            context.details['config_value'] = config_value

        super().__init__(message, error_code=error_code, context=context, **kwargs)

        if error_code == ErrorCode.CONFIG_FILE_NOT_FOUND:
            self.suggestions.append(RecoverySuggestion(
                action="Check the configuration path",
                description="Pass an existing YAML or JSON settings file with --config."
            ))
        elif error_code == ErrorCode.CONFIG_INVALID_VALUE:
            self.suggestions.append(RecoverySuggestion(
                action="Check configuration values",
                description="Review the FIELDLOG_ environment variables and the settings file."
            ))


class ValidationError(FieldlogError):
    """Invalid input to the export planning API or the CLI."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_INVALID_INPUT,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or ErrorContext()
        if field_name:
            context.details['field_name'] = field_name
            context.details['field_value'] = field_value

        super().__init__(message, error_code=error_code, context=context, **kwargs)


class HandlerError(FieldlogError):
    """A handler failed to load, suggest options, identify a reference or supply settings."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.HANDLER_SUGGESTION_FAILED,
        handler_key: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or ErrorContext()
        if handler_key:
            context.handler_key = handler_key

        super().__init__(message, error_code=error_code, context=context, **kwargs)

        if error_code == ErrorCode.HANDLER_LOAD_FAILED:
            self.suggestions.append(RecoverySuggestion(
                action="Reinstall the handler package",
                description="The entry point could not be imported; check that the package is installed.",
                command="pip install --force-reinstall <package>"
            ))


class TemplateEvaluationError(FieldlogError):
    """A compiled template failed while rendering a context."""

    def __init__(self, message: str, template: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', None) or ErrorContext(stage="render")
        if template is not None:
            context.details['template'] = template
        kwargs.setdefault('error_code', ErrorCode.TEMPLATE_EVALUATION_FAILED)

        super().__init__(message, context=context, **kwargs)
