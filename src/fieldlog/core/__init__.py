"""
Core fieldlog Package

Contains core infrastructure: settings, templates and error handling.
"""

from fieldlog.core.exceptions import (
    FieldlogError,
    ConfigurationError,
    ValidationError,
    HandlerError,
    TemplateEvaluationError,
    ErrorCode,
    ErrorContext,
    RecoverySuggestion
)

__all__ = [
    'FieldlogError',
    'ConfigurationError',
    'ValidationError',
    'HandlerError',
    'TemplateEvaluationError',
    'ErrorCode',
    'ErrorContext',
    'RecoverySuggestion',
]
