"""
Basic exception classes for Coach Calendar.

This module contains the exception hierarchy used by the date arithmetic
core and the surrounding CLI/configuration layers, without creating
import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    ENVIRONMENT = "environment"
    UNKNOWN = "unknown"


class CoachCalendarError(Exception):
    """Base exception class for Coach Calendar specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ValidationError(CoachCalendarError):
    """Input validation errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class InvalidDateFormatError(ValidationError):
    """A date is not YYYY-MM-DD, is not a real calendar day, or is out of range."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Invalid date {value!r}{detail}. Expected YYYY-MM-DD format.",
            user_message=f"'{value}' is not a valid date (expected YYYY-MM-DD).",
            context=value,
        )
        self.value: object = value


class InvalidTimezoneError(ValidationError):
    """A timezone identifier cannot be resolved by the timezone database."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Invalid timezone identifier: {value!r}",
            user_message=f"'{value}' is not a recognised timezone.",
            context=value,
        )
        self.value: object = value


class InvalidDirectionError(ValidationError):
    """A navigation direction is neither 'prev' nor 'next'."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Invalid navigation direction: {value!r}. Expected 'prev' or 'next'.",
            user_message="Direction must be 'prev' or 'next'.",
            context=value,
        )
        self.value: object = value


class ConfigurationError(CoachCalendarError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class TimezoneDetectionError(CoachCalendarError):
    """The ambient timezone could not be detected from the environment."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.ENVIRONMENT,
            severity=ErrorSeverity.LOW,
            context=context,
            recoverable=True,
        )
