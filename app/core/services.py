"""
Base service layer patterns for business logic encapsulation.

This module provides the building blocks every app's service layer uses:
- ServiceResult: Success/failure wrapper returned by service calls
- ErrorCode: Shared error taxonomy carried on failed results
- BaseService: Base class with logging and transaction helpers

Service Layer Philosophy:
    Views handle HTTP concerns, models handle data, services handle logic.
    Expected failures (membership, ownership, bad input) come back as
    ServiceResult.failure(); unexpected failures (database errors, bugs)
    propagate as exceptions.

Usage:
    from core.services import BaseService, ErrorCode, ServiceResult

    class MessageService(BaseService):
        @classmethod
        def delete_message(cls, actor, message) -> ServiceResult[None]:
            if message.sender_id != actor.id:
                return ServiceResult.failure(
                    "Can only delete your own messages",
                    error_code=ErrorCode.NOT_AUTHORIZED,
                )

            with cls.atomic():
                message.soft_delete()

            cls.get_logger().info(f"Deleted message {message.id}")
            return ServiceResult.success(None)

    # In a view
    result = MessageService.delete_message(request.user, message)
    if not result:
        return service_error_response(result)

Related:
    - core.views.service_error_response: Maps error codes to HTTP statuses
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

T = TypeVar("T")
U = TypeVar("U")


class ErrorCode:
    """
    Machine-readable error codes for failed service results.

    NOT_AUTHENTICATED: No resolvable actor for the call
    NOT_AUTHORIZED: Actor lacks the membership or ownership required
    NOT_FOUND: Referenced record does not exist
    INVALID_ARGUMENT: Malformed or self-referential input
    INVALID_OPERATION: Operation not legal for the record's current state
    VALIDATION_ERROR: Required fields missing (see validate_required)
    """

    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_OPERATION = "INVALID_OPERATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Human-readable error message if failed
        error_code: One of ErrorCode for client handling
        errors: Field-level errors for validation failures

    Usage:
        return ServiceResult.success(conversation)
        return ServiceResult.failure("Message not found", ErrorCode.NOT_FOUND)

        result = ChatService.send_message(actor, conversation_id, "hi")
        if result:
            message_id = result.data
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result carrying data."""
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable code (see ErrorCode)
            errors: Field-level errors (for validation failures)
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from a caught exception.

        The error code defaults to the upper-cased exception class name.
        """
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    def map(self, func: Callable[[T], U]) -> ServiceResult[U]:
        """
        Transform the data if successful, pass failures through unchanged.

        Example:
            ConversationService.create_direct(a, b).map(lambda c: c.id)
        """
        if self.success:
            return ServiceResult.success(func(self.data))
        return self  # type: ignore[return-value]

    def __bool__(self) -> bool:
        """Truthiness follows success."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Services are stateless: use @classmethod or @staticmethod only, return
    ServiceResult for expected failures and let unexpected ones raise.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Named "<module>.<ServiceClass>" so log lines can be filtered per
        service, e.g. "chat.services.MessageService".
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute the enclosed block in a database transaction.

        Thin wrapper around transaction.atomic() so transaction boundaries
        read explicitly in service code. Nested use creates a savepoint.
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Log an exception and convert it to a failed ServiceResult.

        Args:
            exc: The caught exception
            context: Short description of what was being attempted
            log_level: Logging level (default ERROR)
        """
        message = f"{context}: {exc}" if context else str(exc)
        cls.get_logger().log(log_level, message, exc_info=True)
        return ServiceResult.from_exception(exc)

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are present and non-blank.

        Returns:
            ServiceResult.failure with per-field errors, or None when valid

        Example:
            validation = cls.validate_required(name=name)
            if validation is not None:
                return validation
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            return ServiceResult.failure(
                "Required fields missing",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors=errors,
            )
        return None
