"""
Service layer custom exceptions.

Service-specific exceptions carry the service/operation that raised them and
a context dict for structured logging. Upstream HTTP failures live in
``riftcoach.core.riot_api.errors``.
"""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for all service layer errors."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.service and self.operation:
            return f"[{self.service}.{self.operation}] {self.message}"
        return self.message


class DatabaseError(ServiceException):
    """Exception raised for database-related errors in services."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Database error: {message}",
            service=service,
            operation=operation,
            context=context,
            original_error=original_error,
        )


class ValidationError(ServiceException):
    """Exception raised for input validation errors in services."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        validation_context = context or {}
        if field:
            validation_context["field"] = field
        if value is not None:
            validation_context["value"] = str(value)

        super().__init__(
            message=f"Validation error: {message}",
            service=service,
            operation=operation,
            context=validation_context,
        )


class ExternalServiceError(ServiceException):
    """Exception raised for connectivity problems with an external service."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        external_service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        external_context = context or {}
        if external_service:
            external_context["external_service"] = external_service

        super().__init__(
            message=f"External service error: {message}",
            service=service,
            operation=operation,
            context=external_context,
            original_error=original_error,
        )


class ParticipantNotFound(ServiceException):
    """The analysed player does not appear in a match record."""

    def __init__(self, match_id: str, puuid: str):
        super().__init__(
            message=f"Participant {puuid} not found in match {match_id}",
            service="MatchRecordNormalizer",
            operation="normalize",
            context={"match_id": match_id, "puuid": puuid},
        )
        self.match_id = match_id
        self.puuid = puuid


class NoMatchesAvailable(ServiceException):
    """No qualifying match survived fetching and filtering."""

    def __init__(self, puuid: str, queue: str, requested: int = 0):
        super().__init__(
            message="No matches available for analysis",
            service="PlayerAnalysisService",
            operation="analyze_player",
            context={"puuid": puuid, "queue": queue, "requested": requested},
        )


class CacheUnavailable(ServiceException):
    """The key-value cache could not be reached. Never surfaced to callers."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            service="KeyValueCache",
            context={"key": key} if key else {},
            original_error=original_error,
        )
