"""
Service layer decorators for common functionality.

This module provides decorators for error handling and logging in the
service layer.
"""

import functools
import inspect
import structlog
from typing import Any, Awaitable, Callable, Dict, Type, ParamSpec, TypeVar

from riftcoach.core.exceptions import (
    DatabaseError,
    ExternalServiceError,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.errors import RiotAPIError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

_SKIPPED_ARGUMENTS = ("self", "db", "session")


def _build_context(
    func: Callable[..., Any],
    service_name: str,
    include_context: bool,
    args: Any,
    kwargs: Any,
) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "service": service_name,
        "operation": func.__name__,
    }
    if not include_context:
        return context

    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    for name, value in bound_args.arguments.items():
        if name in _SKIPPED_ARGUMENTS:
            continue
        # Keep log entries small
        context[name] = str(value)[:200] if value is not None else None
    return context


def service_error_handler(
    service_name: str,
    include_context: bool = True,
    default_error_type: Type[ServiceException] = ServiceException,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for handling async service method errors with structured logging.

    Riot API errors and service exceptions propagate unchanged so routers can
    map them to status codes. Anything else is wrapped in a service exception.

    :param service_name: Name of the service (e.g., "PlayerAnalysisService")
    :param include_context: Whether to include method parameters in error context
    :param default_error_type: Exception type used to wrap unexpected errors
    :returns: Decorated coroutine function

    :example:
        @service_error_handler("PlayerAnalysisService")
        async def analyze_player(self, puuid: str) -> PlayerAnalysis:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        operation_name = func.__name__

        @functools.wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            context = _build_context(func, service_name, include_context, args, kwargs)

            try:
                logger.debug("Service method called", **context)
                result = await func(*args, **kwargs)
                logger.debug("Service method completed successfully", **context)
                return result

            except RiotAPIError as e:
                logger.warning(
                    "Riot API error in service operation - propagating to caller",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    status_code=e.status_code,
                    **context,
                )
                raise

            except ServiceException as e:
                logger.warning(
                    "Service operation failed",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    error_context=e.context,
                    **context,
                )
                raise

            except ValueError as e:
                logger.error(
                    "Validation error in service operation",
                    error_message=str(e),
                    **context,
                )
                raise ValidationError(
                    message=str(e),
                    service=service_name,
                    operation=operation_name,
                    context=context,
                ) from e

            except (ConnectionError, TimeoutError) as e:
                logger.error(
                    "External service connectivity error",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    **context,
                )
                raise ExternalServiceError(
                    message=str(e),
                    service=service_name,
                    operation=operation_name,
                    external_service="riot_api",
                    context=context,
                    original_error=e,
                ) from e

            except Exception as e:
                if any(
                    keyword in str(e).lower()
                    for keyword in ["database", "sql", "connection", "transaction"]
                ):
                    error: ServiceException = DatabaseError(
                        message=str(e),
                        service=service_name,
                        operation=operation_name,
                        context=context,
                        original_error=e,
                    )
                else:
                    error = default_error_type(
                        message=f"Unexpected error in {service_name}.{operation_name}: {e}",
                        service=service_name,
                        operation=operation_name,
                        context=context,
                        original_error=e,
                    )

                logger.error(
                    "Unexpected error in service operation",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    **context,
                )
                raise error from e

        return async_wrapper

    return decorator
