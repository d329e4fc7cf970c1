"""
Failure shapes seen by resource handlers, plus the library's own errors.

Two families live here:

- **SDK failures:** the exceptions raised while talking to a remote service.
  Their class hierarchy *is* the "failure kind" used by kind-based rules: a
  rule registered for ``SdkServiceException`` also accepts every subclass.
- **Library errors:** ``HandlerCommonsError`` and subclasses, raised when the
  library itself is misused (bad rule registration, malformed schema).

Manifesto:
    - **Kinds are classes:** Matching a failure is ``isinstance`` over the MRO
    - **Codes are payload:** A service-reported code travels in ErrorDetails
    - **Client vs service:** Transport failures never carry a service code
    - **Error chaining:** Library errors keep the original exception as cause

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        SdkException                              │
        │                  (message, cause, retryable)                     │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  SdkClientException             SdkServiceException              │
        │  (connectivity, serialization)  (status_code, request_id)        │
        │       │                                │                         │
        │  ClientTimeoutException          ServiceException                │
        │                                  (error_details.error_code)      │
        │                                                                  │
        ├─────────────────────────────────────────────────────────────────┤
        │                     HandlerCommonsError                          │
        │          RuleSetError               SchemaLoadError              │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    A service-reported failure:

    >>> err = ServiceException(
    ...     "Rate exceeded",
    ...     error_details=ErrorDetails(error_code="ThrottlingException"),
    ...     status_code=400,
    ... )
    >>> err.error_code
    'ThrottlingException'

    A transport failure carries no code:

    >>> SdkClientException("Unable to execute HTTP request").error_code is None
    True

Tags:
    error-handling, exception-hierarchy, failure-kind, sdk, handler-commons
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorDetails:
    """Service-reported error payload attached to a ServiceException."""

    error_code: str | None = None
    error_message: str | None = None
    service_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {}
        for key in ["error_code", "error_message", "service_name"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


# =============================================================================
# SDK FAILURES
# =============================================================================


class SdkException(Exception):
    """
    Base class for every failure raised by a remote call.

    Subclasses set ``default_retryable``; the flag is informational only,
    nothing in this library retries.
    """

    default_retryable: bool = False

    def __init__(
        self,
        message: str = "",
        *,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @property
    def error_code(self) -> str | None:
        """Service-reported error code, if the failure carries one."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class SdkClientException(SdkException):
    """The request never produced a service response (connectivity, serialization)."""

    default_retryable = True


class ClientTimeoutException(SdkClientException):
    """The client gave up waiting for the service."""

    pass


class SdkServiceException(SdkException):
    """The service answered with an error but without a structured code."""

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        request_id: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.request_id = request_id

    @property
    def is_throttling(self) -> bool:
        return self.status_code == 429


class ServiceException(SdkServiceException):
    """The service answered with a structured error code."""

    def __init__(
        self,
        message: str = "",
        *,
        error_details: ErrorDetails | None = None,
        **kwargs: Any,
    ):
        if not message and error_details is not None and error_details.error_message:
            message = error_details.error_message
        super().__init__(message, **kwargs)
        self.error_details = error_details

    @property
    def error_code(self) -> str | None:
        if self.error_details is None:
            return None
        return self.error_details.error_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, error_code={self.error_code!r})"


# =============================================================================
# LIBRARY ERRORS
# =============================================================================


class HandlerCommonsError(Exception):
    """Base exception for misuse of this library."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> HandlerCommonsError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RuleSetError("Invalid rule").with_context(status="fail_with")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class RuleSetError(HandlerCommonsError):
    """An error rule could not be registered."""

    pass


class SchemaLoadError(HandlerCommonsError):
    """A resource type schema document is malformed."""

    pass


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def exception_message(error: BaseException) -> str:
    """Human-readable message for an exception, never empty and never raising."""
    try:
        message = getattr(error, "message", None) or str(error)
    except Exception:  # noqa: BLE001 - __str__ and properties on foreign exceptions may raise
        message = None
    if not isinstance(message, str) or not message:
        return error.__class__.__name__
    return message


__all__ = [
    # Payload
    "ErrorDetails",
    # SDK failures
    "SdkException",
    "SdkClientException",
    "ClientTimeoutException",
    "SdkServiceException",
    "ServiceException",
    # Library errors
    "HandlerCommonsError",
    "RuleSetError",
    "SchemaLoadError",
    # Utilities
    "exception_message",
]
