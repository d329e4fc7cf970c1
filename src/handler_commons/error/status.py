"""
ErrorStatus - what an error rule says to do with a failure.

Manifesto:
    - **Closed variant:** ignore, fail-with, conditional, unexpected
    - **Immutable:** Statuses are frozen and shared between rule sets
    - **Factories, not constructors:** Call sites read as sentences,
      ``ErrorStatus.fail_with(HandlerErrorCode.THROTTLING)``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        ErrorStatus                           │
        ├───────────────────┬───────────────────┬─────────────────────┤
        │ IgnoreErrorStatus │ HandlerErrorStatus│ ConditionalError-   │
        │ (status=SUCCESS)  │ (handler_error_   │ Status (resolver)   │
        │                   │  code)            │                     │
        ├───────────────────┴───────────────────┴─────────────────────┤
        │ UnexpectedErrorStatus(exception)  - "no rule matched"        │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> ErrorStatus.ignore()
    IgnoreErrorStatus(status=<OperationStatus.SUCCESS: 'SUCCESS'>)
    >>> ErrorStatus.fail_with(HandlerErrorCode.ACCESS_DENIED).handler_error_code.value
    'AccessDenied'

Tags:
    error-status, classification, variant, handler-commons
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from handler_commons.core.enums import HandlerErrorCode, OperationStatus


class ErrorStatus:
    """Base of the ErrorStatus variant; use the factories to build one."""

    __slots__ = ()

    @staticmethod
    def ignore(status: OperationStatus = OperationStatus.SUCCESS) -> IgnoreErrorStatus:
        """Treat the failure as non-fatal and continue with ``status``."""
        if status == OperationStatus.FAILED:
            raise ValueError("ignore() cannot produce a FAILED status; use fail_with()")
        return IgnoreErrorStatus(status)

    @staticmethod
    def fail_with(handler_error_code: HandlerErrorCode) -> HandlerErrorStatus:
        """Fail the operation with a fixed outcome code."""
        return HandlerErrorStatus(HandlerErrorCode(handler_error_code))

    @staticmethod
    def conditional(resolver: Callable[[BaseException], ErrorStatus]) -> ConditionalErrorStatus:
        """Decide the status from the failure itself at dispatch time."""
        return ConditionalErrorStatus(resolver)


@dataclass(frozen=True, slots=True)
class IgnoreErrorStatus(ErrorStatus):
    status: OperationStatus = OperationStatus.SUCCESS


@dataclass(frozen=True, slots=True)
class HandlerErrorStatus(ErrorStatus):
    handler_error_code: HandlerErrorCode


@dataclass(frozen=True, slots=True)
class ConditionalErrorStatus(ErrorStatus):
    """Status computed by ``resolver`` once the failure is known."""

    resolver: Callable[[BaseException], ErrorStatus]

    def resolve(self, error: BaseException) -> ErrorStatus:
        return self.resolver(error)


@dataclass(frozen=True, slots=True)
class UnexpectedErrorStatus(ErrorStatus):
    """Sentinel returned when no rule in a rule set matched the failure."""

    exception: BaseException


__all__ = [
    "ErrorStatus",
    "IgnoreErrorStatus",
    "HandlerErrorStatus",
    "ConditionalErrorStatus",
    "UnexpectedErrorStatus",
]
