"""
ProgressEvent - the continuation record passed between handler steps.

Every handler step takes a ProgressEvent and returns a new one. The event
carries the current resource model and callback context (both opaque to this
library) together with a status tag and, on failure, an outcome code and
message.

Manifesto:
    - **Immutable envelope:** Steps derive new events, they never edit one
    - **Opaque payload:** Model and context are copied through by identity
    - **Explicit outcome:** error_code is present exactly when status is FAILED
    - **Chainable:** then()/on_success() compose steps without nested ifs

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      ProgressEvent[M, C]                     │
        ├─────────────────────────────────────────────────────────────┤
        │  status: OperationStatus                                     │
        │  resource_model: M | None          (opaque)                  │
        │  callback_context: C | None        (opaque, caller-owned)    │
        │  error_code: HandlerErrorCode | None   (iff FAILED)          │
        │  message: str | None                                         │
        │  callback_delay_seconds: int                                 │
        ├─────────────────────────────────────────────────────────────┤
        │  progress() success() failed()   │  then() on_success()      │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> event = ProgressEvent.progress({"Name": "db-1"}, None)
    >>> event.is_in_progress()
    True
    >>> done = event.then(lambda e: ProgressEvent.success(e.resource_model, e.callback_context))
    >>> done.is_success()
    True

Tags:
    progress-event, continuation, immutable, handler-commons
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, TypeVar

from handler_commons.core.enums import HandlerErrorCode, OperationStatus

M = TypeVar("M")
C = TypeVar("C")


@dataclass(frozen=True)
class ProgressEvent(Generic[M, C]):
    """Continuation record carrying model, context and status between steps."""

    status: OperationStatus = OperationStatus.IN_PROGRESS
    resource_model: M | None = None
    callback_context: C | None = None
    error_code: HandlerErrorCode | None = None
    message: str | None = None
    callback_delay_seconds: int = 0

    def __post_init__(self) -> None:
        if self.status == OperationStatus.FAILED and self.error_code is None:
            raise ValueError("A FAILED ProgressEvent requires an error_code")
        if self.status != OperationStatus.FAILED and self.error_code is not None:
            raise ValueError(f"error_code is only allowed on FAILED events, got {self.status.value}")
        if self.callback_delay_seconds < 0:
            raise ValueError("callback_delay_seconds must be >= 0")

    # ── Factories ────────────────────────────────────────────────

    @classmethod
    def progress(cls, model: M | None, context: C | None) -> ProgressEvent[M, C]:
        return cls(OperationStatus.IN_PROGRESS, model, context)

    @classmethod
    def success(cls, model: M | None, context: C | None) -> ProgressEvent[M, C]:
        return cls(OperationStatus.SUCCESS, model, context)

    @classmethod
    def failed(
        cls,
        model: M | None,
        context: C | None,
        error_code: HandlerErrorCode,
        message: str | None = None,
    ) -> ProgressEvent[M, C]:
        return cls(OperationStatus.FAILED, model, context, error_code=error_code, message=message)

    @classmethod
    def default_in_progress_handler(
        cls,
        context: C | None,
        callback_delay_seconds: int,
        model: M | None,
    ) -> ProgressEvent[M, C]:
        """In-progress event that asks the caller to come back after a delay."""
        return cls(
            OperationStatus.IN_PROGRESS,
            model,
            context,
            callback_delay_seconds=callback_delay_seconds,
        )

    # ── Derivation ───────────────────────────────────────────────

    def with_status(self, status: OperationStatus) -> ProgressEvent[M, C]:
        """Copy of this event with a new non-failed status; failure fields and callback delay are cleared."""
        return replace(self, status=status, error_code=None, message=None, callback_delay_seconds=0)

    def with_failure(self, error_code: HandlerErrorCode, message: str | None) -> ProgressEvent[M, C]:
        """Copy of this event marked FAILED, model and context preserved."""
        return replace(self, status=OperationStatus.FAILED, error_code=error_code, message=message)

    def with_context(self, context: C | None) -> ProgressEvent[M, C]:
        return replace(self, callback_context=context)

    def with_model(self, model: M | None) -> ProgressEvent[M, C]:
        return replace(self, resource_model=model)

    # ── Inspection ───────────────────────────────────────────────

    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED

    def is_in_progress(self) -> bool:
        return self.status == OperationStatus.IN_PROGRESS

    def can_continue_progress(self) -> bool:
        """True while the event is neither terminal nor waiting on a callback delay."""
        return self.is_in_progress() and self.callback_delay_seconds == 0

    # ── Chaining ─────────────────────────────────────────────────

    def then(self, func: Callable[[ProgressEvent[M, C]], ProgressEvent[M, C]]) -> ProgressEvent[M, C]:
        """Apply func if this event can continue; otherwise return self."""
        if self.can_continue_progress():
            return func(self)
        return self

    def on_success(self, func: Callable[[ProgressEvent[M, C]], ProgressEvent[M, C]]) -> ProgressEvent[M, C]:
        """Apply func if this event succeeded; otherwise return self."""
        if self.is_success():
            return func(self)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Status fields for logging; model and context are left to the printer."""
        result: dict[str, Any] = {"status": self.status.value}
        if self.error_code is not None:
            result["error_code"] = self.error_code.value
        if self.message is not None:
            result["message"] = self.message
        if self.callback_delay_seconds:
            result["callback_delay_seconds"] = self.callback_delay_seconds
        return result


__all__ = [
    "ProgressEvent",
]
