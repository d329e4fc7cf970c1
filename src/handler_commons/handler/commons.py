"""
Shared handler primitives: failure dispatch, run-once execution, drift reports.

These are the three utilities every resource handler's state machine calls:

- ``handle_exception``: turn any raised failure into a ProgressEvent using an
  ErrorRuleSet. Total: it never lets an unclassified failure escape.
- ``exec_once``: run a step at most once across repeated invocations of a
  resumable operation, keyed by a flag in the caller's callback context.
- ``report_resource_drift``: log one audit line when the observed model
  differs from the desired one on any schema property.

Manifesto:
    Long-running resource operations are re-driven many times: every
    callback re-enters the same handler with the persisted context. Steps
    with side effects (issuing a reboot, attaching a role) must not repeat,
    and failures must come back as one of a handful of outcome codes the
    orchestrator understands. Centralizing both keeps each handler a thin
    sequence of ``then()`` calls.

    - **Total dispatch:** Unknown failure → InternalFailure, never a raise
    - **Caller-owned state:** Flags live in the callback context, not here
    - **At-least-once:** A step that raises or fails is attempted again
    - **Observer only:** Drift reporting never changes the outcome

Architecture:
    ::

        handler step ──raises──► handle_exception(progress, e, rule_set)
                                        │
                         rule_set.handle(e) ─► ErrorStatus
                                        │
              ┌─────────────────┬───────┴────────┬──────────────────────┐
              ▼                 ▼                ▼                      ▼
          Ignore(s)        FailWith(code)   Conditional(fn)        Unexpected
          status=s         FAILED, code     fn(e) → dispatch       FAILED,
          model/context    message=e        again                  InternalFailure
          passed through

        exec_once(progress, step, getter, setter):
            getter(ctx) ─► True  ─► progress (step not invoked)
                       └─► False ─► result = step()
                                    result not FAILED ─► setter(ctx, True)

Examples:
    >>> rules = (
    ...     ErrorRuleSet.extend(DEFAULT_ERROR_RULE_SET)
    ...     .with_error_codes(ErrorStatus.fail_with(HandlerErrorCode.NOT_FOUND), ErrorCode.RESOURCE_NOT_FOUND_EXCEPTION)
    ...     .build()
    ... )
    >>> event = handle_exception(ProgressEvent.progress(model, ctx), error, rules)

    >>> progress = exec_once(
    ...     progress,
    ...     lambda: reboot_instance(progress),
    ...     *attribute_flag("rebooted"),
    ... )

Tags:
    handler, dispatch, idempotency, run-once, drift, handler-commons
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar

from handler_commons.core.enums import HandlerErrorCode
from handler_commons.core.errors import SdkClientException, SdkServiceException, exception_message
from handler_commons.core.logging import RequestLogger, get_logger
from handler_commons.core.progress import ProgressEvent
from handler_commons.core.schema import ResourceTypeSchema
from handler_commons.error.codes import ErrorCode
from handler_commons.error.rules import ErrorRuleSet
from handler_commons.error.status import (
    ConditionalErrorStatus,
    ErrorStatus,
    HandlerErrorStatus,
    IgnoreErrorStatus,
)
from handler_commons.handler.drift import DriftDetector

if TYPE_CHECKING:
    from handler_commons.core.settings import HandlerSettings

logger = get_logger(__name__)

M = TypeVar("M")
C = TypeVar("C")

DRIFT_DETECTED_MESSAGE = "Resource drift detected"
DRIFT_DETECTION_FAILED_MESSAGE = "Resource drift detection failed"
UNEXPECTED_FAILURE_MESSAGE = "Internal failure"

# Conditional statuses may resolve to other conditionals; bound the chain.
_MAX_CONDITIONAL_DEPTH = 8


DEFAULT_ERROR_RULE_SET: ErrorRuleSet = (
    ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
    .with_error_codes(
        ErrorStatus.fail_with(HandlerErrorCode.SERVICE_INTERNAL_ERROR),
        ErrorCode.CLIENT_UNAVAILABLE,
        ErrorCode.SERVICE_UNAVAILABLE,
        ErrorCode.INTERNAL_FAILURE,
    )
    .with_error_codes(
        ErrorStatus.fail_with(HandlerErrorCode.ACCESS_DENIED),
        ErrorCode.ACCESS_DENIED_EXCEPTION,
        ErrorCode.ACCESS_DENIED,
        ErrorCode.NOT_AUTHORIZED,
        ErrorCode.UNAUTHORIZED_OPERATION,
    )
    .with_error_codes(
        ErrorStatus.fail_with(HandlerErrorCode.INVALID_CREDENTIALS),
        ErrorCode.INVALID_CLIENT_TOKEN_ID,
        ErrorCode.UNRECOGNIZED_CLIENT_EXCEPTION,
        ErrorCode.EXPIRED_TOKEN,
        ErrorCode.SIGNATURE_DOES_NOT_MATCH,
    )
    .with_error_codes(
        ErrorStatus.fail_with(HandlerErrorCode.THROTTLING),
        ErrorCode.THROTTLING_EXCEPTION,
        ErrorCode.THROTTLING,
        ErrorCode.REQUEST_LIMIT_EXCEEDED,
        ErrorCode.TOO_MANY_REQUESTS_EXCEPTION,
    )
    .with_error_codes(
        ErrorStatus.fail_with(HandlerErrorCode.INVALID_REQUEST),
        ErrorCode.INVALID_PARAMETER_COMBINATION,
        ErrorCode.INVALID_PARAMETER_VALUE,
        ErrorCode.MISSING_PARAMETER,
        ErrorCode.VALIDATION_ERROR,
        ErrorCode.VALIDATION_EXCEPTION,
    )
    .with_error_classes(
        ErrorStatus.fail_with(HandlerErrorCode.SERVICE_INTERNAL_ERROR),
        SdkClientException,
        SdkServiceException,
    )
    .build()
)


# =============================================================================
# DISPATCH
# =============================================================================


def _resolve_status(error: BaseException, rule_set: ErrorRuleSet) -> ErrorStatus | None:
    """Final status for ``error``, or None when nothing applies."""
    status = rule_set.handle(error)
    for _ in range(_MAX_CONDITIONAL_DEPTH):
        if not isinstance(status, ConditionalErrorStatus):
            break
        status = status.resolve(error)
    if isinstance(status, (IgnoreErrorStatus, HandlerErrorStatus)):
        return status
    return None


def handle_exception(
    progress: ProgressEvent[M, C],
    error: BaseException,
    rule_set: ErrorRuleSet,
) -> ProgressEvent[M, C]:
    """
    Convert a raised failure into a ProgressEvent derived from ``progress``.

    Model and callback context are carried over by identity. Neither
    ``progress`` nor ``error`` is modified.
    """
    try:
        status = _resolve_status(error, rule_set)
    except Exception as exc:  # noqa: BLE001 - a raising conditional resolver counts as unhandled
        logger.warning(
            "error_status_resolution_failed",
            error_type=type(error).__name__,
            resolver_error=exception_message(exc),
        )
        status = None

    if isinstance(status, IgnoreErrorStatus):
        logger.debug("exception_ignored", error_type=type(error).__name__, status=status.status.value)
        return progress.with_status(status.status)

    if isinstance(status, HandlerErrorStatus):
        logger.debug(
            "exception_classified",
            error_type=type(error).__name__,
            handler_error_code=status.handler_error_code.value,
        )
        return progress.with_failure(status.handler_error_code, exception_message(error))

    logger.warning(
        "exception_unhandled",
        error_type=type(error).__name__,
        error=exception_message(error),
    )
    return progress.with_failure(HandlerErrorCode.INTERNAL_FAILURE, UNEXPECTED_FAILURE_MESSAGE)


# =============================================================================
# RUN-ONCE
# =============================================================================


def exec_once(
    progress: ProgressEvent[M, C],
    func: Callable[[], ProgressEvent[M, C]],
    condition_getter: Callable[[C | None], bool],
    condition_setter: Callable[[C | None, bool], None],
) -> ProgressEvent[M, C]:
    """
    Invoke ``func`` unless the flag read by ``condition_getter`` is already set.

    The flag is set through ``condition_setter`` only after ``func`` returned
    a non-FAILED event, against that event's callback context (falling back to
    ``progress``'s). Exceptions from ``func`` propagate with the flag unset.
    """
    if condition_getter(progress.callback_context):
        return progress

    result = func()
    if result.is_failed():
        return result

    context = result.callback_context if result.callback_context is not None else progress.callback_context
    condition_setter(context, True)
    return result


def attribute_flag(name: str) -> tuple[Callable[[Any], bool], Callable[[Any, bool], None]]:
    """Getter/setter pair for a boolean attribute on an attribute-style context."""

    def getter(context: Any) -> bool:
        return bool(getattr(context, name, False))

    def setter(context: Any, value: bool) -> None:
        setattr(context, name, value)

    return getter, setter


# =============================================================================
# DRIFT
# =============================================================================


def _log_detection_failure(request_logger: RequestLogger, schema: ResourceTypeSchema, error: Exception) -> None:
    try:
        request_logger.log_exception(DRIFT_DETECTION_FAILED_MESSAGE, error)
    except Exception as exc:  # noqa: BLE001 - the printer may fail on the same values
        logger.warning(
            "drift_detection_failed",
            type_name=schema.type_name,
            error_type=type(error).__name__,
            log_error=exception_message(exc),
        )
        request_logger.sink.log(f"{DRIFT_DETECTION_FAILED_MESSAGE} for {schema.type_name}")


def report_resource_drift(
    input_model: M | None,
    progress: ProgressEvent[M, C],
    schema: ResourceTypeSchema,
    request_logger: RequestLogger,
    settings: HandlerSettings | None = None,
) -> ProgressEvent[M, C]:
    """
    Log one line when ``progress.resource_model`` drifted from ``input_model``.

    Returns ``progress`` unchanged. Rendering failures degrade to a shorter
    line listing the drifted property names; detection failures are logged,
    never raised.
    """
    if settings is not None and not settings.drift_detection_enabled:
        return progress

    try:
        mutations = DriftDetector(schema).detect_drift(input_model, progress.resource_model)
    except Exception as exc:  # noqa: BLE001 - drift reporting must not change the outcome
        _log_detection_failure(request_logger, schema, exc)
        return progress

    if not mutations:
        return progress

    try:
        line = request_logger.render(
            DRIFT_DETECTED_MESSAGE,
            {
                "drift": {name: m.to_dict() for name, m in mutations.items()},
                "input": input_model,
                "output": progress.resource_model,
            },
        )
    except Exception as exc:  # noqa: BLE001 - models may hold values the printer cannot render
        logger.warning("drift_render_failed", type_name=schema.type_name, error=exception_message(exc))
        line = f"{DRIFT_DETECTED_MESSAGE} for {schema.type_name}: {', '.join(sorted(mutations))}"

    request_logger.sink.log(line)
    return progress


__all__ = [
    "DEFAULT_ERROR_RULE_SET",
    "DRIFT_DETECTED_MESSAGE",
    "handle_exception",
    "exec_once",
    "attribute_flag",
    "report_resource_drift",
]
