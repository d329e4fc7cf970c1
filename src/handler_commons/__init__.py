"""
Handler Commons -- shared primitives for resource-lifecycle handlers.

Manifesto:
    Every resource handler (create, read, update, delete for one resource
    type) faces the same three problems: turning whatever an SDK call raised
    into one of a fixed set of outcome codes, not repeating side-effecting
    steps when the operation is re-driven, and noticing when the resource it
    just converged does not match what was asked for. This package solves
    them once.

Architecture::

    Layer 1 -- Types
        core/enums.py        OperationStatus, HandlerErrorCode (outcome codes)
        core/errors.py       SDK failure hierarchy + library errors
        core/progress.py     ProgressEvent continuation record
        core/schema.py       ResourceTypeSchema property descriptors

    Layer 2 -- Classification
        error/codes.py       ErrorCode vocabulary + extraction from failures
        error/status.py      ErrorStatus variant (ignore / fail_with / ...)
        error/rules.py       ErrorRule, ErrorRuleSet (first match wins)

    Layer 3 -- Handler utilities
        handler/commons.py   handle_exception, exec_once, report_resource_drift
        handler/drift.py     DriftDetector, Mutation

    Cross-cutting
        core/logging.py      structlog setup + RequestLogger capability
        core/printer.py      Redacting JSON printer
        core/settings.py     HandlerSettings (pydantic-settings)

Tags:
    handler-commons, error-classification, idempotency, drift, foundation
"""

__version__ = "0.1.0"

from handler_commons.core.enums import HandlerErrorCode, OperationStatus
from handler_commons.core.progress import ProgressEvent
from handler_commons.error.codes import ErrorCode
from handler_commons.error.rules import ErrorRuleSet
from handler_commons.error.status import ErrorStatus
from handler_commons.handler.commons import (
    DEFAULT_ERROR_RULE_SET,
    exec_once,
    handle_exception,
    report_resource_drift,
)

__all__ = [
    "__version__",
    "HandlerErrorCode",
    "OperationStatus",
    "ProgressEvent",
    "ErrorCode",
    "ErrorRuleSet",
    "ErrorStatus",
    "DEFAULT_ERROR_RULE_SET",
    "exec_once",
    "handle_exception",
    "report_resource_drift",
]
