"""Failure classification: error codes, statuses and rule sets."""

from handler_commons.error.codes import ErrorCode
from handler_commons.error.rules import ErrorRule, ErrorRuleSet, ErrorRuleSetBuilder
from handler_commons.error.status import (
    ConditionalErrorStatus,
    ErrorStatus,
    HandlerErrorStatus,
    IgnoreErrorStatus,
    UnexpectedErrorStatus,
)

__all__ = [
    "ErrorCode",
    "ErrorRule",
    "ErrorRuleSet",
    "ErrorRuleSetBuilder",
    "ErrorStatus",
    "IgnoreErrorStatus",
    "HandlerErrorStatus",
    "ConditionalErrorStatus",
    "UnexpectedErrorStatus",
]
