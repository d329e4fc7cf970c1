"""Handler utilities used by resource handler state machines."""

from handler_commons.handler.commons import (
    DEFAULT_ERROR_RULE_SET,
    DRIFT_DETECTED_MESSAGE,
    attribute_flag,
    exec_once,
    handle_exception,
    report_resource_drift,
)
from handler_commons.handler.drift import DriftDetector, Mutation

__all__ = [
    "DEFAULT_ERROR_RULE_SET",
    "DRIFT_DETECTED_MESSAGE",
    "attribute_flag",
    "exec_once",
    "handle_exception",
    "report_resource_drift",
    "DriftDetector",
    "Mutation",
]
