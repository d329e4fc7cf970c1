"""
Shared enums for resource handlers.

Enums in this module are the fixed vocabularies every handler reports in.
They are defined once at import time and never mutated.

STDLIB ONLY - NO PYDANTIC.
"""

from enum import Enum


class OperationStatus(str, Enum):
    """
    Status tag carried by every ProgressEvent.

    SUCCESS and FAILED are terminal. IN_PROGRESS asks the caller to re-drive
    the operation (optionally after ``callback_delay_seconds``). PENDING is
    reserved for events that have not been started yet.
    """

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (OperationStatus.SUCCESS, OperationStatus.FAILED)


class HandlerErrorCode(str, Enum):
    """
    Terminal outcome codes returned to the caller of a failed operation.

    The set is closed: new codes are added here, never constructed from
    arbitrary strings at runtime.
    """

    # Request problems
    NOT_UPDATABLE = "NotUpdatable"
    INVALID_REQUEST = "InvalidRequest"
    INVALID_TYPE_CONFIGURATION = "InvalidTypeConfiguration"
    UNSUPPORTED_TARGET = "UnsupportedTarget"

    # Identity problems
    ACCESS_DENIED = "AccessDenied"
    INVALID_CREDENTIALS = "InvalidCredentials"

    # Resource state problems
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    RESOURCE_CONFLICT = "ResourceConflict"
    NOT_STABILIZED = "NotStabilized"
    NON_COMPLIANT = "NonCompliant"

    # Service problems
    THROTTLING = "Throttling"
    SERVICE_LIMIT_EXCEEDED = "ServiceLimitExceeded"
    GENERAL_SERVICE_EXCEPTION = "GeneralServiceException"
    SERVICE_INTERNAL_ERROR = "ServiceInternalError"
    NETWORK_FAILURE = "NetworkFailure"

    # Handler problems
    INTERNAL_FAILURE = "InternalFailure"
    HANDLER_INTERNAL_FAILURE = "HandlerInternalFailure"
    UNKNOWN = "Unknown"


__all__ = [
    "OperationStatus",
    "HandlerErrorCode",
]
