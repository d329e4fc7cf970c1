"""
Semantic error codes and their extraction from raised failures.

A semantic error code is the string a remote service reports to identify a
specific error condition (``ThrottlingException``, ``AccessDenied``, ...).
Code-based error rules match on the ErrorCode extracted here.

Extraction order (``ErrorCode.from_exception``):

1. A service-reported code carried by the failure, used verbatim. It is read
   from ``error_code``, ``error_details.error_code`` or a botocore-style
   ``response["Error"]["Code"]``.
2. Otherwise the failure category: a client-side/transport failure yields
   CLIENT_UNAVAILABLE, a service-side failure without a code yields
   SERVICE_UNAVAILABLE.
3. Otherwise no code.

Strings outside the vocabulary extract as ``None`` so that kind-based rules
still get a chance to match.

Tags:
    error-code, classification, extraction, handler-commons
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from handler_commons.core.errors import SdkClientException, SdkServiceException


class ErrorCode(str, Enum):
    """
    Service-reported error codes understood by the default error rules.

    Values are the exact strings services put on the wire. The two markers
    CLIENT_UNAVAILABLE and SERVICE_UNAVAILABLE are also produced for failures
    that carry no code at all.
    """

    # Markers for code-less failures
    CLIENT_UNAVAILABLE = "ClientUnavailable"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    INTERNAL_FAILURE = "InternalFailure"

    # Authorization
    ACCESS_DENIED = "AccessDenied"
    ACCESS_DENIED_EXCEPTION = "AccessDeniedException"
    NOT_AUTHORIZED = "NotAuthorized"
    UNAUTHORIZED_OPERATION = "UnauthorizedOperation"

    # Credentials
    INVALID_CLIENT_TOKEN_ID = "InvalidClientTokenId"
    UNRECOGNIZED_CLIENT_EXCEPTION = "UnrecognizedClientException"
    EXPIRED_TOKEN = "ExpiredToken"
    SIGNATURE_DOES_NOT_MATCH = "SignatureDoesNotMatch"

    # Throttling
    THROTTLING = "Throttling"
    THROTTLING_EXCEPTION = "ThrottlingException"
    REQUEST_LIMIT_EXCEEDED = "RequestLimitExceeded"
    TOO_MANY_REQUESTS_EXCEPTION = "TooManyRequestsException"

    # Invalid requests
    INVALID_PARAMETER_COMBINATION = "InvalidParameterCombination"
    INVALID_PARAMETER_VALUE = "InvalidParameterValue"
    MISSING_PARAMETER = "MissingParameter"
    VALIDATION_ERROR = "ValidationError"
    VALIDATION_EXCEPTION = "ValidationException"

    # Resource state
    RESOURCE_NOT_FOUND_EXCEPTION = "ResourceNotFoundException"
    RESOURCE_IN_USE_EXCEPTION = "ResourceInUseException"
    RESOURCE_ALREADY_EXISTS_EXCEPTION = "ResourceAlreadyExistsException"
    CONFLICT_EXCEPTION = "ConflictException"
    LIMIT_EXCEEDED_EXCEPTION = "LimitExceededException"

    @classmethod
    def from_string(cls, value: str | None) -> ErrorCode | None:
        """Look up a code by its wire string; unknown strings give None."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def from_exception(cls, error: BaseException) -> ErrorCode | None:
        """Extract the semantic error code of a raised failure. Never raises."""
        reported = reported_error_code(error)
        if reported is not None:
            return cls.from_string(reported)
        if isinstance(error, SdkClientException):
            return cls.CLIENT_UNAVAILABLE
        if isinstance(error, SdkServiceException):
            return cls.SERVICE_UNAVAILABLE
        return None


def reported_error_code(error: BaseException) -> str | None:
    """Raw service-reported code carried by a failure, if any."""
    try:
        code = getattr(error, "error_code", None)
        if isinstance(code, str) and code:
            return code

        details = getattr(error, "error_details", None)
        code = getattr(details, "error_code", None)
        if isinstance(code, str) and code:
            return code

        # botocore.exceptions.ClientError shape
        response: Any = getattr(error, "response", None)
        if isinstance(response, dict):
            code = (response.get("Error") or {}).get("Code")
            if isinstance(code, str) and code:
                return code
    except Exception:  # noqa: BLE001 - properties on foreign exceptions may raise
        return None
    return None


__all__ = [
    "ErrorCode",
    "reported_error_code",
]
