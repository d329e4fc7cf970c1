"""Core types and cross-cutting concerns: enums, failures, progress events,
schema descriptors, logging, printing and settings."""

from handler_commons.core.enums import HandlerErrorCode, OperationStatus
from handler_commons.core.errors import (
    ClientTimeoutException,
    ErrorDetails,
    HandlerCommonsError,
    RuleSetError,
    SchemaLoadError,
    SdkClientException,
    SdkException,
    SdkServiceException,
    ServiceException,
)
from handler_commons.core.progress import ProgressEvent
from handler_commons.core.schema import PropertyDescriptor, ResourceTypeSchema

__all__ = [
    "HandlerErrorCode",
    "OperationStatus",
    "ClientTimeoutException",
    "ErrorDetails",
    "HandlerCommonsError",
    "RuleSetError",
    "SchemaLoadError",
    "SdkClientException",
    "SdkException",
    "SdkServiceException",
    "ServiceException",
    "ProgressEvent",
    "PropertyDescriptor",
    "ResourceTypeSchema",
]
