"""Tests for handler_commons.core.errors module."""

import pytest

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
    exception_message,
)


class TestSdkHierarchy:
    """Failure kinds nest so that class rules match subclasses."""

    def test_client_exceptions(self):
        assert issubclass(ClientTimeoutException, SdkClientException)
        assert issubclass(SdkClientException, SdkException)

    def test_service_exceptions(self):
        assert issubclass(ServiceException, SdkServiceException)
        assert issubclass(SdkServiceException, SdkException)

    def test_client_and_service_are_disjoint(self):
        assert not issubclass(SdkClientException, SdkServiceException)
        assert not issubclass(SdkServiceException, SdkClientException)


class TestSdkException:
    def test_retryable_defaults(self):
        assert SdkClientException("x").retryable is True
        assert SdkServiceException("x").retryable is False

    def test_retryable_override(self):
        assert SdkServiceException("x", retryable=True).retryable is True

    def test_cause_chained(self):
        root = ConnectionResetError("reset")
        error = SdkClientException("send failed", cause=root)
        assert error.__cause__ is root

    def test_no_error_code_by_default(self):
        assert SdkClientException("x").error_code is None

    def test_throttling_status(self):
        assert SdkServiceException("x", status_code=429).is_throttling
        assert not SdkServiceException("x", status_code=500).is_throttling


class TestServiceException:
    def test_error_code_from_details(self):
        error = ServiceException("nope", error_details=ErrorDetails(error_code="AccessDenied"))
        assert error.error_code == "AccessDenied"

    def test_message_from_details(self):
        error = ServiceException(error_details=ErrorDetails(error_code="X", error_message="detailed"))
        assert error.message == "detailed"

    def test_repr(self):
        error = ServiceException("nope", error_details=ErrorDetails(error_code="X"))
        assert repr(error) == "ServiceException('nope', error_code='X')"

    def test_details_to_dict_omits_none(self):
        assert ErrorDetails(error_code="X").to_dict() == {"error_code": "X"}


class TestHandlerCommonsError:
    def test_with_context(self):
        error = RuleSetError("bad rule").with_context(status="fail_with")
        assert error.context == {"status": "fail_with"}

    def test_to_dict(self):
        cause = ValueError("inner")
        error = SchemaLoadError("bad schema", context={"type_name": "A::B::C"}, cause=cause)
        assert error.to_dict() == {
            "error_type": "SchemaLoadError",
            "message": "bad schema",
            "context": {"type_name": "A::B::C"},
            "cause": "inner",
        }
        assert error.__cause__ is cause

    @pytest.mark.parametrize("cls", [RuleSetError, SchemaLoadError])
    def test_subclasses(self, cls):
        assert issubclass(cls, HandlerCommonsError)


class TestExceptionMessage:
    def test_message_attribute(self):
        assert exception_message(SdkClientException("no route")) == "no route"

    def test_str(self):
        assert exception_message(KeyError("k")) == "'k'"

    def test_empty_falls_back_to_class_name(self):
        assert exception_message(RuntimeError()) == "RuntimeError"

    def test_unrenderable_falls_back_to_class_name(self):
        class UnrenderableError(RuntimeError):
            def __str__(self):
                raise ValueError("cannot render")

        assert exception_message(UnrenderableError()) == "UnrenderableError"

    def test_raising_message_property_falls_back_to_class_name(self):
        class BrokenMessageError(Exception):
            @property
            def message(self):
                raise KeyError("message")

        assert exception_message(BrokenMessageError("x")) == "BrokenMessageError"
