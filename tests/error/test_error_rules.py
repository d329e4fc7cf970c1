"""
Tests for handler_commons.error.rules module.

Tests cover:
- ErrorRule matching by class, by code, and by both
- First-match-wins ordering inside one rule set
- Extension precedence (local rules before base rules)
- Builder validation
- Immutability of built rule sets
"""

import pytest

from handler_commons.core.enums import HandlerErrorCode
from handler_commons.core.errors import (
    ClientTimeoutException,
    RuleSetError,
    SdkClientException,
    SdkServiceException,
    ServiceException,
)
from handler_commons.error.codes import ErrorCode
from handler_commons.error.rules import ErrorRule, ErrorRuleSet
from handler_commons.error.status import ErrorStatus, UnexpectedErrorStatus
from tests._support.handler_models import new_service_exception

NOT_FOUND = ErrorStatus.fail_with(HandlerErrorCode.NOT_FOUND)
CONFLICT = ErrorStatus.fail_with(HandlerErrorCode.RESOURCE_CONFLICT)
ALREADY_EXISTS = ErrorStatus.fail_with(HandlerErrorCode.ALREADY_EXISTS)


class TestErrorRule:
    def test_class_rule_matches_subclass(self):
        rule = ErrorRule(NOT_FOUND, error_classes=(SdkClientException,))
        assert rule.matches(ClientTimeoutException("slow"))

    def test_class_rule_rejects_unrelated(self):
        rule = ErrorRule(NOT_FOUND, error_classes=(SdkClientException,))
        assert not rule.matches(SdkServiceException("500"))

    def test_code_rule_matches_extracted_code(self):
        rule = ErrorRule(NOT_FOUND, error_codes=frozenset({ErrorCode.RESOURCE_NOT_FOUND_EXCEPTION}))
        assert rule.matches(new_service_exception(ErrorCode.RESOURCE_NOT_FOUND_EXCEPTION))
        assert not rule.matches(new_service_exception(ErrorCode.THROTTLING))

    def test_code_rule_matches_category_marker(self):
        rule = ErrorRule(NOT_FOUND, error_codes=frozenset({ErrorCode.CLIENT_UNAVAILABLE}))
        assert rule.matches(SdkClientException("no route"))

    def test_combined_rule_requires_both(self):
        rule = ErrorRule(
            NOT_FOUND,
            error_classes=(ServiceException,),
            error_codes=frozenset({ErrorCode.CONFLICT_EXCEPTION}),
        )
        assert rule.matches(new_service_exception(ErrorCode.CONFLICT_EXCEPTION))
        assert not rule.matches(new_service_exception(ErrorCode.THROTTLING))

        class NotAServiceException(Exception):
            error_code = "ConflictException"

        assert not rule.matches(NotAServiceException())

    def test_rule_without_matchers_rejected(self):
        with pytest.raises(RuleSetError):
            ErrorRule(NOT_FOUND)

    def test_non_exception_class_rejected(self):
        with pytest.raises(RuleSetError):
            ErrorRule(NOT_FOUND, error_classes=(str,))


class TestEmptyRuleSet:
    def test_always_unhandled(self):
        error = RuntimeError("boom")
        status = ErrorRuleSet.EMPTY_RULE_SET.handle(error)
        assert isinstance(status, UnexpectedErrorStatus)
        assert status.exception is error

    def test_extended_without_rules_is_unhandled(self):
        rule_set = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).build()
        assert isinstance(rule_set.handle(RuntimeError()), UnexpectedErrorStatus)

    def test_len(self):
        assert len(ErrorRuleSet.EMPTY_RULE_SET) == 0


class TestHandle:
    def test_runtime_error_already_exists(self):
        rule_set = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_classes(ALREADY_EXISTS, RuntimeError)
            .build()
        )
        assert rule_set.handle(RuntimeError()) == ALREADY_EXISTS

    def test_first_match_wins_within_set(self):
        """A broad rule registered first shadows a narrower one registered later."""
        rule_set = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_classes(CONFLICT, Exception)
            .with_error_classes(NOT_FOUND, KeyError)
            .build()
        )
        assert rule_set.handle(KeyError("x")) == CONFLICT

    def test_narrow_first_overrides_broad(self):
        rule_set = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_classes(NOT_FOUND, KeyError)
            .with_error_classes(CONFLICT, Exception)
            .build()
        )
        assert rule_set.handle(KeyError("x")) == NOT_FOUND
        assert rule_set.handle(ValueError("x")) == CONFLICT

    def test_string_codes_accepted(self):
        rule_set = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_codes(NOT_FOUND, "ResourceNotFoundException")
            .build()
        )
        assert rule_set.handle(new_service_exception("ResourceNotFoundException")) == NOT_FOUND

    def test_with_error_rule_combined(self):
        rule_set = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_rule(
                CONFLICT,
                error_classes=[ServiceException],
                error_codes=[ErrorCode.RESOURCE_IN_USE_EXCEPTION],
            )
            .build()
        )
        assert rule_set.handle(new_service_exception(ErrorCode.RESOURCE_IN_USE_EXCEPTION)) == CONFLICT
        assert isinstance(rule_set.handle(new_service_exception(ErrorCode.THROTTLING)), UnexpectedErrorStatus)


class TestExtend:
    def test_local_rule_beats_base_superclass_rule(self):
        base = (
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
            .with_error_classes(CONFLICT, Exception)
            .build()
        )
        derived = ErrorRuleSet.extend(base).with_error_classes(NOT_FOUND, LookupError).build()

        assert derived.handle(KeyError("x")) == NOT_FOUND
        assert derived.handle(ValueError("x")) == CONFLICT

    def test_base_is_not_modified(self):
        base = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(CONFLICT, Exception).build()
        ErrorRuleSet.extend(base).with_error_classes(NOT_FOUND, KeyError).build()

        assert len(base) == 1
        assert base.handle(KeyError("x")) == CONFLICT

    def test_evaluation_order_is_local_then_base_recursively(self):
        grandparent = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(CONFLICT, Exception).build()
        parent = (
            ErrorRuleSet.extend(grandparent)
            .with_error_classes(NOT_FOUND, LookupError)
            .with_error_classes(NOT_FOUND, ArithmeticError)
            .build()
        )
        child = ErrorRuleSet.extend(parent).with_error_classes(ALREADY_EXISTS, KeyError).build()

        classes = [rule.error_classes for rule in child]
        assert classes == [(KeyError,), (LookupError,), (ArithmeticError,), (Exception,)]
        assert child.rules == (ErrorRule(ALREADY_EXISTS, error_classes=(KeyError,)),)
        assert child.base is parent

    def test_extend_requires_rule_set(self):
        with pytest.raises(RuleSetError):
            ErrorRuleSet.extend(None)


class TestBuilderValidation:
    def test_with_error_classes_needs_classes(self):
        with pytest.raises(RuleSetError):
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(NOT_FOUND)

    def test_with_error_codes_needs_codes(self):
        with pytest.raises(RuleSetError):
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_codes(NOT_FOUND)

    def test_unknown_code_rejected(self):
        with pytest.raises(RuleSetError) as exc_info:
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_codes(NOT_FOUND, "Bogus")
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_unexpected_status_rejected(self):
        with pytest.raises(RuleSetError):
            ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(
                UnexpectedErrorStatus(RuntimeError()), RuntimeError
            )

    def test_builder_reuse_does_not_change_built_set(self):
        builder = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(NOT_FOUND, KeyError)
        first = builder.build()
        builder.with_error_classes(CONFLICT, ValueError)

        assert len(first) == 1
        assert isinstance(first.handle(ValueError()), UnexpectedErrorStatus)


class TestImmutability:
    def test_attributes_cannot_be_set(self):
        rule_set = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(NOT_FOUND, KeyError).build()
        with pytest.raises(AttributeError):
            rule_set._rules = ()

    def test_rules_is_tuple(self):
        rule_set = ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET).with_error_classes(NOT_FOUND, KeyError).build()
        assert isinstance(rule_set.rules, tuple)
