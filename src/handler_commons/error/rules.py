"""
Error rules and rule sets: ordered, composable failure classification.

An ErrorRule pairs a matcher with the ErrorStatus to produce when it matches.
An ErrorRuleSet is an immutable ordered sequence of rules that can extend a
base rule set. Evaluation is *first match wins* over:

    local rules (registration order)  ++  base rules (recursively)

so a specialization always takes precedence over the set it extends.
Precedence is registration order, never "most specific kind": register the
narrower rule first when two rules in the same set overlap.

Manifesto:
    Every handler needs the same answers for the same failures (throttling is
    Throttling, a dead connection is ServiceInternalError) and a few answers
    of its own (a duplicate name is AlreadyExists for *this* resource). Rule
    sets make the shared answers a value that is built once and extended per
    call site, instead of an if/elif ladder copied into every handler.

    - **Immutable once built:** One rule set is safely shared by every thread
    - **Layered:** ``extend(base)`` adds higher-precedence rules, base untouched
    - **Deterministic:** First match wins, no scoring, no specificity magic
    - **Total:** An unmatched failure yields UnexpectedErrorStatus, never raises

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │ ErrorRuleSet.extend(DEFAULT)                                  │
        │     .with_error_codes(fail_with(NotFound), "DBNotFound")      │
        │     .with_error_classes(ignore(), ResourceGoneError)          │
        │     .build()                                                  │
        └──────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
        handle(e):  rule 1 ─► rule 2 ─► DEFAULT.rule 1 ─► ... ─► Unexpected
                    (local, in order)    (base, recursively)

        ErrorRule matching:
        ┌──────────────────┬──────────────────┬─────────────────────────┐
        │ error_classes    │ error_codes      │ matches when            │
        ├──────────────────┼──────────────────┼─────────────────────────┤
        │ set              │ empty            │ isinstance(e, classes)  │
        │ empty            │ set              │ code(e) in codes        │
        │ set              │ set              │ both                    │
        └──────────────────┴──────────────────┴─────────────────────────┘

Examples:
    >>> rules = (
    ...     ErrorRuleSet.extend(ErrorRuleSet.EMPTY_RULE_SET)
    ...     .with_error_classes(ErrorStatus.fail_with(HandlerErrorCode.ALREADY_EXISTS), RuntimeError)
    ...     .build()
    ... )
    >>> rules.handle(RuntimeError("boom"))
    HandlerErrorStatus(handler_error_code=<HandlerErrorCode.ALREADY_EXISTS: 'AlreadyExists'>)
    >>> rules.handle(KeyError("x"))
    UnexpectedErrorStatus(exception=KeyError('x'))

Guardrails:
    ❌ DON'T: Register a broad class before a narrow one in the same set
    ✅ DO: Register narrow rules first, or put them in an extending set

    ❌ DON'T: Mutate a built rule set
    ✅ DO: extend() it and build a new one

Tags:
    error-rules, rule-set, classification, precedence, immutable,
    handler-commons
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import ClassVar

from handler_commons.core.errors import RuleSetError
from handler_commons.error.codes import ErrorCode
from handler_commons.error.status import ErrorStatus, UnexpectedErrorStatus


@dataclass(frozen=True, slots=True)
class ErrorRule:
    """
    One classification rule.

    Attributes:
        status: ErrorStatus produced on match
        error_classes: Failure kinds accepted, subclasses included
        error_codes: Semantic error codes accepted
    """

    status: ErrorStatus
    error_classes: tuple[type[BaseException], ...] = ()
    error_codes: frozenset[ErrorCode] = frozenset()

    def __post_init__(self) -> None:
        if not self.error_classes and not self.error_codes:
            raise RuleSetError("An error rule needs at least one error class or error code")
        for error_class in self.error_classes:
            if not (isinstance(error_class, type) and issubclass(error_class, BaseException)):
                raise RuleSetError(
                    f"Error classes must be exception types, got {error_class!r}"
                ).with_context(error_class=repr(error_class))
        if not isinstance(self.status, ErrorStatus) or isinstance(self.status, UnexpectedErrorStatus):
            raise RuleSetError(f"Invalid rule status: {self.status!r}")

    def matches(self, error: BaseException) -> bool:
        if self.error_classes and not isinstance(error, self.error_classes):
            return False
        if self.error_codes and ErrorCode.from_exception(error) not in self.error_codes:
            return False
        return True


class ErrorRuleSet:
    """
    Immutable ordered collection of error rules with an optional base.

    Build with ``ErrorRuleSet.extend(base)``; the constructor is internal.
    ``EMPTY_RULE_SET`` has no rules and no base, so it classifies every
    failure as unexpected.
    """

    EMPTY_RULE_SET: ClassVar[ErrorRuleSet]

    __slots__ = ("_rules", "_base")

    def __init__(self, rules: Iterable[ErrorRule] = (), base: ErrorRuleSet | None = None):
        object.__setattr__(self, "_rules", tuple(rules))
        object.__setattr__(self, "_base", base)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def rules(self) -> tuple[ErrorRule, ...]:
        """Rules added by this set, in registration order (base excluded)."""
        return self._rules

    @property
    def base(self) -> ErrorRuleSet | None:
        return self._base

    @staticmethod
    def extend(base: ErrorRuleSet) -> ErrorRuleSetBuilder:
        """Start a rule set whose rules are checked before ``base``'s."""
        if not isinstance(base, ErrorRuleSet):
            raise RuleSetError(f"Can only extend an ErrorRuleSet, got {type(base).__name__}")
        return ErrorRuleSetBuilder(base)

    def __iter__(self) -> Iterator[ErrorRule]:
        """All rules in evaluation order: local first, then base recursively."""
        rule_set: ErrorRuleSet | None = self
        while rule_set is not None:
            yield from rule_set._rules
            rule_set = rule_set._base

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def handle(self, error: BaseException) -> ErrorStatus:
        """Classify ``error``; the first matching rule wins."""
        for rule in self:
            if rule.matches(error):
                return rule.status
        return UnexpectedErrorStatus(error)

    def __repr__(self) -> str:
        depth = 0
        rule_set = self._base
        while rule_set is not None:
            depth += 1
            rule_set = rule_set._base
        return f"ErrorRuleSet(rules={len(self._rules)}, base_depth={depth})"


class ErrorRuleSetBuilder:
    """Append-only builder returned by ``ErrorRuleSet.extend``."""

    def __init__(self, base: ErrorRuleSet):
        self._base = base
        self._rules: list[ErrorRule] = []

    def with_error_classes(
        self,
        status: ErrorStatus,
        *error_classes: type[BaseException],
    ) -> ErrorRuleSetBuilder:
        """Match failures that are instances of any of ``error_classes``."""
        if not error_classes:
            raise RuleSetError("with_error_classes() needs at least one class")
        self._rules.append(ErrorRule(status, error_classes=tuple(error_classes)))
        return self

    def with_error_codes(
        self,
        status: ErrorStatus,
        *error_codes: ErrorCode | str,
    ) -> ErrorRuleSetBuilder:
        """Match failures whose extracted error code is one of ``error_codes``."""
        if not error_codes:
            raise RuleSetError("with_error_codes() needs at least one code")
        self._rules.append(ErrorRule(status, error_codes=_to_codes(error_codes)))
        return self

    def with_error_rule(
        self,
        status: ErrorStatus,
        *,
        error_classes: Iterable[type[BaseException]] = (),
        error_codes: Iterable[ErrorCode | str] = (),
    ) -> ErrorRuleSetBuilder:
        """Match failures satisfying both the class and the code condition."""
        self._rules.append(
            ErrorRule(
                status,
                error_classes=tuple(error_classes),
                error_codes=_to_codes(error_codes),
            )
        )
        return self

    def build(self) -> ErrorRuleSet:
        return ErrorRuleSet(self._rules, self._base)


def _to_codes(values: Iterable[ErrorCode | str]) -> frozenset[ErrorCode]:
    codes = set()
    for value in values:
        try:
            codes.add(ErrorCode(value))
        except ValueError as exc:
            raise RuleSetError(f"Unknown error code: {value!r}", cause=exc) from exc
    return frozenset(codes)


ErrorRuleSet.EMPTY_RULE_SET = ErrorRuleSet()


__all__ = [
    "ErrorRule",
    "ErrorRuleSet",
    "ErrorRuleSetBuilder",
]
