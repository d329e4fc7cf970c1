"""
JSON printers with field redaction.

A printer turns an arbitrary value (resource model, mutation map, exception)
into a single JSON string for a log line. FilteredJsonPrinter masks the
values of sensitive keys so that passwords and tokens in resource models do
not end up in logs verbatim.

    .. code-block:: text

        Input model                         Rendered line
        ┌──────────────────────────┐        ┌──────────────────────────────┐
        │ MasterUserPassword=hunter2│  ───►  │ "MasterUserPassword":"***..."│
        │ DBInstanceClass=db.t3    │        │ "DBInstanceClass":"db.t3"    │
        │ Tags=[{Key, Value}]       │        │ "Tags":[{...}]               │
        └──────────────────────────┘        └──────────────────────────────┘

The input is never modified; redaction works on a JSON-ready copy.
"""

from __future__ import annotations

import dataclasses
import json
import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

if TYPE_CHECKING:
    from handler_commons.core.settings import HandlerSettings

REDACTED = "***REDACTED***"

_SENSITIVE_KEY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i)(password|secret|token|credential|api.?key|private.?key)"),
]


class JsonPrinter(Protocol):
    def print(self, value: Any) -> str: ...


def to_jsonable(value: Any) -> Any:
    """Convert models, dataclasses and friends into plain JSON types."""
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump(by_alias=True, mode="json"))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, BaseException):
        return {"error_type": value.__class__.__name__, "message": str(value)}
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "__dict__"):
        return {k: to_jsonable(v) for k, v in vars(value).items() if not k.startswith("_")}
    return repr(value)


class FilteredJsonPrinter:
    """
    JSON printer that redacts sensitive keys at any depth.

    A key is redacted when it equals one of ``filter_fields`` (case
    insensitive) or matches the built-in sensitive-key pattern.

    Example:
        >>> FilteredJsonPrinter("DBName").print({"DBName": "orders", "Port": 5432})
        '{"DBName":"***REDACTED***","Port":5432}'
    """

    def __init__(self, *filter_fields: str, use_default_patterns: bool = True):
        self.filter_fields = frozenset(f.lower() for f in filter_fields)
        self.use_default_patterns = use_default_patterns

    @classmethod
    def from_settings(cls, settings: HandlerSettings) -> FilteredJsonPrinter:
        return cls(*settings.redacted_fields)

    def is_sensitive(self, key: str) -> bool:
        if key.lower() in self.filter_fields:
            return True
        return self.use_default_patterns and any(p.search(key) for p in _SENSITIVE_KEY_PATTERNS)

    def redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: (REDACTED if self.is_sensitive(k) else self.redact(v)) for k, v in value.items()}
        if isinstance(value, list):
            return [self.redact(v) for v in value]
        return value

    def print(self, value: Any) -> str:
        return json.dumps(
            self.redact(to_jsonable(value)),
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )


__all__ = [
    "REDACTED",
    "JsonPrinter",
    "FilteredJsonPrinter",
    "to_jsonable",
]
