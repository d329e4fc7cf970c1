"""Tests for handler_commons.core.printer module."""

import json
from dataclasses import dataclass
from decimal import Decimal

from handler_commons.core.enums import HandlerErrorCode
from handler_commons.core.printer import REDACTED, FilteredJsonPrinter, to_jsonable
from handler_commons.core.settings import HandlerSettings
from tests._support.handler_models import ResourceModel


@dataclass
class Endpoint:
    Address: str
    Port: int


class TestToJsonable:
    def test_pydantic_model_uses_aliases(self):
        assert to_jsonable(ResourceModel(test_property="x")) == {"TestProperty": "x"}

    def test_dataclass(self):
        assert to_jsonable(Endpoint("db.example", 5432)) == {"Address": "db.example", "Port": 5432}

    def test_enum_and_decimal(self):
        assert to_jsonable({"code": HandlerErrorCode.NOT_FOUND, "size": Decimal("1.5")}) == {
            "code": "NotFound",
            "size": "1.5",
        }

    def test_exception(self):
        assert to_jsonable(ValueError("bad")) == {"error_type": "ValueError", "message": "bad"}

    def test_tuple_becomes_list(self):
        assert to_jsonable((1, 2)) == [1, 2]


class TestFilteredJsonPrinter:
    def test_compact_sorted_output(self):
        assert FilteredJsonPrinter().print({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_default_patterns_redact_nested(self):
        printed = FilteredJsonPrinter().print({"Outer": {"MasterUserPassword": "hunter2", "Name": "db"}})
        assert json.loads(printed) == {"Outer": {"MasterUserPassword": REDACTED, "Name": "db"}}

    def test_redacts_inside_lists(self):
        printed = FilteredJsonPrinter().print([{"SecretString": "s"}])
        assert json.loads(printed) == [{"SecretString": REDACTED}]

    def test_extra_fields_case_insensitive(self):
        printer = FilteredJsonPrinter("DBName")
        assert json.loads(printer.print({"dbname": "orders"})) == {"dbname": REDACTED}

    def test_default_patterns_can_be_disabled(self):
        printer = FilteredJsonPrinter(use_default_patterns=False)
        assert json.loads(printer.print({"Password": "p"})) == {"Password": "p"}

    def test_from_settings(self):
        printer = FilteredJsonPrinter.from_settings(HandlerSettings(redacted_fields=["KmsKeyId"]))
        assert printer.is_sensitive("kmskeyid")
        assert printer.is_sensitive("ApiKey")
        assert not printer.is_sensitive("Engine")
