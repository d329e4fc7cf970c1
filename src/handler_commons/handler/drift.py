"""
Drift detection between a desired and an observed resource model.

DriftDetector walks the schema's property descriptors (never the model's
runtime shape) and compares each property of the desired model against the
observed one using equality appropriate to the declared type:

    ┌──────────────┬───────────────────────────────────────────────┐
    │ type         │ equal when                                     │
    ├──────────────┼───────────────────────────────────────────────┤
    │ integer      │ numerically equal ("5" == 5 == 5.0)            │
    │ number       │ numerically equal (Decimal comparison)         │
    │ boolean      │ same truth value ("true" == True)              │
    │ string       │ same text                                      │
    │ array        │ element-wise; as multisets if insertionOrder   │
    │              │ is false                                       │
    │ object       │ declared sub-properties equal, else deep equal │
    │ (undeclared) │ structural deep equality                       │
    └──────────────┴───────────────────────────────────────────────┘

Read-only properties are skipped because a desired model never sets them,
and write-only properties because an observed model never returns them.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel

from handler_commons.core.schema import PropertyDescriptor, ResourceTypeSchema


@dataclass(frozen=True, slots=True)
class Mutation:
    """One drifted property: what was asked for and what was found."""

    expected: Any
    actual: Any

    def to_dict(self) -> dict[str, Any]:
        return {"expected": self.expected, "actual": self.actual}


def model_to_dict(model: Any) -> dict[str, Any]:
    """Property view of a model, keyed by schema property names."""
    if model is None:
        return {}
    if isinstance(model, BaseModel):
        return model.model_dump(by_alias=True)
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return dataclasses.asdict(model)
    if isinstance(model, Mapping):
        return dict(model)
    return {k: v for k, v in vars(model).items() if not k.startswith("_")}


class DriftDetector:
    """Compares two models property by property according to a schema."""

    def __init__(self, schema: ResourceTypeSchema):
        self.schema = schema

    def tracked_properties(self) -> list[PropertyDescriptor]:
        skipped = self.schema.read_only_properties | self.schema.write_only_properties
        return [p for p in self.schema.properties if p.name not in skipped]

    def detect_drift(self, desired: Any, observed: Any) -> dict[str, Mutation]:
        """Map of property name to Mutation for every drifted property."""
        desired_props = model_to_dict(desired)
        observed_props = model_to_dict(observed)

        mutations: dict[str, Mutation] = {}
        for descriptor in self.tracked_properties():
            expected = desired_props.get(descriptor.name)
            actual = observed_props.get(descriptor.name)
            if not values_equal(descriptor, expected, actual):
                mutations[descriptor.name] = Mutation(expected, actual)
        return mutations


def values_equal(descriptor: PropertyDescriptor | None, left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None

    prop_type = descriptor.type if descriptor is not None else None
    if prop_type in ("integer", "number"):
        return _numbers_equal(left, right)
    if prop_type == "boolean":
        return _as_bool(left) == _as_bool(right)
    if prop_type == "string":
        return _as_text(left) == _as_text(right)
    if prop_type == "array":
        items = descriptor.items if descriptor is not None else None
        ordered = descriptor.insertion_order if descriptor is not None else True
        return _arrays_equal(items, left, right, ordered)
    if prop_type == "object" and descriptor is not None and descriptor.properties:
        return _objects_equal(descriptor, left, right)
    return _structurally_equal(left, right)


def _numbers_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return left == right
    try:
        return Decimal(str(left)) == Decimal(str(right))
    except (InvalidOperation, ValueError):
        return left == right


def _as_bool(value: Any) -> Any:
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _as_text(value: Any) -> Any:
    if isinstance(value, (str, int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


def _arrays_equal(items: PropertyDescriptor | None, left: Any, right: Any, ordered: bool) -> bool:
    if not _is_sequence(left) or not _is_sequence(right):
        return left == right
    if len(left) != len(right):
        return False
    if ordered:
        return all(values_equal(items, a, b) for a, b in zip(left, right))
    remaining = list(right)
    for element in left:
        for index, candidate in enumerate(remaining):
            if values_equal(items, element, candidate):
                del remaining[index]
                break
        else:
            return False
    return True


def _objects_equal(descriptor: PropertyDescriptor, left: Any, right: Any) -> bool:
    if not (_is_record(left) and _is_record(right)):
        return _structurally_equal(left, right)
    left_props = model_to_dict(left)
    right_props = model_to_dict(right)
    return all(
        values_equal(child, left_props.get(child.name), right_props.get(child.name))
        for child in descriptor.properties
    )


def _structurally_equal(left: Any, right: Any) -> bool:
    if _is_record(left) and _is_record(right):
        left_props, right_props = model_to_dict(left), model_to_dict(right)
        keys = set(left_props) | set(right_props)
        return all(
            values_equal(None, left_props.get(key), right_props.get(key)) for key in keys
        )
    if _is_sequence(left) and _is_sequence(right):
        return _arrays_equal(None, left, right, ordered=True)
    if isinstance(left, (int, float, Decimal)) and isinstance(right, (int, float, Decimal)):
        return _numbers_equal(left, right)
    return left == right


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_record(value: Any) -> bool:
    if isinstance(value, (BaseModel, Mapping)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


__all__ = [
    "DriftDetector",
    "Mutation",
    "model_to_dict",
    "values_equal",
]
