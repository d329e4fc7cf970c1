"""
Resource type schema descriptors.

A ResourceTypeSchema is the explicit, ordered list of property descriptors a
resource type declares. It is resolved once (usually at import time of the
handler) and then consulted read-only by drift detection.

``ResourceTypeSchema.from_dict`` reads the subset of a resource schema
document these utilities need:

- ``typeName`` and ``properties`` (required)
- ``definitions`` referenced through local ``$ref`` pointers
- ``readOnlyProperties`` / ``writeOnlyProperties`` / ``primaryIdentifier``
  as ``/properties/<Name>`` pointers
- ``insertionOrder`` on array properties (defaults to true)

Example:
    >>> schema = ResourceTypeSchema.from_dict({
    ...     "typeName": "AWS::Test::Type",
    ...     "properties": {"TestProperty": {"type": "string"}},
    ...     "primaryIdentifier": ["/properties/TestProperty"],
    ... })
    >>> [p.name for p in schema.properties]
    ['TestProperty']
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from handler_commons.core.errors import SchemaLoadError

_PROPERTY_POINTER_PREFIX = "/properties/"
_DEFINITION_REF_PREFIX = "#/definitions/"
_MAX_REF_DEPTH = 32


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """
    One declared property.

    Attributes:
        name: Property name as it appears in the model (e.g. "DBInstanceClass")
        type: JSON schema type ("string", "integer", "number", "boolean",
            "array", "object"); None when the schema leaves it open
        insertion_order: For arrays, whether element order is significant
        properties: Nested descriptors for objects with declared properties
        items: Descriptor of array elements, when declared
    """

    name: str
    type: str | None = None
    insertion_order: bool = True
    properties: tuple[PropertyDescriptor, ...] = ()
    items: PropertyDescriptor | None = None


@dataclass(frozen=True, slots=True)
class ResourceTypeSchema:
    type_name: str
    properties: tuple[PropertyDescriptor, ...]
    read_only_properties: frozenset[str] = frozenset()
    write_only_properties: frozenset[str] = frozenset()
    primary_identifier: tuple[str, ...] = ()

    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]

    def get(self, name: str) -> PropertyDescriptor | None:
        for descriptor in self.properties:
            if descriptor.name == name:
                return descriptor
        return None

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> ResourceTypeSchema:
        """Build a descriptor from a resource schema document."""
        if not isinstance(document, Mapping):
            raise SchemaLoadError(f"Schema document must be a mapping, got {type(document).__name__}")
        type_name = document.get("typeName")
        if not isinstance(type_name, str) or not type_name:
            raise SchemaLoadError("Schema document is missing 'typeName'")
        properties = document.get("properties")
        if not isinstance(properties, Mapping):
            raise SchemaLoadError("Schema document is missing 'properties'").with_context(type_name=type_name)

        definitions = document.get("definitions") or {}
        descriptors = tuple(
            _descriptor(name, spec, definitions, depth=0) for name, spec in properties.items()
        )
        return cls(
            type_name=type_name,
            properties=descriptors,
            read_only_properties=frozenset(_pointers(document, "readOnlyProperties")),
            write_only_properties=frozenset(_pointers(document, "writeOnlyProperties")),
            primary_identifier=tuple(_pointers(document, "primaryIdentifier")),
        )


def _resolve(spec: Any, definitions: Mapping[str, Any], depth: int) -> Mapping[str, Any]:
    if not isinstance(spec, Mapping):
        raise SchemaLoadError(f"Property definition must be a mapping, got {type(spec).__name__}")
    while "$ref" in spec:
        if depth > _MAX_REF_DEPTH:
            raise SchemaLoadError("Schema $ref chain is too deep or cyclic")
        ref = spec["$ref"]
        if not isinstance(ref, str) or not ref.startswith(_DEFINITION_REF_PREFIX):
            raise SchemaLoadError(f"Unsupported $ref: {ref!r}")
        target = definitions.get(ref[len(_DEFINITION_REF_PREFIX):])
        if not isinstance(target, Mapping):
            raise SchemaLoadError(f"Unresolvable $ref: {ref!r}")
        spec = target
        depth += 1
    return spec


def _descriptor(name: str, spec: Any, definitions: Mapping[str, Any], depth: int) -> PropertyDescriptor:
    if depth > _MAX_REF_DEPTH:
        raise SchemaLoadError("Schema nesting is too deep or cyclic").with_context(property=name)
    resolved = _resolve(spec, definitions, depth)

    prop_type = resolved.get("type")
    if isinstance(prop_type, list):
        # ["string", "object"] and similar unions compare structurally
        prop_type = None

    nested = resolved.get("properties")
    properties: tuple[PropertyDescriptor, ...] = ()
    if isinstance(nested, Mapping):
        properties = tuple(
            _descriptor(child, child_spec, definitions, depth + 1) for child, child_spec in nested.items()
        )

    items = None
    if isinstance(resolved.get("items"), Mapping):
        items = _descriptor(f"{name}[]", resolved["items"], definitions, depth + 1)

    return PropertyDescriptor(
        name=name,
        type=prop_type,
        insertion_order=bool(resolved.get("insertionOrder", True)),
        properties=properties,
        items=items,
    )


def _pointers(document: Mapping[str, Any], key: str) -> list[str]:
    names: list[str] = []
    for pointer in document.get(key) or ():
        if not isinstance(pointer, str) or not pointer.startswith(_PROPERTY_POINTER_PREFIX):
            continue
        name = pointer[len(_PROPERTY_POINTER_PREFIX):]
        # nested pointers ("/properties/A/B") do not exclude all of A
        if name and "/" not in name and name not in names:
            names.append(name)
    return names


__all__ = [
    "PropertyDescriptor",
    "ResourceTypeSchema",
]
