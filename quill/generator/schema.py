"""Resolved schema input, loaded from the JSON produced by the IDL front end."""

import json
import keyword
from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import DataClassJsonMixin, config

from .types import (
    BaseType,
    GenerationError,
    ListType,
    MapType,
    SetType,
    StructType,
    TypeDescriptor,
)


class SchemaError(ValueError):
    """Raised when schema JSON does not describe a type."""


class ValidationError(GenerationError):
    """Raised when schema validation fails."""


# Names bound by every generated module, plus the generated write method
RESERVED_NAMES = frozenset(["write", "dataclass", "SerializationError", "TType"])


def _check_name(name: str, what: str) -> None:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ValidationError(f"{what} {name!r} is not a valid Python identifier")
    if name in RESERVED_NAMES:
        raise ValidationError(f"{what} {name!r} is reserved in generated code")


def type_from_json(value: Any) -> TypeDescriptor:
    """Decode a type descriptor.

    Scalars are plain strings (``"i32"``); containers and struct references
    are single-key objects: ``{"list": T}``, ``{"set": T}``,
    ``{"map": {"key": K, "value": V}}`` and ``{"struct": "Name"}``.
    """
    if isinstance(value, str):
        return BaseType(value)
    if not isinstance(value, dict) or len(value) != 1:
        raise SchemaError(f"Invalid type: {value!r}")

    kind, arg = next(iter(value.items()))
    if kind == "list":
        return ListType(type_from_json(arg))
    if kind == "set":
        return SetType(type_from_json(arg))
    if kind == "map":
        if not isinstance(arg, dict) or set(arg) != {"key", "value"}:
            raise SchemaError(f"Map type needs 'key' and 'value': {arg!r}")
        return MapType(type_from_json(arg["key"]), type_from_json(arg["value"]))
    if kind == "struct":
        if not isinstance(arg, str):
            raise SchemaError(f"Struct reference must be a name: {arg!r}")
        return StructType(arg)
    raise SchemaError(f"Unknown type kind: {kind}")


@dataclass
class FieldDef(DataClassJsonMixin):
    """A numbered struct field."""

    id: int
    name: str
    type: TypeDescriptor = field(metadata=config(decoder=type_from_json))
    required: bool = False
    comment: str | None = None


@dataclass
class StructDef(DataClassJsonMixin):
    """A struct definition."""

    name: str
    fields: list[FieldDef]
    comment: str | None = None


@dataclass
class Schema(DataClassJsonMixin):
    """All structs of one IDL document, with every type already resolved."""

    structs: list[StructDef]
    namespace: str | None = None


def _struct_refs(t: TypeDescriptor):
    if isinstance(t, StructType):
        yield t.name
    elif isinstance(t, (ListType, SetType)):
        yield from _struct_refs(t.element_type)
    elif isinstance(t, MapType):
        yield from _struct_refs(t.key_type)
        yield from _struct_refs(t.value_type)


def validate(schema: Schema) -> None:
    """Validate struct and field declarations."""
    if schema.namespace is not None and not all(
        part.isidentifier() for part in schema.namespace.split(".")
    ):
        raise ValidationError(f"Namespace {schema.namespace!r} is not a dotted name")

    names: set[str] = set()
    for struct in schema.structs:
        _check_name(struct.name, "Struct name")
        if struct.name in names:
            raise ValidationError(f"Struct {struct.name} declared more than once")
        names.add(struct.name)

    for struct in schema.structs:
        ids: set[int] = set()
        field_names: set[str] = set()
        for f in struct.fields:
            _check_name(f.name, f"Field name in {struct.name}:")
            if f.id <= 0:
                raise ValidationError(f"{struct.name}.{f.name}: field id must be positive")
            if f.id in ids:
                raise ValidationError(f"{struct.name}: field id {f.id} used more than once")
            if f.name in field_names:
                raise ValidationError(f"{struct.name}: field {f.name} declared more than once")
            ids.add(f.id)
            field_names.add(f.name)

            for ref in _struct_refs(f.type):
                if ref not in names:
                    raise ValidationError(
                        f"{struct.name}.{f.name} references {ref}, but it is not declared"
                    )


def load_schema(text: str, namespace: str | None = None) -> Schema:
    """Parse and validate schema JSON.

    A non-empty ``namespace`` replaces the one declared in the schema.
    """
    try:
        schema = Schema.from_json(text)
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise SchemaError(f"Malformed schema: {e}") from e
    if namespace:
        schema.namespace = namespace
    validate(schema)
    return schema
