"""Type descriptors, tags and wire types for write-path code generation."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum


class GenerationError(RuntimeError):
    """Raised when code generation cannot continue."""


class UnsupportedTypeError(GenerationError):
    """Raised when a type descriptor cannot be mapped to a write routine.

    This points at a bug in the upstream resolution phase (an alias or custom
    type that was never normalized), so it is never recovered from.
    """

    def __init__(self, type_: object):
        self.type = type_
        super().__init__(f"Not implemented: unsupported type {_describe(type_)}")


class TypeTag(StrEnum):
    """Semantic tag assigned to a resolved type descriptor."""

    BOOL = "bool"
    I8 = "i8"
    BYTE = "byte"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    LIST = "list"
    SET = "set"
    MAP = "map"
    STRUCT = "struct"


class WireType(IntEnum):
    """Thrift binary protocol type codes."""

    STOP = 0
    VOID = 1
    BOOL = 2
    BYTE = 3
    I08 = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15


SCALAR_TAGS = frozenset(
    t.value
    for t in [
        TypeTag.BOOL,
        TypeTag.I8,
        TypeTag.BYTE,
        TypeTag.I16,
        TypeTag.I32,
        TypeTag.I64,
        TypeTag.DOUBLE,
        TypeTag.STRING,
        TypeTag.BINARY,
    ]
)


@dataclass(frozen=True)
class BaseType:
    """A scalar type, named by its tag (``i32``, ``string``, ...)."""

    name: str


@dataclass(frozen=True)
class ListType:
    element_type: "TypeDescriptor"


@dataclass(frozen=True)
class SetType:
    element_type: "TypeDescriptor"


@dataclass(frozen=True)
class MapType:
    key_type: "TypeDescriptor"
    value_type: "TypeDescriptor"


@dataclass(frozen=True)
class StructType:
    """Reference to a struct declared elsewhere in the schema."""

    name: str


TypeDescriptor = BaseType | ListType | SetType | MapType | StructType


def type_name(t: TypeDescriptor) -> str:
    """Render a type descriptor the way it is spelled in IDL source."""
    match t:
        case BaseType(name=name) | StructType(name=name):
            return name
        case ListType(element_type=elem):
            return f"list<{type_name(elem)}>"
        case SetType(element_type=elem):
            return f"set<{type_name(elem)}>"
        case MapType(key_type=key, value_type=value):
            return f"map<{type_name(key)},{type_name(value)}>"
    return repr(t)


def _describe(t: object) -> str:
    if isinstance(t, (BaseType, ListType, SetType, MapType, StructType)):
        return f"'{type_name(t)}'"
    return repr(t)
