"""Classification of resolved type descriptors into tags and wire types."""

from .types import (
    SCALAR_TAGS,
    BaseType,
    ListType,
    MapType,
    SetType,
    StructType,
    TypeDescriptor,
    TypeTag,
    UnsupportedTypeError,
    WireType,
)

# i8 has no opcode of its own on the wire, binary travels as a string
WIRE_TYPES: dict[TypeTag, WireType] = {
    TypeTag.BOOL: WireType.BOOL,
    TypeTag.I8: WireType.BYTE,
    TypeTag.BYTE: WireType.BYTE,
    TypeTag.I16: WireType.I16,
    TypeTag.I32: WireType.I32,
    TypeTag.I64: WireType.I64,
    TypeTag.DOUBLE: WireType.DOUBLE,
    TypeTag.STRING: WireType.STRING,
    TypeTag.BINARY: WireType.STRING,
    TypeTag.LIST: WireType.LIST,
    TypeTag.SET: WireType.SET,
    TypeTag.MAP: WireType.MAP,
    TypeTag.STRUCT: WireType.STRUCT,
}


def classify(t: TypeDescriptor) -> TypeTag:
    """Return the semantic tag of a resolved type descriptor.

    Raises:
        UnsupportedTypeError: if ``t`` is not a descriptor, or is a base type
            whose name is not one of the scalar tags.
    """
    match t:
        case ListType():
            return TypeTag.LIST
        case SetType():
            return TypeTag.SET
        case MapType():
            return TypeTag.MAP
        case StructType():
            return TypeTag.STRUCT
        case BaseType(name=name) if name in SCALAR_TAGS:
            return TypeTag(name)
    raise UnsupportedTypeError(t)


def wire_type_of(t: TypeDescriptor) -> WireType:
    """Return the wire type code used to tag ``t`` in container headers."""
    return WIRE_TYPES[classify(t)]
