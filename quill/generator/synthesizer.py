"""Synthesis of write instructions from resolved type descriptors.

``get_write_body`` walks a type descriptor top-down and returns the ordered
instructions that serialize a value of that type through a protocol writer.
Containers are bracketed by begin/end markers around a loop over their
elements; structs delegate to their own ``write`` method.
"""

import logging

from .classifier import classify, wire_type_of
from .instructions import (
    Call,
    Expression,
    ForEach,
    Identifiers,
    Instruction,
    Name,
    SizeOf,
    WireTypeRef,
)
from .types import TypeDescriptor, TypeTag

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIERS = Identifiers()

# i8 is its own schema type but the protocol only has writeByte
SCALAR_METHODS: dict[TypeTag, str] = {
    TypeTag.BOOL: "writeBool",
    TypeTag.I16: "writeI16",
    TypeTag.I32: "writeI32",
    TypeTag.I64: "writeI64",
    TypeTag.DOUBLE: "writeDouble",
    TypeTag.STRING: "writeString",
    # Read back with readString by the binary protocol
    TypeTag.BINARY: "writeBinary",
    TypeTag.BYTE: "writeByte",
    TypeTag.I8: "writeByte",
}


def get_write_body(
    t: TypeDescriptor,
    access: Expression,
    identifiers: Identifiers = DEFAULT_IDENTIFIERS,
) -> list[Instruction]:
    """Return the instructions that write the value at ``access`` as type ``t``.

    Args:
        t: A fully resolved type descriptor.
        access: Expression referring to the value being written.
        identifiers: Names for the writer instance and wire type namespace.

    Raises:
        UnsupportedTypeError: if ``t`` (or any nested type) cannot be classified.
    """
    return _write_body(t, access, identifiers, 0)


def _write_body(
    t: TypeDescriptor, access: Expression, ids: Identifiers, depth: int
) -> list[Instruction]:
    tag = classify(t)
    logger.debug("Synthesizing %s write at depth %d", tag, depth)

    match tag:
        case TypeTag.LIST | TypeTag.SET:
            return list_or_set_write(tag, t.element_type, access, ids, depth)
        case TypeTag.MAP:
            return map_write(t.key_type, t.value_type, access, ids, depth)
        case TypeTag.STRUCT:
            return [struct_write(access, ids)]
        case _:
            return [scalar_write(tag, access, ids)]


def scalar_write(
    tag: TypeTag, access: Expression, ids: Identifiers = DEFAULT_IDENTIFIERS
) -> Call:
    return Call(Name(ids.output), SCALAR_METHODS[tag], (access,))


def list_or_set_write(
    tag: TypeTag,
    element_type: TypeDescriptor,
    access: Expression,
    ids: Identifiers = DEFAULT_IDENTIFIERS,
    depth: int = 0,
) -> list[Instruction]:
    """Write a list or set: begin marker, one loop over the elements, end marker."""
    if tag == TypeTag.LIST:
        begin, end, accessor = "writeListBegin", "writeListEnd", "length"
    else:
        begin, end, accessor = "writeSetBegin", "writeSetEnd", "size"

    output = Name(ids.output)
    return [
        Call(output, begin, (WireTypeRef(wire_type_of(element_type)), SizeOf(access, accessor))),
        _loop(access, None, element_type, ids, depth),
        Call(output, end),
    ]


def map_write(
    key_type: TypeDescriptor,
    value_type: TypeDescriptor,
    access: Expression,
    ids: Identifiers = DEFAULT_IDENTIFIERS,
    depth: int = 0,
) -> list[Instruction]:
    """Write a map: begin marker, key then value for every entry, end marker."""
    output = Name(ids.output)
    return [
        Call(
            output,
            "writeMapBegin",
            (
                WireTypeRef(wire_type_of(key_type)),
                WireTypeRef(wire_type_of(value_type)),
                SizeOf(access, "size"),
            ),
        ),
        _loop(access, key_type, value_type, ids, depth),
        Call(output, "writeMapEnd"),
    ]


def struct_write(access: Expression, ids: Identifiers = DEFAULT_IDENTIFIERS) -> Call:
    """Delegate to the struct's own ``write`` method."""
    return Call(access, "write", (Name(ids.output),))


def _loop(
    access: Expression,
    key_type: TypeDescriptor | None,
    value_type: TypeDescriptor | None,
    ids: Identifiers,
    depth: int,
) -> ForEach:
    # Names derive from nesting depth, so inner loops never shadow outer ones
    # and two syntheses of the same type are identical.
    key = Name(f"_key{depth}") if key_type is not None else None
    value = Name(f"_value{depth}" if key_type is not None else f"_elem{depth}")

    body: list[Instruction] = []
    if key_type is not None:
        body.extend(_write_body(key_type, key, ids, depth + 1))
    if value_type is not None:
        body.extend(_write_body(value_type, value, ids, depth + 1))

    return ForEach(access, key, value, tuple(body))
