"""Thrift binary protocol writer used by generated ``write`` methods.

The writer is a synchronous sink over an in-memory buffer. All integers are
big-endian. Strings and binary share the same framing (i32 length prefix
followed by the bytes), which is why a binary field written with
``writeBinary`` is read back by the peer with ``readString``/``readBinary``.
"""

import struct as _struct
from enum import IntEnum


class SerializationError(RuntimeError):
    """Raised when a value cannot be written."""


class TType(IntEnum):
    """Wire type codes written into field and container headers."""

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


_BYTE = _struct.Struct(">b")
_I16 = _struct.Struct(">h")
_I32 = _struct.Struct(">i")
_I64 = _struct.Struct(">q")
_DOUBLE = _struct.Struct(">d")


class BinaryProtocolWriter:
    """Write values using the Thrift binary protocol.

    Example:
        out = BinaryProtocolWriter()
        point.write(out)
        data = out.getvalue()
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buf)

    def _pack(self, fmt: _struct.Struct, value: int | float, kind: str) -> None:
        try:
            self._buf.extend(fmt.pack(value))
        except _struct.error as e:
            raise SerializationError(f"Cannot write {value!r} as {kind}: {e}") from e

    # Struct scaffolding. Struct names and field names never reach the wire.

    def writeStructBegin(self, name: str) -> None:
        pass

    def writeStructEnd(self) -> None:
        pass

    def writeFieldBegin(self, name: str, ttype: int, fid: int) -> None:
        self._pack(_BYTE, ttype, "field type")
        self._pack(_I16, fid, "field id")

    def writeFieldEnd(self) -> None:
        pass

    def writeFieldStop(self) -> None:
        self._pack(_BYTE, TType.STOP, "field type")

    # Containers

    def writeListBegin(self, etype: int, size: int) -> None:
        self._pack(_BYTE, etype, "element type")
        self._pack(_I32, size, "list size")

    def writeListEnd(self) -> None:
        pass

    def writeSetBegin(self, etype: int, size: int) -> None:
        self._pack(_BYTE, etype, "element type")
        self._pack(_I32, size, "set size")

    def writeSetEnd(self) -> None:
        pass

    def writeMapBegin(self, ktype: int, vtype: int, size: int) -> None:
        self._pack(_BYTE, ktype, "key type")
        self._pack(_BYTE, vtype, "value type")
        self._pack(_I32, size, "map size")

    def writeMapEnd(self) -> None:
        pass

    # Scalars

    def writeBool(self, value: bool) -> None:
        self._buf.append(1 if value else 0)

    def writeByte(self, value: int) -> None:
        self._pack(_BYTE, value, "byte")

    def writeI16(self, value: int) -> None:
        self._pack(_I16, value, "i16")

    def writeI32(self, value: int) -> None:
        self._pack(_I32, value, "i32")

    def writeI64(self, value: int) -> None:
        self._pack(_I64, value, "i64")

    def writeDouble(self, value: float) -> None:
        self._pack(_DOUBLE, value, "double")

    def writeString(self, value: str) -> None:
        try:
            encoded = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise SerializationError(f"Cannot write {value!r} as string: {e}") from e
        self.writeBinary(encoded)

    def writeBinary(self, value: bytes) -> None:
        self._pack(_I32, len(value), "length")
        self._buf.extend(value)
