"""Quill runtime support for generated code."""

from .protocol import BinaryProtocolWriter as BinaryProtocolWriter
from .protocol import SerializationError as SerializationError
from .protocol import TType as TType
