"""Quill - Thrift-style write-path code generator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("quill-idl")
except PackageNotFoundError:
    __version__ = "(local)"
