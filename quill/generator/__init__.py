"""Quill write-path code generator."""

from .classifier import classify as classify
from .classifier import wire_type_of as wire_type_of
from .instructions import *
from .schema import Schema as Schema
from .schema import SchemaError as SchemaError
from .schema import ValidationError as ValidationError
from .schema import load_schema as load_schema
from .synthesizer import get_write_body as get_write_body
from .types import *
