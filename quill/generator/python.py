"""Python code generator for quill schemas."""

import logging
from importlib import resources

from jinja2 import Environment, PackageLoader

from .classifier import wire_type_of
from .instructions import (
    Attribute,
    Call,
    Expression,
    ForEach,
    Identifiers,
    Instruction,
    Name,
    SizeOf,
    WireTypeRef,
)
from .schema import FieldDef, Schema
from .synthesizer import DEFAULT_IDENTIFIERS, get_write_body
from .types import BaseType, ListType, MapType, SetType, StructType, TypeDescriptor

logger = logging.getLogger(__name__)

RUNTIME_FILES = [
    "__init__.py",
    "protocol.py",
]

env = Environment(
    loader=PackageLoader("quill.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)


def _docstring(text: str) -> str:
    """Escape text for the body of a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


env.filters["docstring"] = _docstring

template = env.get_template("python.py.j2")

INDENT = "    "

# Map scalar tags to Python type annotations
PRIMITIVE_TYPE_MAP = {
    "bool": "bool",
    "i8": "int",
    "byte": "int",
    "i16": "int",
    "i32": "int",
    "i64": "int",
    "double": "float",
    "string": "str",
    "binary": "bytes",
}


def _annotation(t: TypeDescriptor) -> str:
    """Map a type descriptor to a Python type annotation."""
    if isinstance(t, BaseType):
        return PRIMITIVE_TYPE_MAP.get(t.name, t.name)
    if isinstance(t, ListType):
        return f"list[{_annotation(t.element_type)}]"
    if isinstance(t, SetType):
        return f"set[{_annotation(t.element_type)}]"
    if isinstance(t, MapType):
        return f"dict[{_annotation(t.key_type)}, {_annotation(t.value_type)}]"
    if isinstance(t, StructType):
        return t.name
    return "object"


def _expr(e: Expression, ids: Identifiers) -> str:
    if isinstance(e, Name):
        return e.id
    if isinstance(e, Attribute):
        return f"{_expr(e.value, ids)}.{e.attr}"
    if isinstance(e, WireTypeRef):
        return f"{ids.wire_types}.{e.wire_type.name}"
    if isinstance(e, SizeOf):
        # length and size are both len() in Python
        return f"len({_expr(e.value, ids)})"
    raise TypeError(f"Unknown expression: {e!r}")


def emit(
    instructions: list[Instruction] | tuple[Instruction, ...],
    identifiers: Identifiers = DEFAULT_IDENTIFIERS,
    indent: str = "",
) -> list[str]:
    """Render write instructions as lines of Python source."""
    lines: list[str] = []
    for instr in instructions:
        if isinstance(instr, Call):
            args = ", ".join(_expr(a, identifiers) for a in instr.args)
            lines.append(f"{indent}{_expr(instr.target, identifiers)}.{instr.method}({args})")
        elif isinstance(instr, ForEach):
            iterable = _expr(instr.iterable, identifiers)
            if instr.key is not None:
                lines.append(f"{indent}for {instr.key.id}, {instr.value.id} in {iterable}.items():")
            else:
                lines.append(f"{indent}for {instr.value.id} in {iterable}:")
            body = emit(instr.body, identifiers, indent + INDENT)
            lines.extend(body or [f"{indent}{INDENT}pass"])
        else:
            raise TypeError(f"Unknown instruction: {instr!r}")
    return lines


def _gen_write_field(member: FieldDef, ids: Identifiers) -> str:
    """Generate write code for the value of a struct field."""
    instructions = get_write_body(member.type, Attribute(Name("self"), member.name), ids)
    return "\n".join(emit(instructions, ids))


def render(
    schema: Schema,
    runtime_import: str = "quill.proto",
    identifiers: Identifiers = DEFAULT_IDENTIFIERS,
) -> str:
    """Render a schema to Python source code.

    Raises:
        UnsupportedTypeError: if any field has a type that cannot be written.
            Nothing is rendered in that case.
    """
    # Synthesize every field up front so a bad type fails the whole render
    bodies: dict[str, dict[str, str]] = {}
    wire_types: dict[str, dict[str, str]] = {}
    for struct in schema.structs:
        logger.debug("Generating write method for %s", struct.name)
        bodies[struct.name] = {f.name: _gen_write_field(f, identifiers) for f in struct.fields}
        wire_types[struct.name] = {f.name: wire_type_of(f.type).name for f in struct.fields}

    logger.info("Rendered %d structs", len(schema.structs))
    return template.render(
        schema=schema,
        bodies=bodies,
        wire_types=wire_types,
        annotation=_annotation,
        ids=identifiers,
        runtime_import=runtime_import,
    )


def runtime() -> dict[str, str]:
    """Return the Python runtime files as a dict of filename -> content."""
    result: dict[str, str] = {}
    for filename in RUNTIME_FILES:
        content = resources.files("quill.proto").joinpath(filename).read_text()
        result[filename] = content
    return result
