"""Abstract write instructions produced by the synthesizer.

Instructions are plain frozen dataclasses so that two syntheses of the same
type compare equal. Nothing here executes against a writer; the emitters in
this package turn them into source code.
"""

from dataclasses import dataclass, field

from .types import WireType


@dataclass(frozen=True)
class Identifiers:
    """Pre-bound names that generated code refers to."""

    output: str = "output"
    wire_types: str = "TType"


@dataclass(frozen=True)
class Name:
    id: str


@dataclass(frozen=True)
class Attribute:
    value: "Expression"
    attr: str


@dataclass(frozen=True)
class WireTypeRef:
    wire_type: WireType


@dataclass(frozen=True)
class SizeOf:
    """Number of elements in a container.

    ``accessor`` is ``"length"`` for lists and ``"size"`` for sets and maps;
    both mean the same thing.
    """

    value: "Expression"
    accessor: str


Expression = Name | Attribute | WireTypeRef | SizeOf


@dataclass(frozen=True)
class Call:
    """Invoke ``method`` on ``target`` with ``args``."""

    target: Expression
    method: str
    args: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ForEach:
    """Run ``body`` once per element of ``iterable``, in iteration order.

    ``key`` is set only for map entries; list and set elements bind ``value``.
    """

    iterable: Expression
    key: Name | None
    value: Name
    body: tuple["Instruction", ...] = field(default=())


Instruction = Call | ForEach


def walk(instructions: list[Instruction] | tuple[Instruction, ...]):
    """Yield every instruction, descending into loop bodies depth first."""
    for instr in instructions:
        yield instr
        if isinstance(instr, ForEach):
            yield from walk(instr.body)
