"""Tests for generated write methods"""

import os

from pytest import raises

from quill.generator.python import render
from quill.generator.schema import load_schema
from quill.proto import BinaryProtocolWriter, SerializationError

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def gen_code(file_name):
    gbl = globals().copy()

    with open(file_name) as f:
        text = f.read()

    schema = load_schema(text)
    generated_code = render(schema, runtime_import="quill.proto")
    exec(generated_code, gbl)
    return gbl


def write(value):
    out = BinaryProtocolWriter()
    value.write(out)
    return out.getvalue()


def describe_serialization():
    def test_simple_struct(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point = gen["Point"]

        expect(write(Point(x=1, y=-1))) == bytes.fromhex(
            "08" "0001" "00000001"  # x: i32
            "08" "0002" "ffffffff"  # y: i32
            "00"
        )

    def test_required_field(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point = gen["Point"]

        with raises(SerializationError):
            write(Point(x=1))

    def test_skips_unset_optional_fields(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Shape = gen["Shape"]

        expect(write(Shape())) == b"\x00"

    def test_list_of_structs(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point, Shape = gen["Point"], gen["Shape"]

        shape = Shape(points=[Point(x=1, y=2), Point(x=3, y=4)])
        expect(write(shape)) == bytes.fromhex(
            "0f" "0002"  # points: list
            "0c" "00000002"  # struct elements, 2 of them
            "08000100000001" "08000200000002" "00"
            "08000100000003" "08000200000004" "00"
            "00"
        )

    def test_map_writes_key_then_value(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Shape = gen["Shape"]

        shape = Shape(tags={"a": True, "bc": False})
        expect(write(shape)) == bytes.fromhex(
            "0d" "0003"  # tags: map
            "0b" "02" "00000002"  # string -> bool, 2 entries
            "00000001" "61" "01"
            "00000002" "6263" "00"
            "00"
        )

    def test_set_of_i8_writes_bytes(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Shape = gen["Shape"]

        expect(write(Shape(flags={-1}))) == bytes.fromhex(
            "0e" "0004"  # flags: set
            "03" "00000001"  # byte elements
            "ff"
            "00"
        )

    def test_nested_struct_and_binary(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point, Shape = gen["Point"], gen["Shape"]

        shape = Shape(name="sq", origin=Point(x=0, y=0), blob=b"\x01")
        expect(write(shape)) == bytes.fromhex(
            "0b" "0001" "00000002" "7371"  # name
            "0c" "0005" "08000100000000" "08000200000000" "00"  # origin
            "0b" "0006" "00000001" "01"  # blob travels as a string
            "00"
        )

    def test_set_of_structs(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point, Grid = gen["Point"], gen["Grid"]

        grid = Grid(cells={Point(x=1, y=2), Point(x=1, y=2)})
        expect(len(grid.cells)) == 1
        expect(write(grid)) == bytes.fromhex(
            "0e" "0001"  # cells: set
            "0c" "00000001"  # struct elements
            "08000100000001" "08000200000002" "00"
            "00"
        )

    def test_map_with_struct_keys(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Point, Grid = gen["Point"], gen["Grid"]

        grid = Grid(weights={Point(x=3, y=4): 7})
        expect(write(grid)) == bytes.fromhex(
            "0d" "0002"  # weights: map
            "0c" "08" "00000001"  # struct -> i32, 1 entry
            "08000100000003" "08000200000004" "00"
            "00000007"
            "00"
        )

    def test_comment_kept_as_docstring(expect):
        gen = gen_code(FILE_DIR + "/schema.json")
        Grid = gen["Grid"]

        expect(Grid.__doc__) == 'Cells use """quotes""" and end in a backslash \\'
