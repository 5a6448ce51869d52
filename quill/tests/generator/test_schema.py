"""Tests for schema loading and validation."""

import json
import os

import pytest

from quill.generator.schema import SchemaError, ValidationError, load_schema, type_from_json
from quill.generator.types import BaseType, ListType, MapType, SetType, StructType

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def _schema(*structs):
    return json.dumps({"structs": list(structs)})


def _field_named(name):
    return _schema({"name": "A", "fields": [{"id": 1, "name": name, "type": "i32"}]})


def describe_type_from_json():
    def decodes_scalars(expect):
        expect(type_from_json("i32")) == BaseType("i32")

    def decodes_containers(expect):
        expect(type_from_json({"list": "i16"})) == ListType(BaseType("i16"))
        expect(type_from_json({"set": "string"})) == SetType(BaseType("string"))
        expect(type_from_json({"map": {"key": "i8", "value": {"struct": "P"}}})) == MapType(
            BaseType("i8"), StructType("P")
        )

    def keeps_unknown_scalar_names(expect):
        expect(type_from_json("UserId")) == BaseType("UserId")

    def rejects_unknown_kinds(expect):
        with pytest.raises(SchemaError):
            type_from_json({"tuple": "i32"})

    def rejects_incomplete_maps(expect):
        with pytest.raises(SchemaError):
            type_from_json({"map": {"key": "i32"}})

    def rejects_multi_key_objects(expect):
        with pytest.raises(SchemaError):
            type_from_json({"list": "i32", "set": "i32"})


def describe_load_schema():
    def loads_structs_and_fields(expect):
        schema = load_schema(
            _schema(
                {
                    "name": "Point",
                    "fields": [
                        {"id": 1, "name": "x", "type": "i32", "required": True},
                        {"id": 2, "name": "ys", "type": {"list": "double"}},
                    ],
                }
            )
        )
        expect(schema.namespace) == None
        point = schema.structs[0]
        expect(point.name) == "Point"
        expect(point.fields[0].type) == BaseType("i32")
        expect(point.fields[0].required) == True
        expect(point.fields[1].type) == ListType(BaseType("double"))
        expect(point.fields[1].required) == False

    def loads_fixture(expect):
        with open(f"{FILE_DIR}/schema.json", encoding="utf-8") as f:
            schema = load_schema(f.read())
        expect(schema.namespace) == "demo"
        expect([s.name for s in schema.structs]) == ["Point", "Shape"]
        expect(schema.structs[1].fields[1].type) == ListType(StructType("Point"))

    def allows_forward_references(expect):
        schema = load_schema(
            _schema(
                {"name": "A", "fields": [{"id": 1, "name": "b", "type": {"struct": "B"}}]},
                {"name": "B", "fields": []},
            )
        )
        expect(len(schema.structs)) == 2


def describe_validate():
    def rejects_duplicate_structs(expect):
        with pytest.raises(ValidationError):
            load_schema(_schema({"name": "A", "fields": []}, {"name": "A", "fields": []}))

    def rejects_duplicate_field_ids(expect):
        with pytest.raises(ValidationError):
            load_schema(
                _schema(
                    {
                        "name": "A",
                        "fields": [
                            {"id": 1, "name": "x", "type": "i32"},
                            {"id": 1, "name": "y", "type": "i32"},
                        ],
                    }
                )
            )

    def rejects_duplicate_field_names(expect):
        with pytest.raises(ValidationError):
            load_schema(
                _schema(
                    {
                        "name": "A",
                        "fields": [
                            {"id": 1, "name": "x", "type": "i32"},
                            {"id": 2, "name": "x", "type": "i32"},
                        ],
                    }
                )
            )

    def rejects_non_positive_ids(expect):
        with pytest.raises(ValidationError):
            load_schema(_schema({"name": "A", "fields": [{"id": 0, "name": "x", "type": "i32"}]}))

    def rejects_undeclared_struct_references(expect):
        with pytest.raises(ValidationError) as excinfo:
            load_schema(
                _schema(
                    {
                        "name": "A",
                        "fields": [
                            {
                                "id": 1,
                                "name": "x",
                                "type": {"map": {"key": "i32", "value": {"struct": "Nope"}}},
                            }
                        ],
                    }
                )
            )
        expect("Nope" in str(excinfo.value)) == True

    def rejects_invalid_json(expect):
        with pytest.raises(SchemaError):
            load_schema("{not json")

    def rejects_keyword_field_names(expect):
        with pytest.raises(ValidationError) as excinfo:
            load_schema(_field_named("from"))
        expect("'from'" in str(excinfo.value)) == True

    def rejects_non_identifier_names(expect):
        with pytest.raises(ValidationError):
            load_schema(_field_named("x-y"))
        with pytest.raises(ValidationError):
            load_schema(_schema({"name": "1A", "fields": []}))

    def rejects_field_named_write(expect):
        with pytest.raises(ValidationError) as excinfo:
            load_schema(_field_named("write"))
        expect("reserved" in str(excinfo.value)) == True

    def rejects_names_bound_by_generated_module(expect):
        for name in ["TType", "dataclass", "SerializationError"]:
            with pytest.raises(ValidationError):
                load_schema(_schema({"name": name, "fields": []}))

    def accepts_soft_keywords(expect):
        schema = load_schema(
            _schema({"name": "A", "fields": [{"id": 1, "name": "match", "type": "i32"}]})
        )
        expect(schema.structs[0].fields[0].name) == "match"

    def rejects_multi_line_namespace(expect):
        text = json.dumps({"namespace": "demo\nimport os", "structs": []})
        with pytest.raises(ValidationError):
            load_schema(text)

    def overrides_namespace(expect):
        text = json.dumps({"namespace": "demo", "structs": []})
        expect(load_schema(text).namespace) == "demo"
        expect(load_schema(text, "geo.shapes").namespace) == "geo.shapes"
