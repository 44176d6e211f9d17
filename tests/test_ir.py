"""Tests for the command IR models and output schema."""

import pytest

from commandschema.ir import SCHEMA_VERSION
from commandschema.ir.models import (
    CommandTypeShape,
    ParamKind,
    ParamShape,
    commands_to_schema,
)
from commandschema.ir.schema import get_schema


# --- IR Model Tests ---


def test_param_kind_annotations():
    assert ParamKind.STRING.annotation == "StringTypeAnnotation"
    assert ParamKind.BOOLEAN.annotation == "BooleanTypeAnnotation"
    assert ParamKind.INT32.annotation == "Int32TypeAnnotation"


def test_param_kind_from_annotation():
    assert ParamKind.from_annotation("Int32TypeAnnotation") == ParamKind.INT32
    with pytest.raises(ValueError):
        ParamKind.from_annotation("FloatTypeAnnotation")


def test_command_shape_defaults():
    cmd = CommandTypeShape(name="blur")
    assert cmd.optional is False
    assert cmd.parameters == ()
    assert cmd.arity == 0


def test_command_shape_is_immutable():
    cmd = CommandTypeShape(name="blur")
    with pytest.raises(AttributeError):
        cmd.name = "focus"


def test_command_to_schema():
    cmd = CommandTypeShape(
        name="setColor",
        optional=True,
        parameters=(
            ParamShape(name="color", kind=ParamKind.STRING),
            ParamShape(name="animated", kind=ParamKind.BOOLEAN),
        ),
    )
    assert cmd.to_schema() == {
        "name": "setColor",
        "optional": True,
        "typeAnnotation": {
            "type": "FunctionTypeAnnotation",
            "params": [
                {"name": "color", "typeAnnotation": {"type": "StringTypeAnnotation"}},
                {"name": "animated", "typeAnnotation": {"type": "BooleanTypeAnnotation"}},
            ],
        },
    }


def test_command_from_schema():
    data = {
        "name": "focus",
        "optional": False,
        "typeAnnotation": {
            "type": "FunctionTypeAnnotation",
            "params": [{"name": "durationMs", "typeAnnotation": {"type": "Int32TypeAnnotation"}}],
        },
    }
    cmd = CommandTypeShape.from_schema(data)
    assert cmd == CommandTypeShape(
        name="focus", parameters=(ParamShape(name="durationMs", kind=ParamKind.INT32),)
    )


def test_command_from_schema_rejects_non_function():
    with pytest.raises(ValueError):
        CommandTypeShape.from_schema({"name": "x", "typeAnnotation": {"type": "StringTypeAnnotation"}})


def test_commands_to_schema_keeps_order():
    commands = [CommandTypeShape(name=n) for n in ("c", "a", "b")]
    assert [c["name"] for c in commands_to_schema(commands)] == ["c", "a", "b"]


# --- Schema Tests ---


def test_schema_exists():
    schema = get_schema()
    assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert schema["$id"].endswith(f"v{SCHEMA_VERSION}")
    assert schema["type"] == "array"


def test_schema_param_enum_matches_kinds():
    params = get_schema()["items"]["properties"]["typeAnnotation"]["properties"]["params"]
    kinds = params["items"]["properties"]["typeAnnotation"]["properties"]["type"]["enum"]
    assert kinds == ["StringTypeAnnotation", "BooleanTypeAnnotation", "Int32TypeAnnotation"]
