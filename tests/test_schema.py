import pytest

from agent_toolkit.llm_core import Schema, SchemaKind, ToolValidationError
from agent_toolkit.llm_core.tools.schema import ArraySchema, ObjectSchema, PrimitiveSchema


def test_object_schema_keeps_property_order_and_required_flags() -> None:
    schema = (
        Schema.object("Search parameters")
        .with_property("query", Schema.string("The search query"))
        .with_property("count", Schema.integer("How many"), required=False)
        .with_property("tags", Schema.array(Schema.string("A tag"), "Tags"), required=False)
    )

    assert schema.property_names == ["query", "count", "tags"]
    assert schema.required_names == ["query"]
    assert schema.get_property("count").description == "How many"
    assert schema.get_property("nope") is None


def test_with_property_returns_a_new_schema() -> None:
    base = Schema.object()
    extended = base.with_property("a", Schema.string())

    assert base.properties == ()
    assert extended.property_names == ["a"]


def test_duplicate_property_name_is_rejected() -> None:
    schema = Schema.object().with_property("a", Schema.string())

    with pytest.raises(ToolValidationError, match="already declared"):
        schema.with_property("a", Schema.number())


def test_enum_values_must_match_kind() -> None:
    assert Schema.string("Unit", enum=["celsius", "fahrenheit"]).enum == ("celsius", "fahrenheit")

    with pytest.raises(ToolValidationError):
        Schema.string("Unit", enum=["celsius", 3])
    with pytest.raises(ToolValidationError):
        Schema.integer("Level", enum=[])


def test_to_json_schema() -> None:
    schema = (
        Schema.object("Weather")
        .with_property("city", Schema.string("City name"))
        .with_property("unit", Schema.string("Unit", enum=["c", "f"]), required=False)
        .with_property("days", Schema.array(Schema.integer()), required=False)
    )

    assert schema.to_json_schema() == {
        "type": "object",
        "description": "Weather",
        "properties": {
            "city": {"type": "string", "description": "City name"},
            "unit": {"type": "string", "description": "Unit", "enum": ["c", "f"]},
            "days": {"type": "array", "items": {"type": "integer"}},
        },
        "required": ["city"],
        "additionalProperties": False,
    }


def test_from_json_schema_builds_nested_tree() -> None:
    schema = Schema.from_json_schema(
        {
            "type": "object",
            "properties": {
                "user": {
                    "type": "object",
                    "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
                    "required": ["name"],
                },
                "scores": {"type": "array", "items": {"type": "number"}},
                "mode": {"anyOf": [{"type": "string", "enum": ["a", "b"]}, {"type": "null"}], "default": None},
            },
            "required": ["user"],
        }
    )

    user = schema.get_property("user")
    assert user.required
    assert isinstance(user.schema, ObjectSchema)
    assert user.schema.required_names == ["name"]
    assert isinstance(schema.get_property("scores").schema, ArraySchema)
    mode = schema.get_property("mode").schema
    assert isinstance(mode, PrimitiveSchema)
    assert mode.kind is SchemaKind.STRING
    assert mode.enum == ("a", "b")
    assert not schema.get_property("mode").required


def test_from_json_schema_resolves_refs() -> None:
    schema = Schema.from_json_schema(
        {
            "$defs": {"Address": {"type": "object", "properties": {"city": {"type": "string"}}}},
            "type": "object",
            "properties": {"home": {"$ref": "#/$defs/Address"}},
        }
    )

    home = schema.get_property("home").schema
    assert isinstance(home, ObjectSchema)
    assert home.property_names == ["city"]


def test_from_json_schema_rejects_unions_and_recursion() -> None:
    with pytest.raises(ToolValidationError, match="Union"):
        Schema.from_json_schema(
            {"type": "object", "properties": {"v": {"anyOf": [{"type": "string"}, {"type": "integer"}]}}}
        )

    with pytest.raises(ToolValidationError, match="Recursive"):
        Schema.from_json_schema(
            {
                "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
                "type": "object",
                "properties": {"root": {"$ref": "#/$defs/Node"}},
            }
        )


def test_from_json_schema_requires_an_object_root() -> None:
    with pytest.raises(ToolValidationError, match="object schema"):
        Schema.from_json_schema({"type": "string"})
