from agent_toolkit.llm_impl.gemini import schema_sanitizer


def test_strip_additional_properties():
    """Tests that 'additionalProperties' is recursively removed."""
    schema = {
        "type": "object",
        "properties": {
            "user": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "additionalProperties": False,
            },
            "items": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"price": {"type": "number"}},
                    "additionalProperties": False,
                },
            },
        },
        "additionalProperties": False,
    }

    sanitized = schema_sanitizer.sanitize(schema)

    assert "additionalProperties" not in sanitized
    assert "additionalProperties" not in sanitized["properties"]["user"]
    assert "additionalProperties" not in sanitized["properties"]["items"]["items"]
    assert "price" in sanitized["properties"]["items"]["items"]["properties"]
    # The input is left untouched
    assert schema["additionalProperties"] is False


def test_ensure_required_params_removes_undefined():
    schema = {
        "type": "object",
        "properties": {"b": {"type": "string"}, "a": {"type": "string"}},
        "required": ["b", "undefined_prop", "a"],
    }

    sanitized = schema_sanitizer.sanitize(schema)

    assert sanitized["required"] == ["b", "a"]


def test_ensure_required_params_removes_key_if_empty():
    schema = {
        "type": "object",
        "properties": {"defined_prop": {"type": "string"}},
        "required": ["undefined_prop_1", "undefined_prop_2"],
    }

    sanitized = schema_sanitizer.sanitize(schema)

    assert "required" not in sanitized


def test_declaration_parameters_skips_empty_objects():
    assert schema_sanitizer.declaration_parameters({"type": "object", "properties": {}}) is None
    assert schema_sanitizer.declaration_parameters(
        {"type": "object", "properties": {"q": {"type": "string"}}, "additionalProperties": False}
    ) == {"type": "object", "properties": {"q": {"type": "string"}}}
