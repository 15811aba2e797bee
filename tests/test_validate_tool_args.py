import jsonschema
import pytest

from github_tools_mcp.mcp_server.errors import ToolInputValidationError
from github_tools_mcp.mcp_server.schemas import (
    JSON_SCHEMA_DIALECT,
    array_field,
    check_tool_schema,
    collect_violations,
    integer_field,
    object_schema,
    string_field,
    tool_input_schema,
    validate_tool_args,
)

SCHEMA = tool_input_schema(
    {
        "owner": string_field(),
        "repo": string_field(),
        "issue_number": integer_field(),
        "labels": array_field({"type": "string"}),
    },
    ["owner", "repo", "issue_number"],
)


def test_tool_input_schema_is_closed_and_tagged():
    assert SCHEMA["$schema"] == JSON_SCHEMA_DIALECT
    assert SCHEMA["additionalProperties"] is False
    assert SCHEMA["required"] == ["owner", "repo", "issue_number"]
    check_tool_schema(SCHEMA)


def test_object_schema_rejects_unknown_required_field():
    with pytest.raises(ValueError):
        object_schema({"a": string_field()}, ["a", "b"])


def test_check_tool_schema_rejects_non_object():
    with pytest.raises(jsonschema.SchemaError):
        check_tool_schema({"$schema": JSON_SCHEMA_DIALECT, "type": "string"})


def test_check_tool_schema_rejects_malformed_schema():
    with pytest.raises(jsonschema.SchemaError):
        check_tool_schema({"$schema": JSON_SCHEMA_DIALECT, "type": "object", "required": "owner"})


def test_valid_arguments_return_a_copy():
    arguments = {"owner": "o", "repo": "r", "issue_number": 3, "labels": ["bug"]}

    validated = validate_tool_args("get_issue", SCHEMA, arguments)

    assert validated == arguments
    validated["labels"].append("mutated")
    assert arguments["labels"] == ["bug"]


def test_every_missing_required_field_is_named():
    with pytest.raises(ToolInputValidationError) as excinfo:
        validate_tool_args("get_issue", SCHEMA, {"owner": "o"})

    assert excinfo.value.tool_name == "get_issue"
    assert excinfo.value.fields == ["repo", "issue_number"]
    assert str(excinfo.value).startswith("Invalid input: ")
    assert "'repo' is a required property" in str(excinfo.value)


def test_unknown_fields_are_rejected_by_name():
    violations = collect_violations(
        SCHEMA,
        {"owner": "o", "repo": "r", "issue_number": 1, "issueNumber": 1},
    )

    assert violations == [
        {
            "field": "issueNumber",
            "message": "'issueNumber' is not an allowed field",
            "validator": "additionalProperties",
        }
    ]


def test_type_errors_report_the_nested_path():
    violations = collect_violations(
        SCHEMA,
        {"owner": "o", "repo": "r", "issue_number": "3", "labels": ["ok", 5]},
    )

    fields = [v["field"] for v in violations]
    assert fields == ["issue_number", "labels.1"]
    assert all(v["validator"] == "type" for v in violations)


def test_bool_is_not_an_integer():
    violations = collect_violations(SCHEMA, {"owner": "o", "repo": "r", "issue_number": True})

    assert [v["field"] for v in violations] == ["issue_number"]


def test_non_object_arguments_report_root():
    violations = collect_violations(SCHEMA, ["owner", "repo"])

    assert violations[0]["field"] == "<root>"
    assert violations[0]["validator"] == "type"
