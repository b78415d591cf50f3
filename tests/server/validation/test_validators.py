import pytest

from boardsync.server.validation import (
    PAYLOAD_SCHEMAS,
    ValidationResult,
    get_schema,
    validate_payload,
    validate_required_keys,
)


def test_every_client_message_has_a_schema():
    assert set(PAYLOAD_SCHEMAS) == {
        "ADD_TASK",
        "UPDATE_TASK",
        "DELETE_TASK",
        "MOVE_TASK",
        "ADD_COMMENT",
        "UPDATE_TEAM_MEMBER",
        "USER_ACTIVITY",
    }


@pytest.mark.parametrize("message_type,payload", [
    ("ADD_TASK", {"id": "t1", "status": "todo", "comments": []}),
    ("UPDATE_TASK", {"id": "t1"}),
    ("DELETE_TASK", {"id": "t1"}),
    ("MOVE_TASK", {"id": "t1", "status": "done"}),
    ("ADD_COMMENT", {"taskId": "t1", "comment": "hi"}),
    ("UPDATE_TEAM_MEMBER", {"name": "ana"}),
])
def test_valid_payloads(message_type, payload):
    result = validate_payload(message_type, payload)
    assert result.valid
    assert result.errors == []


def test_missing_keys_are_reported():
    result = validate_payload("ADD_COMMENT", {"taskId": "t1"})
    assert not result
    assert result.errors == ["Missing required payload keys: comment"]


def test_non_object_payload_is_rejected():
    result = validate_payload("DELETE_TASK", ["t1"])
    assert not result
    assert "expected object" in result.errors[0]


def test_activity_payload_can_be_anything():
    assert validate_payload("USER_ACTIVITY", None)
    assert validate_payload("USER_ACTIVITY", "typing")


def test_unknown_type_passes():
    assert validate_payload("SOMETHING_ELSE", 42)
    assert get_schema("SOMETHING_ELSE") is None


def test_validate_required_keys():
    assert validate_required_keys({"a": 1, "b": 2}, "a", "b") == (True, None)
    valid, error = validate_required_keys({"a": 1}, "a", "b", "c")
    assert valid is False
    assert error == "Missing required payload keys: b, c"


def test_validation_result_str():
    assert str(ValidationResult(True)) == "Validation passed"
    assert str(ValidationResult(False, ["x", "y"])) == "Validation failed: x; y"
