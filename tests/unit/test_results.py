"""Deploy result normalization tests."""

import pytest

from deploy import (
    ComponentSuccess,
    DeployOutcome,
    DeployResult,
    extract_deploy_failure_message,
    normalize_component_successes,
)
from deploy.results import DEFAULT_FAILURE_MESSAGE, as_bool, as_list


@pytest.mark.unit
def test_as_list_wraps_single_values():
    assert as_list(None) == []
    assert as_list({"a": 1}) == [{"a": 1}]
    assert as_list([1, 2]) == [1, 2]


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [("true", True), ("TRUE ", True), ("false", False), ("", False), (True, True), (0, False)])
def test_as_bool(value, expected):
    assert as_bool(value) is expected


@pytest.mark.unit
def test_failure_message_joins_component_problems():
    result = DeployResult(
        id="1",
        done=True,
        component_failures=[
            {"fileName": "lwc/a/a.js", "lineNumber": 4, "problem": "Bad"},
            {"fileName": "lwc/a/a.html", "problem": "Worse"},
            {"message": "No file"},
            {},
            "junk",
        ],
    )
    assert extract_deploy_failure_message(result) == "lwc/a/a.js:4 - Bad\nlwc/a/a.html - Worse\nNo file"


@pytest.mark.unit
def test_failure_message_falls_back_to_error_message():
    result = DeployResult(id="1", done=True, error_message="INVALID_CROSS_REFERENCE_KEY")
    assert extract_deploy_failure_message(result) == "INVALID_CROSS_REFERENCE_KEY"


@pytest.mark.unit
def test_failure_message_default():
    assert extract_deploy_failure_message(None) == DEFAULT_FAILURE_MESSAGE
    assert extract_deploy_failure_message(DeployResult(id="1")) == "Deployment failed"


@pytest.mark.unit
def test_successes_drop_nameless_entries():
    entries = normalize_component_successes(
        [{"fullName": "w", "created": "true"}, {"changed": "true"}, "junk", {"fileName": "package.xml"}]
    )
    assert entries == [
        ComponentSuccess(full_name="w", created=True),
        ComponentSuccess(file_name="package.xml"),
    ]


@pytest.mark.unit
def test_single_success_object_is_listed():
    entries = normalize_component_successes({"fullName": "w", "fileName": "lwc/w"})
    assert len(entries) == 1


@pytest.mark.unit
def test_outcome_dict_uses_wire_keys():
    outcome = DeployOutcome(
        component="w",
        targets=["lightning__AppPage"],
        status="Succeeded",
        id="0Af1",
        completed_date="2024-01-01T00:00:00.000Z",
        successes=[ComponentSuccess(full_name="w", file_name="lwc/w", created=True)],
    )
    assert outcome.to_dict() == {
        "ok": True,
        "component": "w",
        "targets": ["lightning__AppPage"],
        "status": "Succeeded",
        "id": "0Af1",
        "completedDate": "2024-01-01T00:00:00.000Z",
        "successes": [{"fullName": "w", "fileName": "lwc/w", "created": True, "changed": False}],
    }
