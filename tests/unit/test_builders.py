from datetime import datetime, timezone

from wincc_unified_mcp.agent import builders, queries
from wincc_unified_mcp.agent.schemas import (
    AlarmIdentifiersInput,
    BrowseObjectsInput,
    LoggedTagValuesInput,
    LoginInput,
    WriteTagValuesInput,
)

NOW = datetime(2024, 5, 1, 8, 30, 15, 123456, tzinfo=timezone.utc)


def test_browse_without_parameters_sends_defaults() -> None:
    request = builders.build_browse_objects(BrowseObjectsInput.model_validate({}))

    assert request.document == queries.BROWSE_QUERY
    assert request.variables == {
        "nameFilters": [],
        "objectTypeFilters": [],
        "baseTypeFilters": [],
        "language": "en-US",
    }


def test_browse_sends_enum_values_as_strings() -> None:
    params = BrowseObjectsInput.model_validate(
        {"nameFilters": ["HMI_RT_1::*"], "objectTypeFilters": ["TAG", "ALARM"]}
    )

    request = builders.build_browse_objects(params)

    assert request.variables["objectTypeFilters"] == ["TAG", "ALARM"]


def test_login_unwraps_password() -> None:
    request = builders.build_login(
        LoginInput.model_validate({"username": "operator", "password": "s3cret"})
    )

    assert request.variables == {"username": "operator", "password": "s3cret"}


def test_logged_tag_values_send_derived_sorting_mode() -> None:
    params = LoggedTagValuesInput.model_validate(
        {
            "names": ["Logging_1"],
            "endTime": "2024-05-01T10:00:00.000Z",
            "maxNumberOfValues": 10,
        }
    )

    variables = builders.build_logged_tag_values(params).variables

    assert variables == {
        "names": ["Logging_1"],
        "startTime": "1970-01-01T00:00:00.000Z",
        "endTime": "2024-05-01T10:00:00.000Z",
        "maxNumberOfValues": 10,
        "sortingMode": "TIME_DESC",
        "boundingValuesMode": "NO_BOUNDING_VALUES",
    }


def test_write_item_falls_back_to_now_and_request_quality() -> None:
    params = WriteTagValuesInput.model_validate(
        {
            "input": [{"name": "Tag_1", "value": 5}],
            "quality": {"quality": "UNCERTAIN", "subStatus": "SUBSTITUTE_VALUE"},
        }
    )

    request = builders.build_write_tag_values(params, now=NOW)

    assert request.variables["input"] == [
        {
            "name": "Tag_1",
            "value": 5,
            "timestamp": "2024-05-01T08:30:15.123Z",
            "quality": {"quality": "UNCERTAIN", "subStatus": "SUBSTITUTE_VALUE"},
        }
    ]
    assert "timestamp" not in request.variables
    assert request.variables["quality"] == {
        "quality": "UNCERTAIN",
        "subStatus": "SUBSTITUTE_VALUE",
    }


def test_write_item_values_win_over_request_values() -> None:
    params = WriteTagValuesInput.model_validate(
        {
            "input": [
                {
                    "name": "Tag_1",
                    "value": "on",
                    "timestamp": "2024-01-01T00:00:00.000Z",
                    "quality": {"quality": "BAD"},
                },
                {"name": "Tag_2", "value": None},
            ],
            "timestamp": "2024-02-02T00:00:00.000Z",
        }
    )

    request = builders.build_write_tag_values(params, now=NOW)

    first, second = request.variables["input"]
    assert first["timestamp"] == "2024-01-01T00:00:00.000Z"
    assert first["quality"] == {"quality": "BAD"}
    assert second["timestamp"] == "2024-02-02T00:00:00.000Z"
    assert second["quality"] == {"quality": "GOOD_CASCADE"}
    assert request.variables["timestamp"] == "2024-02-02T00:00:00.000Z"
    assert "quality" not in request.variables


def test_write_builder_reads_clock_at_build_time() -> None:
    build = builders.make_write_tag_values_builder(lambda: NOW)
    params = WriteTagValuesInput.model_validate({"input": [{"name": "Tag_1", "value": True}]})

    assert build(params).variables["input"][0]["timestamp"] == "2024-05-01T08:30:15.123Z"


def test_acknowledge_without_instance_targets_all_instances() -> None:
    params = AlarmIdentifiersInput.model_validate({"input": [{"name": "Alarm1"}]})

    request = builders.build_acknowledge_alarms(params)

    assert request.document == queries.ACKNOWLEDGE_ALARMS_MUTATION
    assert request.variables == {"input": [{"name": "Alarm1", "instanceID": 0}]}


def test_reset_uses_reset_mutation() -> None:
    params = AlarmIdentifiersInput.model_validate({"input": [{"name": "Alarm1", "instanceID": 4}]})

    request = builders.build_reset_alarms(params)

    assert request.document == queries.RESET_ALARMS_MUTATION
    assert request.variables == {"input": [{"name": "Alarm1", "instanceID": 4}]}


def test_format_timestamp_converts_to_utc() -> None:
    moment = datetime.fromisoformat("2024-05-01T10:00:00.250000+02:00")

    assert builders.format_timestamp(moment) == "2024-05-01T08:00:00.250Z"
