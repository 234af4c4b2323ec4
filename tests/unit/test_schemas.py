import pytest
from pydantic import ValidationError

from wincc_unified_mcp.agent.schemas import (
    EPOCH_TIMESTAMP,
    AlarmIdentifiersInput,
    BrowseObjectsInput,
    LoggedAlarmsInput,
    LoggedTagValuesInput,
    LoginInput,
    SortingMode,
    TagValuesInput,
    WriteTagValuesInput,
    parse_timestamp,
)


def test_browse_defaults_and_null_rejection() -> None:
    params = BrowseObjectsInput.model_validate({})

    assert params.nameFilters == []
    assert params.objectTypeFilters == []
    assert params.baseTypeFilters == []
    assert params.language == "en-US"

    with pytest.raises(ValidationError):
        BrowseObjectsInput.model_validate({"nameFilters": None})
    with pytest.raises(ValidationError):
        BrowseObjectsInput.model_validate({"objectTypeFilters": ["PUMP"]})


def test_tag_values_require_at_least_one_name() -> None:
    with pytest.raises(ValidationError):
        TagValuesInput.model_validate({"names": []})
    with pytest.raises(ValidationError):
        TagValuesInput.model_validate({"names": ["HMI_Tag_1"], "directRead": "yes"})

    assert TagValuesInput.model_validate({"names": ["HMI_Tag_1"]}).directRead is False


def test_login_rejects_empty_credentials() -> None:
    with pytest.raises(ValidationError):
        LoginInput.model_validate({"username": "", "password": "pw"})
    with pytest.raises(ValidationError):
        LoginInput.model_validate({"username": "operator", "password": ""})


@pytest.mark.parametrize(
    "value",
    ["2024-05-01", "2024-05-01T10:00:00+02:00", "2024-13-01T10:00:00Z", "yesterday"],
)
def test_timestamps_must_be_utc_iso_strings(value: str) -> None:
    with pytest.raises(ValidationError):
        LoggedAlarmsInput.model_validate({"startTime": value})


def test_parse_timestamp_keeps_milliseconds() -> None:
    parsed = parse_timestamp("2022-04-27T01:30:32.506Z")

    assert parsed.microsecond == 506000
    assert parsed.utcoffset().total_seconds() == 0


def test_logged_alarms_defaults() -> None:
    params = LoggedAlarmsInput.model_validate({})

    assert params.systemNames == []
    assert params.filterString == ""
    assert params.filterLanguage == "en-US"
    assert params.languages == ["en-US"]
    assert params.startTime == EPOCH_TIMESTAMP
    assert params.endTime == EPOCH_TIMESTAMP
    assert params.maxNumberOfResults == 0


def test_logged_tag_values_need_a_time_bound() -> None:
    with pytest.raises(ValidationError, match="At least one of startTime and endTime"):
        LoggedTagValuesInput.model_validate({"names": ["Logging_1"]})


def test_logged_tag_values_single_bound_needs_max_values() -> None:
    with pytest.raises(ValidationError, match="maxNumberOfValues"):
        LoggedTagValuesInput.model_validate(
            {"names": ["Logging_1"], "endTime": "2024-05-01T10:00:00.000Z"}
        )


def test_logged_tag_values_sorting_follows_direction() -> None:
    only_end = LoggedTagValuesInput.model_validate(
        {
            "names": ["Logging_1"],
            "endTime": "2024-05-01T10:00:00.000Z",
            "maxNumberOfValues": 100,
        }
    )
    assert only_end.sortingMode is SortingMode.TIME_DESC

    with pytest.raises(ValidationError, match="sortingMode must be TIME_ASC"):
        LoggedTagValuesInput.model_validate(
            {
                "names": ["Logging_1"],
                "startTime": "2024-05-01T10:00:00.000Z",
                "maxNumberOfValues": 100,
                "sortingMode": "TIME_DESC",
            }
        )


def test_logged_tag_values_with_both_bounds_keep_caller_choices() -> None:
    params = LoggedTagValuesInput.model_validate(
        {
            "names": ["Logging_1"],
            "startTime": "2024-05-01T00:00:00.000Z",
            "endTime": "2024-05-02T00:00:00.000Z",
            "sortingMode": "TIME_DESC",
        }
    )

    assert params.sortingMode is SortingMode.TIME_DESC
    assert params.maxNumberOfValues == 0


@pytest.mark.parametrize("value", ["42", 42, 4.2, True, None])
def test_write_accepts_scalar_values(value) -> None:
    params = WriteTagValuesInput.model_validate({"input": [{"name": "Tag_1", "value": value}]})

    assert params.input[0].value == value
    assert type(params.input[0].value) is type(value)


@pytest.mark.parametrize("value", [{"nested": 1}, [1, 2]])
def test_write_rejects_opaque_values(value) -> None:
    with pytest.raises(ValidationError):
        WriteTagValuesInput.model_validate({"input": [{"name": "Tag_1", "value": value}]})


def test_write_item_value_may_be_omitted() -> None:
    params = WriteTagValuesInput.model_validate({"input": [{"name": "Tag_1"}]})

    assert params.input[0].value is None


def test_write_requires_items_and_names() -> None:
    with pytest.raises(ValidationError):
        WriteTagValuesInput.model_validate({"input": []})
    with pytest.raises(ValidationError):
        WriteTagValuesInput.model_validate({"input": [{"name": "", "value": 1}]})


def test_alarm_identifier_defaults_to_all_instances() -> None:
    params = AlarmIdentifiersInput.model_validate({"input": [{"name": "Alarm1"}]})

    assert params.input[0].instanceID == 0
    with pytest.raises(ValidationError):
        AlarmIdentifiersInput.model_validate({"input": []})
