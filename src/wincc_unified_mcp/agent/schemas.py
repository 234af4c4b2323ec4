"""Parameter models for every tool, built on Pydantic v2.

Field names follow the runtime's GraphQL argument names so that the JSON
schema advertised to callers and the variables sent to the backend line up
one to one.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    SecretStr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

EPOCH_TIMESTAMP = "1970-01-01T00:00:00.000Z"
DEFAULT_LANGUAGE = "en-US"

_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def parse_timestamp(value: str) -> datetime:
    if not _TIMESTAMP_PATTERN.match(value):
        raise ValueError(f"Invalid ISO 8601 UTC datetime string: {value!r}")
    seconds, _, fraction = value[:-1].partition(".")
    parsed = datetime.strptime(seconds, "%Y-%m-%dT%H:%M:%S").replace(tzinfo=timezone.utc)
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def _check_timestamp(value: str) -> str:
    parse_timestamp(value)
    return value


Timestamp = Annotated[str, AfterValidator(_check_timestamp)]
TagValue = Union[StrictStr, StrictInt, StrictFloat, StrictBool, None]


class ObjectType(str, Enum):
    TAG = "TAG"
    SIMPLETAG = "SIMPLETAG"
    STRUCTURETAG = "STRUCTURETAG"
    TAGTYPE = "TAGTYPE"
    STRUCTURETAGTYPE = "STRUCTURETAGTYPE"
    SIMPLETAGTYPE = "SIMPLETAGTYPE"
    ALARM = "ALARM"
    ALARMCLASS = "ALARMCLASS"
    LOGGINGTAG = "LOGGINGTAG"


class SortingMode(str, Enum):
    TIME_ASC = "TIME_ASC"
    TIME_DESC = "TIME_DESC"


class BoundingValuesMode(str, Enum):
    NO_BOUNDING_VALUES = "NO_BOUNDING_VALUES"
    LEFT_BOUNDING_VALUES = "LEFT_BOUNDING_VALUES"
    RIGHT_BOUNDING_VALUES = "RIGHT_BOUNDING_VALUES"
    LEFTRIGHT_BOUNDING_VALUES = "LEFTRIGHT_BOUNDING_VALUES"


class MainQuality(str, Enum):
    BAD = "BAD"
    UNCERTAIN = "UNCERTAIN"
    GOOD_NON_CASCADE = "GOOD_NON_CASCADE"
    GOOD_CASCADE = "GOOD_CASCADE"


class QualitySubStatus(str, Enum):
    NON_SPECIFIC = "NON_SPECIFIC"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    NOT_CONNECTED = "NOT_CONNECTED"
    SENSOR_FAILURE = "SENSOR_FAILURE"
    DEVICE_FAILURE = "DEVICE_FAILURE"
    NO_COMMUNICATION_WITH_LAST_USABLE_VALUE = "NO_COMMUNICATION_WITH_LAST_USABLE_VALUE"
    NO_COMMUNICATION_NO_USABLE_VALUE = "NO_COMMUNICATION_NO_USABLE_VALUE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    LAST_USABLE_VALUE = "LAST_USABLE_VALUE"
    SUBSTITUTE_VALUE = "SUBSTITUTE_VALUE"
    INITIAL_VALUE = "INITIAL_VALUE"
    SENSOR_CONVERSION = "SENSOR_CONVERSION"
    RANGE_VIOLATION = "RANGE_VIOLATION"
    SUB_NORMAL = "SUB_NORMAL"
    CONFIG_ERROR = "CONFIG_ERROR"
    SIMULATED_VALUE = "SIMULATED_VALUE"
    SENSOR_CALIBRATION = "SENSOR_CALIBRATION"
    UPDATE_EVENT = "UPDATE_EVENT"
    ADVISORY_ALARM = "ADVISORY_ALARM"
    CRITICAL_ALARM = "CRITICAL_ALARM"
    UNACK_UPDATE_EVENT = "UNACK_UPDATE_EVENT"
    UNACK_ADVISORY_ALARM = "UNACK_ADVISORY_ALARM"
    UNACK_CRITICAL_ALARM = "UNACK_CRITICAL_ALARM"
    INIT_FAILSAFE = "INIT_FAILSAFE"
    MAINTENANCE_REQUIRED = "MAINTENANCE_REQUIRED"
    INIT_ACKED = "INIT_ACKED"
    INITREQ = "INITREQ"
    NOT_INVITED = "NOT_INVITED"
    DO_NOT_SELECT = "DO_NOT_SELECT"
    LOCAL_OVERRIDE = "LOCAL_OVERRIDE"


class QualityInput(BaseModel):
    quality: MainQuality
    subStatus: QualitySubStatus | None = None


class AlarmIdentifierInput(BaseModel):
    name: str = Field(min_length=1)
    instanceID: StrictInt = 0


class TagValueInput(BaseModel):
    name: str = Field(min_length=1)
    value: TagValue = None
    timestamp: Timestamp | None = None
    quality: QualityInput | None = None


class LoginInput(BaseModel):
    username: str = Field(min_length=1)
    password: SecretStr = Field(min_length=1)


class BrowseObjectsInput(BaseModel):
    nameFilters: list[str] = Field(default_factory=list)
    objectTypeFilters: list[ObjectType] = Field(default_factory=list)
    baseTypeFilters: list[str] = Field(default_factory=list)
    language: str = DEFAULT_LANGUAGE


class TagValuesInput(BaseModel):
    names: list[str] = Field(min_length=1)
    directRead: StrictBool = False


class LoggedTagValuesInput(BaseModel):
    names: list[str] = Field(min_length=1)
    startTime: Timestamp = EPOCH_TIMESTAMP
    endTime: Timestamp = EPOCH_TIMESTAMP
    maxNumberOfValues: StrictInt = 0
    sortingMode: SortingMode = SortingMode.TIME_ASC
    boundingValuesMode: BoundingValuesMode = BoundingValuesMode.NO_BOUNDING_VALUES

    @model_validator(mode="after")
    def _check_time_window(self) -> "LoggedTagValuesInput":
        has_start = not _is_epoch(self.startTime)
        has_end = not _is_epoch(self.endTime)
        if not (has_start or has_end):
            raise ValueError("At least one of startTime and endTime must be provided.")
        if has_start and has_end:
            return self

        direction = SortingMode.TIME_ASC if has_start else SortingMode.TIME_DESC
        bound = "startTime" if has_start else "endTime"
        if self.maxNumberOfValues <= 0:
            raise ValueError(
                f"maxNumberOfValues must be provided when only {bound} is given."
            )
        if "sortingMode" in self.model_fields_set and self.sortingMode != direction:
            raise ValueError(
                f"sortingMode must be {direction.value} when only {bound} is given."
            )
        self.sortingMode = direction
        return self


class AlarmQueryInput(BaseModel):
    systemNames: list[str] = Field(default_factory=list)
    filterString: str = ""
    filterLanguage: str = DEFAULT_LANGUAGE
    languages: list[str] = Field(default_factory=lambda: [DEFAULT_LANGUAGE])


class LoggedAlarmsInput(AlarmQueryInput):
    startTime: Timestamp = EPOCH_TIMESTAMP
    endTime: Timestamp = EPOCH_TIMESTAMP
    maxNumberOfResults: StrictInt = 0


class WriteTagValuesInput(BaseModel):
    input: list[TagValueInput] = Field(min_length=1)
    timestamp: Timestamp | None = None
    quality: QualityInput | None = None


class AlarmIdentifiersInput(BaseModel):
    input: list[AlarmIdentifierInput] = Field(min_length=1)


def _is_epoch(value: str) -> bool:
    return parse_timestamp(value) == datetime(1970, 1, 1, tzinfo=timezone.utc)
