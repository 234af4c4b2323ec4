"""Request builders: validated tool parameters to GraphQL requests.

Every builder is a pure function of its parameters. Optional parameters are
already defaulted by the schema, so the builders only decide which variables
the backend operation accepts and resolve the per-item fallbacks of writes.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from wincc_unified_mcp.agent import queries
from wincc_unified_mcp.agent.schemas import (
    AlarmIdentifiersInput,
    AlarmQueryInput,
    BrowseObjectsInput,
    LoggedAlarmsInput,
    LoggedTagValuesInput,
    LoginInput,
    MainQuality,
    TagValuesInput,
    WriteTagValuesInput,
)
from wincc_unified_mcp.types import BackendRequest

DEFAULT_WRITE_QUALITY: dict[str, Any] = {"quality": MainQuality.GOOD_CASCADE.value}

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime the way the runtime prints them: ms precision, `Z`."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_login(params: LoginInput) -> BackendRequest:
    return BackendRequest(
        document=queries.LOGIN_MUTATION,
        variables={
            "username": params.username,
            "password": params.password.get_secret_value(),
        },
    )


def build_browse_objects(params: BrowseObjectsInput) -> BackendRequest:
    return BackendRequest(
        document=queries.BROWSE_QUERY,
        variables=params.model_dump(mode="json"),
    )


def build_tag_values(params: TagValuesInput) -> BackendRequest:
    return BackendRequest(
        document=queries.TAG_VALUES_QUERY,
        variables=params.model_dump(mode="json"),
    )


def build_logged_tag_values(params: LoggedTagValuesInput) -> BackendRequest:
    return BackendRequest(
        document=queries.LOGGED_TAG_VALUES_QUERY,
        variables=params.model_dump(mode="json"),
    )


def build_active_alarms(params: AlarmQueryInput) -> BackendRequest:
    return BackendRequest(
        document=queries.ACTIVE_ALARMS_QUERY,
        variables=params.model_dump(mode="json"),
    )


def build_logged_alarms(params: LoggedAlarmsInput) -> BackendRequest:
    return BackendRequest(
        document=queries.LOGGED_ALARMS_QUERY,
        variables=params.model_dump(mode="json"),
    )


def make_write_tag_values_builder(
    clock: Clock = utc_now,
) -> Callable[[WriteTagValuesInput], BackendRequest]:
    """Bind the write builder to a clock so "now" is testable."""

    def _build(params: WriteTagValuesInput) -> BackendRequest:
        return build_write_tag_values(params, now=clock())

    return _build


def build_write_tag_values(
    params: WriteTagValuesInput, *, now: datetime | None = None
) -> BackendRequest:
    fallback_timestamp = params.timestamp or format_timestamp(now or utc_now())
    fallback_quality = (
        params.quality.model_dump(mode="json", exclude_none=True)
        if params.quality is not None
        else DEFAULT_WRITE_QUALITY
    )

    items = []
    for item in params.input:
        items.append(
            {
                "name": item.name,
                "value": item.value,
                "timestamp": item.timestamp or fallback_timestamp,
                "quality": (
                    item.quality.model_dump(mode="json", exclude_none=True)
                    if item.quality is not None
                    else dict(fallback_quality)
                ),
            }
        )

    variables: dict[str, Any] = {"input": items}
    if params.timestamp is not None:
        variables["timestamp"] = params.timestamp
    if params.quality is not None:
        variables["quality"] = params.quality.model_dump(mode="json", exclude_none=True)
    return BackendRequest(document=queries.WRITE_TAG_VALUES_MUTATION, variables=variables)


def build_acknowledge_alarms(params: AlarmIdentifiersInput) -> BackendRequest:
    return BackendRequest(
        document=queries.ACKNOWLEDGE_ALARMS_MUTATION,
        variables=params.model_dump(mode="json"),
    )


def build_reset_alarms(params: AlarmIdentifiersInput) -> BackendRequest:
    return BackendRequest(
        document=queries.RESET_ALARMS_MUTATION,
        variables=params.model_dump(mode="json"),
    )
