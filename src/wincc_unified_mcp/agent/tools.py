"""Built-in WinCC Unified tools and their registration."""

from __future__ import annotations

from wincc_unified_mcp.agent import builders
from wincc_unified_mcp.agent.builders import Clock, utc_now
from wincc_unified_mcp.agent.mapping import map_logged_tag_values, passthrough
from wincc_unified_mcp.agent.registry import ToolRegistry, ToolSpec
from wincc_unified_mcp.agent.schemas import (
    AlarmIdentifiersInput,
    AlarmQueryInput,
    BrowseObjectsInput,
    LoggedAlarmsInput,
    LoggedTagValuesInput,
    LoginInput,
    TagValuesInput,
    WriteTagValuesInput,
)
from wincc_unified_mcp.backend.session import SessionManager

_NAME_FILTER_RULES = """
The nameFilters parameter can be used to search for objects either with exact matching,
or with wildcards (*, ?). It can filter on HmiObject level, on specific hierarchy levels on
HmiElement level, or on Subelement level: "*" matches any number of characters, "*::*"
matches anything on object level, "*.*" matches elements on the first hierarchy level only
(it matches MySystem::MyStructuredTag.ParentElement but not
MySystem::MyStructuredTag.ParentElement.ChildElement), "*.**" matches elements on any
hierarchy level and "*.**:*" matches any subelement. To get all elements and subelements of
a tag provide both "MySystem::MyExampleTag.**" and "MySystem::MyExampleTag.**:*" (this
still excludes MyExampleTag itself). To match anything, omit the parameter, leave it empty
or pass only "*".
""".strip()

_CQL_FILTER_RULES = """
The filterString parameter must be a valid ChromQueryLanguage string (based on, and very
similar to SQL), more specifically its WHERE part without the WHERE keyword. Wildcards
(* for any number of characters, ? for exactly one), comparison operators, parentheses and
the logical operators AND / OR are supported. If the filter compares multilingual texts,
filterLanguage decides which language is compared. Multilingual texts are returned as
arrays in the order of the languages parameter. All languages use ISO codes such as
"en-US" or "de-DE".
""".strip()

LOGIN_DESCRIPTION = """
Logs a user in to WinCC Unified using username and password and stores the session token
for subsequent requests. This is optional when the server runs with a service account,
which logs on automatically and refreshes its session every minute.
""".strip()

BROWSE_OBJECTS_DESCRIPTION = f"""
Queries tags, elements, types, alarms, logging tags and anything else that has a configured
name. Items inside one filter parameter are combined with OR, different filter parameters
are combined with AND.

{_NAME_FILTER_RULES}

baseTypeFilters filters by type name, e.g. "MySystem::MyStructureTagType", and returns all
instances of those types; it does not support wildcards. objectTypeFilters restricts the
result to predefined HmiObjectTypes and their subtypes (TAG also returns SIMPLETAG and
STRUCTURETAG). language selects the display name language.

All parameters default to empty filters and language "en-US"; explicit nulls are rejected.
Incompatible filters return nothing, e.g. objectType ALARM with nameFilter "*.*", because
alarms are subelements.

Errors:
  0 - Success
  1 - Generic error
  2 - Cannot resolve provided name
  3 - Argument error
""".strip()

GET_TAG_VALUES_DESCRIPTION = """
Queries current tag values from WinCC Unified for the provided list of names. If directRead
is true, values are read directly from the PLC instead of the runtime cache. Every result
carries value, timestamp and quality, or a per-tag error object.

Errors:
  0 - Success
  1 - Generic error
  2 - Cannot resolve provided name
  3 - Argument error
""".strip()

GET_LOGGED_TAG_VALUES_DESCRIPTION = """
Queries logged tag values from the database and returns them as a text table with the
columns Logging Tag Name, Timestamp and Value. Each name must be a LoggingTag name or a Tag
name.

At least one of startTime and endTime must be provided. If only one of them is provided,
maxNumberOfValues must be provided too and the sorting mode follows the search direction:
TIME_ASC when only startTime is given, TIME_DESC when only endTime is given. With both
bounds the caller may choose the sortingMode (default TIME_ASC). maxNumberOfValues is
applied in sorting order, so TIME_DESC with 100 returns at most 100 values before endTime.

boundingValuesMode decides whether the values just outside the interval are returned too
(LEFT, RIGHT, LEFTRIGHT); such values carry the BOUNDING flag. Default NO_BOUNDING_VALUES.

Errors:
  0 - Success
  1 - Generic error
  2 - Cannot resolve provided name
  3 - Argument error
""".strip()

GET_ACTIVE_ALARMS_DESCRIPTION = f"""
Queries active alarms from the provided systems (all systems when systemNames is empty).

{_CQL_FILTER_RULES}

Errors:
  0 - Success
  301 - Syntax error in query string
  302 - At least one of the requested languages is invalid
  303 - The provided filter language is invalid
""".strip()

GET_LOGGED_ALARMS_DESCRIPTION = f"""
Queries logged alarms from the storage system.

{_CQL_FILTER_RULES}
Languages must also be valid logging languages.

startTime and endTime bound the read: only alarms whose ModificationTime is greater than
startTime and less than endTime are returned. maxNumberOfResults restricts the number of
returned entries.

Errors:
  0 - Success
  301 - Syntax error in query string
  302 - At least one of the requested languages is invalid (or not logged)
  303 - The provided filter language is invalid (or not logged)
""".strip()

WRITE_TAG_VALUES_DESCRIPTION = """
Updates tags based on the provided TagValueInput list. Values must be a string, number,
boolean or null. An item without a timestamp uses the request timestamp, or the current
time when that is not set either (sample: '2022-04-27T01:30:32.506Z'). An item without a
quality uses the request quality, or GOOD quality when that is not set either.

Errors:
  0 - Success
  2 - Cannot resolve provided name
  201 - Cannot convert provided value to data type
  202 - Only leaf elements of a Structure Tag can be addressed
""".strip()

_ALARM_COMMAND_DESCRIPTION = """
{verb} one or more alarms. Each alarm identifier needs the name of the configured alarm and
optionally an instanceID identifying one active instance. If the instanceID is 0 or not
provided, all instances of the alarm are affected. If an alarm requires single
{noun}, only one item can be provided at a time, otherwise the request is rejected.

Errors:
  0 - Success
  2 - Cannot resolve provided name
  304 - Invalid object state
  305 - The alarm cannot be read / acknowledged / reset in current state
  x - Alarm instance does not exist (x is the instanceID, or an indicator for the alarm
      name if no instanceID was provided)
""".strip()

ACKNOWLEDGE_ALARMS_DESCRIPTION = _ALARM_COMMAND_DESCRIPTION.format(
    verb="Acknowledge", noun="acknowledgement"
)
RESET_ALARMS_DESCRIPTION = _ALARM_COMMAND_DESCRIPTION.format(verb="Reset", noun="reset")


def register_builtin_tools(
    registry: ToolRegistry,
    sessions: SessionManager,
    *,
    clock: Clock = utc_now,
) -> None:
    """Register the nine WinCC Unified tools.

    Tools:
    - `login`: interactive logon that replaces the session token.
    - `browse-objects`: name/type based object discovery.
    - `get-tag-values` / `get-logged-tag-values`: live and historical values.
    - `get-active-alarms` / `get-logged-alarms`: alarm queries.
    - `write-tag-values`, `acknowledge-alarms`, `reset-alarms`: mutations.
    """

    async def _login(params: LoginInput) -> str:
        login = await sessions.logon(params.username, params.password.get_secret_value())
        return f"Login successful for user '{login.user.name}'. Session token stored."

    registry.register(
        ToolSpec(
            name="login",
            description=LOGIN_DESCRIPTION,
            args_schema=LoginInput,
            handler=_login,
            tags=["session"],
        )
    )
    registry.register(
        ToolSpec(
            name="browse-objects",
            description=BROWSE_OBJECTS_DESCRIPTION,
            args_schema=BrowseObjectsInput,
            build=builders.build_browse_objects,
            map=passthrough("browse"),
            tags=["read"],
        )
    )
    registry.register(
        ToolSpec(
            name="get-tag-values",
            description=GET_TAG_VALUES_DESCRIPTION,
            args_schema=TagValuesInput,
            build=builders.build_tag_values,
            map=passthrough("tagValues"),
            tags=["read", "tags"],
        )
    )
    registry.register(
        ToolSpec(
            name="get-logged-tag-values",
            description=GET_LOGGED_TAG_VALUES_DESCRIPTION,
            args_schema=LoggedTagValuesInput,
            build=builders.build_logged_tag_values,
            map=map_logged_tag_values,
            tags=["read", "tags", "history"],
        )
    )
    registry.register(
        ToolSpec(
            name="get-active-alarms",
            description=GET_ACTIVE_ALARMS_DESCRIPTION,
            args_schema=AlarmQueryInput,
            build=builders.build_active_alarms,
            map=passthrough("activeAlarms", indent=2, default=[]),
            tags=["read", "alarms"],
        )
    )
    registry.register(
        ToolSpec(
            name="get-logged-alarms",
            description=GET_LOGGED_ALARMS_DESCRIPTION,
            args_schema=LoggedAlarmsInput,
            build=builders.build_logged_alarms,
            map=passthrough("loggedAlarms", indent=2, default=[]),
            tags=["read", "alarms", "history"],
        )
    )
    registry.register(
        ToolSpec(
            name="write-tag-values",
            description=WRITE_TAG_VALUES_DESCRIPTION,
            args_schema=WriteTagValuesInput,
            build=builders.make_write_tag_values_builder(clock),
            map=passthrough("writeTagValues", indent=2),
            tags=["write", "tags"],
        )
    )
    registry.register(
        ToolSpec(
            name="acknowledge-alarms",
            description=ACKNOWLEDGE_ALARMS_DESCRIPTION,
            args_schema=AlarmIdentifiersInput,
            build=builders.build_acknowledge_alarms,
            map=passthrough("acknowledgeAlarms", indent=2),
            tags=["write", "alarms"],
        )
    )
    registry.register(
        ToolSpec(
            name="reset-alarms",
            description=RESET_ALARMS_DESCRIPTION,
            args_schema=AlarmIdentifiersInput,
            build=builders.build_reset_alarms,
            map=passthrough("resetAlarms", indent=2),
            tags=["write", "alarms"],
        )
    )
