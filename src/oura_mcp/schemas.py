from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mcp.types import Tool
from pydantic import BaseModel, ConfigDict, Field, ValidationError


START_DATE_DESCRIPTION = "Start date in YYYY-MM-DD format"
END_DATE_DESCRIPTION = "Optional end date in YYYY-MM-DD format"


class DateRangeArgs(BaseModel):
    """Validated arguments shared by every Oura tool."""

    model_config = ConfigDict(coerce_numbers_to_str=True, frozen=True)

    start_date: str = Field(description=START_DATE_DESCRIPTION)
    end_date: Optional[str] = Field(default=None, description=END_DATE_DESCRIPTION)


def validation_messages(exc: ValidationError) -> List[str]:
    """One message per violated constraint, in pydantic's reporting order."""
    out = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        out.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return out


def parse_date_range(arguments: Mapping[str, Any] | None) -> DateRangeArgs:
    """Raises pydantic.ValidationError carrying every failure."""
    return DateRangeArgs.model_validate({} if arguments is None else arguments)


DATE_RANGE_INPUT_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "start_date": {
            "type": "string",
            "description": START_DATE_DESCRIPTION,
        },
        "end_date": {
            "type": "string",
            "description": END_DATE_DESCRIPTION,
        },
    },
    "required": ["start_date"],
}


SLEEP_TOOL = "oura_sleep"
READINESS_TOOL = "oura_readiness"
ACTIVITY_TOOL = "oura_activity"
HEART_RATE_TOOL = "oura_heartrate"


TOOLS: tuple[Tool, ...] = (
    Tool(
        name=SLEEP_TOOL,
        description="Get daily sleep data including sleep score, sleep stages (REM, deep, light), and sleep duration",
        inputSchema=DATE_RANGE_INPUT_SCHEMA,
    ),
    Tool(
        name=READINESS_TOOL,
        description="Get daily readiness score, HRV balance, resting heart rate, and body temperature",
        inputSchema=DATE_RANGE_INPUT_SCHEMA,
    ),
    Tool(
        name=ACTIVITY_TOOL,
        description="Get daily activity data including steps, calories, and activity score",
        inputSchema=DATE_RANGE_INPUT_SCHEMA,
    ),
    Tool(
        name=HEART_RATE_TOOL,
        description="Get heart rate data over time",
        inputSchema=DATE_RANGE_INPUT_SCHEMA,
    ),
)
