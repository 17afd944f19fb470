"""Argument schemas for the worklog tools."""

import re
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..api.errors import ValidationError
from .models import WorklogEntry

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):(00|15|30|45)$")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _check_date(value: str) -> str:
    if not DATE_PATTERN.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def _check_time(value: str) -> str:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format and in 15-minute increments")
    return value


def _check_time_spent(value: float) -> float:
    if value <= 0:
        raise ValueError("Time spent must be positive")
    if (value * 4) % 1 != 0:
        raise ValueError(
            "Time spent must be in quarter-hour increments (0.25, 0.5, 0.75, 1, 1.25, etc.)"
        )
    return value


def _check_not_empty(value: str) -> str:
    if not value:
        raise ValueError("Value cannot be empty")
    return value


DateStr = Annotated[str, AfterValidator(_check_date)]
TimeStr = Annotated[str, AfterValidator(_check_time)]
TimeSpentHours = Annotated[float, AfterValidator(_check_time_spent)]
NonEmptyStr = Annotated[str, AfterValidator(_check_not_empty)]


class ToolArguments(BaseModel):
    """Base model accepting the camelCase argument names of the tools."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WorklogEntrySchema(ToolArguments):
    issue_key: NonEmptyStr = Field(alias="issueKey")
    time_spent_hours: TimeSpentHours = Field(alias="timeSpentHours")
    date: DateStr
    description: Optional[str] = None
    start_time: Optional[TimeStr] = Field(default=None, alias="startTime")

    def to_entry(self) -> WorklogEntry:
        return WorklogEntry(
            issue_key=self.issue_key,
            time_spent_hours=self.time_spent_hours,
            date=self.date,
            description=self.description,
            start_time=self.start_time,
        )


class RetrieveWorklogsArgs(ToolArguments):
    start_date: DateStr = Field(alias="startDate")
    end_date: DateStr = Field(alias="endDate")


class CreateWorklogArgs(ToolArguments):
    issue_key: NonEmptyStr = Field(alias="issueKey")
    time_spent_hours: TimeSpentHours = Field(alias="timeSpentHours")
    date: DateStr
    description: str = ""
    start_time: Optional[TimeStr] = Field(default=None, alias="startTime")


class BulkCreateWorklogsArgs(ToolArguments):
    worklog_entries: List[WorklogEntrySchema] = Field(alias="worklogEntries")

    @field_validator("worklog_entries")
    @classmethod
    def _require_entries(cls, value: List[WorklogEntrySchema]) -> List[WorklogEntrySchema]:
        if not value:
            raise ValueError("At least one worklog entry is required")
        return value

    def to_entries(self) -> List[WorklogEntry]:
        return [entry.to_entry() for entry in self.worklog_entries]


class EditWorklogArgs(ToolArguments):
    worklog_id: NonEmptyStr = Field(alias="worklogId")
    time_spent_hours: TimeSpentHours = Field(alias="timeSpentHours")
    description: Optional[str] = None
    date: Optional[DateStr] = None
    start_time: Optional[TimeStr] = Field(default=None, alias="startTime")


class DeleteWorklogArgs(ToolArguments):
    worklog_id: NonEmptyStr = Field(alias="worklogId")


def parse_arguments(schema: Type[ModelT], arguments: Dict[str, Any]) -> ModelT:
    """Validate tool arguments against a schema.

    Args:
        schema: Pydantic model class to validate with
        arguments: Raw arguments keyed by their camelCase names

    Returns:
        Validated model instance

    Raises:
        ValidationError: Naming the first failing field
    """
    try:
        return schema.model_validate(arguments)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        raise ValidationError(message, field=location or None) from e


def validate_issue_identifier(value: Union[str, int]) -> str:
    """Validate a Jira issue id or key.

    Accepts a non-empty string or a positive integer.

    Returns:
        The identifier as a string
    """
    if isinstance(value, bool):
        raise ValidationError("Issue identifier must be a string or integer")
    if isinstance(value, int):
        if value <= 0:
            raise ValidationError("Issue ID must be a positive integer")
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    raise ValidationError("Issue ID cannot be empty")
