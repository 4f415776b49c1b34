# trigger event models — situation, emotions, response and consequences
# durationDays is derived from the dates on the way out, never stored

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.models.common import DATE_PATTERN, check_calendar_date, empty_list_if_none

END_BEFORE_START = "End date must be on or after the start date"


def check_date_order(start_date: Optional[str], end_date: Optional[str]) -> Optional[str]:
    """returns an error message when an end date precedes its start date"""
    if start_date and end_date and end_date < start_date:
        return END_BEFORE_START
    return None


class TriggerEventCreate(BaseModel):
    event_situation: str = Field(..., min_length=1, max_length=2000, alias="eventSituation")
    emotions: list[str] = Field(default_factory=list)
    action_taken: str = Field(..., min_length=1, max_length=2000, alias="actionTaken")
    consequences: list[str] = Field(default_factory=list)
    start_date: str = Field(..., pattern=DATE_PATTERN, alias="startDate")
    end_date: Optional[str] = Field(None, pattern=DATE_PATTERN, alias="endDate", description="null while ongoing")
    remind_later: bool = Field(False, alias="remindLater")
    notes: Optional[str] = Field(None, max_length=5000)

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("emotions", "consequences", mode="before")
    @classmethod
    def lists_not_null(cls, v):
        return empty_list_if_none(v)

    @field_validator("start_date")
    @classmethod
    def check_start(cls, v):
        return check_calendar_date(v)

    @field_validator("end_date")
    @classmethod
    def check_end(cls, v, info: ValidationInfo):
        check_calendar_date(v)
        problem = check_date_order(info.data.get("start_date"), v)
        if problem:
            raise ValueError(problem)
        return v


class TriggerEventUpdate(BaseModel):
    """partial update; date order against stored values is checked by the router"""
    event_situation: str = Field(None, min_length=1, max_length=2000, alias="eventSituation")
    emotions: list[str] = Field(None)
    action_taken: str = Field(None, min_length=1, max_length=2000, alias="actionTaken")
    consequences: list[str] = Field(None)
    start_date: str = Field(None, pattern=DATE_PATTERN, alias="startDate")
    end_date: Optional[str] = Field(None, pattern=DATE_PATTERN, alias="endDate")
    remind_later: bool = Field(None, alias="remindLater")
    notes: Optional[str] = Field(None, max_length=5000)

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("emotions", "consequences", mode="before")
    @classmethod
    def lists_not_null(cls, v):
        return empty_list_if_none(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def check_dates(cls, v):
        return check_calendar_date(v)


class TriggerEventResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    event_situation: str = Field(..., alias="eventSituation")
    emotions: list[str] = Field(default_factory=list)
    action_taken: str = Field(..., alias="actionTaken")
    consequences: list[str] = Field(default_factory=list)
    start_date: str = Field(..., alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    duration_days: Optional[int] = Field(None, alias="durationDays")
    remind_later: bool = Field(False, alias="remindLater")
    notes: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("emotions", "consequences", mode="before")
    @classmethod
    def lists_not_null(cls, v):
        return empty_list_if_none(v)


def duration_days(start_date: Optional[str], end_date: Optional[str]) -> Optional[int]:
    """whole days between start and end; none while the event is ongoing"""
    if not start_date or not end_date:
        return None
    return (date.fromisoformat(end_date) - date.fromisoformat(start_date)).days
