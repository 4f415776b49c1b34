# mood entry models — morning/evening check-ins
# intensity, sleep quality and energy share the 1-5 rating scale

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.common import DATE_PATTERN, check_calendar_date, empty_list_if_none

TimeOfDay = Literal["morning", "evening"]
WeightUnit = Literal["kg", "lbs"]


class MoodEntryCreate(BaseModel):
    """payload for a new mood check-in"""
    date: str = Field(..., pattern=DATE_PATTERN, description="calendar date, YYYY-MM-DD")
    time_of_day: TimeOfDay = Field(..., alias="timeOfDay")
    mood: str = Field(..., min_length=1, max_length=50)
    intensity: int = Field(..., ge=1, le=5, description="mood intensity 1-5")
    hours_slept: Optional[float] = Field(None, gt=0, le=24, alias="hoursSlept")
    sleep_quality: Optional[int] = Field(None, ge=1, le=5, alias="sleepQuality")
    weight: Optional[float] = Field(None, gt=0)
    weight_unit: WeightUnit = Field("kg", alias="weightUnit")
    morning_medication: bool = Field(False, alias="morningMedication")
    evening_medication: bool = Field(False, alias="eveningMedication")
    energy_level: Optional[int] = Field(None, ge=1, le=5, alias="energyLevel")
    reflective_comment: Optional[str] = Field(None, max_length=5000, alias="reflectiveComment")
    overall_day_summary: Optional[str] = Field(None, max_length=5000, alias="overallDaySummary")
    cravings_impulses: bool = Field(False, alias="cravingsImpulses")
    cravings_tags: list[str] = Field(default_factory=list, alias="cravingsTags")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        return check_calendar_date(v)

    @field_validator("cravings_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)


class MoodEntryUpdate(BaseModel):
    """partial update — only supplied fields are validated and applied.
    required fields keep a non-optional type so an explicit null is rejected."""
    date: str = Field(None, pattern=DATE_PATTERN)
    time_of_day: TimeOfDay = Field(None, alias="timeOfDay")
    mood: str = Field(None, min_length=1, max_length=50)
    intensity: int = Field(None, ge=1, le=5)
    hours_slept: Optional[float] = Field(None, gt=0, le=24, alias="hoursSlept")
    sleep_quality: Optional[int] = Field(None, ge=1, le=5, alias="sleepQuality")
    weight: Optional[float] = Field(None, gt=0)
    weight_unit: WeightUnit = Field(None, alias="weightUnit")
    morning_medication: bool = Field(None, alias="morningMedication")
    evening_medication: bool = Field(None, alias="eveningMedication")
    energy_level: Optional[int] = Field(None, ge=1, le=5, alias="energyLevel")
    reflective_comment: Optional[str] = Field(None, max_length=5000, alias="reflectiveComment")
    overall_day_summary: Optional[str] = Field(None, max_length=5000, alias="overallDaySummary")
    cravings_impulses: bool = Field(None, alias="cravingsImpulses")
    cravings_tags: list[str] = Field(None, alias="cravingsTags")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        return check_calendar_date(v)

    @field_validator("cravings_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)


class MoodEntryResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    date: str
    time_of_day: str = Field(..., alias="timeOfDay")
    mood: str
    intensity: int
    hours_slept: Optional[float] = Field(None, alias="hoursSlept")
    sleep_quality: Optional[int] = Field(None, alias="sleepQuality")
    weight: Optional[float] = None
    weight_unit: str = Field("kg", alias="weightUnit")
    morning_medication: bool = Field(False, alias="morningMedication")
    evening_medication: bool = Field(False, alias="eveningMedication")
    energy_level: Optional[int] = Field(None, alias="energyLevel")
    reflective_comment: Optional[str] = Field(None, alias="reflectiveComment")
    overall_day_summary: Optional[str] = Field(None, alias="overallDaySummary")
    cravings_impulses: bool = Field(False, alias="cravingsImpulses")
    cravings_tags: list[str] = Field(default_factory=list, alias="cravingsTags")
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("cravings_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)
