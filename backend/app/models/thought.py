# thought models — free-form journal notes with mood tags

from pydantic import BaseModel, Field, field_validator

from app.models.common import empty_list_if_none


class ThoughtCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000, description="thought text")
    mood_tags: list[str] = Field(default_factory=list, alias="moodTags")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("mood_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)


class ThoughtUpdate(BaseModel):
    content: str = Field(None, min_length=1, max_length=10000)
    mood_tags: list[str] = Field(None, alias="moodTags")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("mood_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)


class ThoughtResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    content: str
    mood_tags: list[str] = Field(default_factory=list, alias="moodTags")
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("mood_tags", mode="before")
    @classmethod
    def tags_not_null(cls, v):
        return empty_list_if_none(v)
