# medication models

from typing import Optional

from pydantic import BaseModel, Field


class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    dosage: Optional[str] = Field(None, max_length=200, description="e.g. 50mg")
    schedule: Optional[str] = Field(None, max_length=200, description="e.g. twice daily")

    model_config = {"str_strip_whitespace": True}


class MedicationUpdate(BaseModel):
    name: str = Field(None, min_length=1, max_length=200)
    dosage: Optional[str] = Field(None, max_length=200)
    schedule: Optional[str] = Field(None, max_length=200)

    model_config = {"str_strip_whitespace": True}


class MedicationResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    name: str
    dosage: Optional[str] = None
    schedule: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}
