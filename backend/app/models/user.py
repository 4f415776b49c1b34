# user models — signup, login and public user schemas

from pydantic import BaseModel, EmailStr, Field, field_validator


# auth

class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="display name")
    email: EmailStr = Field(..., description="user email address")
    password: str = Field(..., min_length=6, max_length=128, description="plaintext password (min 6 chars)")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        # passwords are taken verbatim, only the name is trimmed
        return v.strip() if isinstance(v, str) else v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# user responses

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


class AuthResponse(BaseModel):
    """public user view plus a fresh bearer token"""
    id: int
    name: str
    email: str
    token: str
