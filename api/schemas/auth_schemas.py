"""
Auth Schemas - API Layer
Pydantic models for signup / signin
"""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50, description="Display name")
    email: str = Field(..., min_length=3, max_length=254, description="Login email")
    password: str = Field(..., min_length=6, max_length=128, description="Plain password")

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class SigninRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Login email")
    password: str = Field(..., min_length=1, description="Plain password")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v
