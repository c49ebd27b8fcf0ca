"""Pydantic schemas for the membership API.

Field names are snake_case in Python and camelCase on the wire; request
bodies accept either spelling.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import LiveModeEnum, RoleEnum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TokenData(BaseModel):
    """Identity resolved from a bearer token for the duration of one request."""

    id: int
    username: str
    role: RoleEnum


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6)
    contact_number: str = Field(..., min_length=1, max_length=50)
    live_mode: LiveModeEnum


class UserSummary(CamelModel):
    id: int
    username: str
    role: RoleEnum


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6)
    contact_number: str = Field(..., min_length=1, max_length=50)
    live_mode: LiveModeEnum
    role: Optional[RoleEnum] = None
    watch_live_enabled: Optional[bool] = None
    submit_feedback_enabled: Optional[bool] = None
    submit_accountability_enabled: Optional[bool] = None
    incharge_id: Optional[int] = None


class UserUpdate(CamelModel):
    password: Optional[str] = Field(None, min_length=6)
    contact_number: Optional[str] = Field(None, max_length=50)
    live_mode: Optional[LiveModeEnum] = None
    role: Optional[RoleEnum] = None
    watch_live_enabled: Optional[bool] = None
    submit_feedback_enabled: Optional[bool] = None
    submit_accountability_enabled: Optional[bool] = None
    incharge_id: Optional[int] = None


class ProfileUpdate(CamelModel):
    password: Optional[str] = Field(None, min_length=6)
    contact_number: Optional[str] = Field(None, max_length=50)
    live_mode: Optional[LiveModeEnum] = None


class UserRead(CamelModel):
    id: int
    username: str
    contact_number: str
    live_mode: LiveModeEnum
    role: RoleEnum
    watch_live_enabled: bool
    submit_feedback_enabled: bool
    submit_accountability_enabled: bool
    incharge_id: Optional[int] = None
    incharge: Optional[UserSummary] = None
    created_at: datetime


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class RecordCreate(CamelModel):
    content: str = Field(..., min_length=1)


class RecordRead(CamelModel):
    id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary


class ImportResult(BaseModel):
    imported: int
    errors: List[str]
