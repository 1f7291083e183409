"""
Authentication-related Pydantic schemas.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import CamelModel
from ..models.admin import AdminRole


class AdminLogin(BaseModel):
    """Schema for admin login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class AdminProfile(CamelModel):
    """Schema for admin profile information; never carries the password hash."""
    id: UUID
    name: str
    email: str
    role: AdminRole
    is_active: bool
    created_at: datetime


class AdminData(BaseModel):
    admin: AdminProfile


class LoginResponse(BaseModel):
    """Schema for a successful login."""
    status: Literal["success"] = "success"
    token: str
    data: AdminData


class AdminResponse(BaseModel):
    """Schema for the current-admin endpoint."""
    status: Literal["success"] = "success"
    data: AdminData
