"""Technician domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_email, clean_phone, clean_string


class TechnicianCreate(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    isActive: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return clean_string(v)

    @field_validator("phone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email_address(cls, v):
        return clean_email(v)


class TechnicianUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return clean_string(v) if isinstance(v, str) else None

    @field_validator("phone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v) if v is not None else None

    @field_validator("email", mode="before")
    @classmethod
    def clean_email_address(cls, v):
        return clean_email(v) if isinstance(v, str) else None


class TechnicianResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: str
    isActive: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, technician) -> "TechnicianResponse":
        return cls(
            id=technician.id,
            name=technician.name,
            phone=technician.phone,
            email=technician.email or "",
            isActive=bool(technician.is_active),
            createdAt=technician.created_at,
            updatedAt=technician.updated_at,
        )
