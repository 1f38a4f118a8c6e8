"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ...shared.validators import (
    clean_email,
    clean_phone,
    clean_string,
    clean_string_list,
    to_number_or_null,
)

# Fields of the general update endpoint that only accept string values;
# anything else (including null) is treated as if the field was omitted.
PATCH_STRING_FIELDS = (
    "name",
    "phone",
    "email",
    "address",
    "location",
    "pickupAddress",
    "pickupPhone",
    "service",
    "status",
    "pickupOption",
    "technician",
    "technicianName",
    "technicianPhone",
    "adminNote",
    "brand",
    "model",
    "issueOne",
    "issueTwo",
    "mapUrl",
)

TECHNICIAN_FIELDS = ("technician", "technicianName", "technicianPhone", "technicianId")


def _optional_string(value: Any) -> Optional[str]:
    return clean_string(value) if isinstance(value, str) else None


def _technician_id(value: Any) -> Optional[str]:
    return clean_phone(value) or None


class LiveLocationInput(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def parse_coordinate(cls, v):
        return to_number_or_null(v)


def _live_location_input(value: Any) -> Optional[dict]:
    return value if isinstance(value, dict) else None


class CoordinatesMixin(BaseModel):
    """Accepts coordinates either top-level or nested under liveLocation"""

    lat: Optional[float] = None
    lng: Optional[float] = None
    liveLocation: Optional[LiveLocationInput] = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def parse_coordinate(cls, v):
        return to_number_or_null(v)

    @field_validator("liveLocation", mode="before")
    @classmethod
    def parse_live_location(cls, v):
        return _live_location_input(v)

    def coordinates(self, nested_first: bool = True) -> tuple[Optional[float], Optional[float]]:
        """Resolve (lat, lng), preferring the nested or top-level value per endpoint"""
        nested = self.liveLocation or LiveLocationInput()
        if nested_first:
            lat = nested.lat if nested.lat is not None else self.lat
            lng = nested.lng if nested.lng is not None else self.lng
        else:
            lat = self.lat if self.lat is not None else nested.lat
            lng = self.lng if self.lng is not None else nested.lng
        return lat, lng


class BookingCreate(CoordinatesMixin):
    """Schema for booking intake"""

    brand: str = ""
    model: str = ""
    service: str = ""
    selectedIssues: list[str] = []
    issueOne: str = ""
    issueTwo: str = ""
    name: str = ""
    phone: str = ""
    email: str = ""
    pickupOption: str = ""
    address: str = ""
    location: str = ""
    pickupAddress: str = ""
    pickupPhone: str = ""
    status: str = ""
    technician: str = ""
    technicianName: str = ""
    technicianPhone: str = ""
    adminNote: str = ""
    mapUrl: str = ""

    model_config = ConfigDict(protected_namespaces=())

    @field_validator(
        "brand",
        "model",
        "service",
        "issueOne",
        "issueTwo",
        "name",
        "pickupOption",
        "address",
        "location",
        "pickupAddress",
        "status",
        "technician",
        "technicianName",
        "adminNote",
        "mapUrl",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v):
        return clean_string(v)

    @field_validator("phone", "pickupPhone", "technicianPhone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email_address(cls, v):
        return clean_email(v)

    @field_validator("selectedIssues", mode="before")
    @classmethod
    def clean_issues(cls, v):
        return clean_string_list(v)


class BookingUpdate(CoordinatesMixin):
    """
    Schema for partial booking updates.

    A field listed in ``model_fields_set`` was present in the request and is
    applied (an empty string clears it); any other field is left unchanged.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None
    pickupAddress: Optional[str] = None
    pickupPhone: Optional[str] = None
    service: Optional[str] = None
    status: Optional[str] = None
    pickupOption: Optional[str] = None
    technician: Optional[str] = None
    technicianName: Optional[str] = None
    technicianPhone: Optional[str] = None
    adminNote: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    issueOne: Optional[str] = None
    issueTwo: Optional[str] = None
    mapUrl: Optional[str] = None
    selectedIssues: Optional[list[str]] = None
    technicianId: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())

    @model_validator(mode="before")
    @classmethod
    def drop_non_string_fields(cls, data):
        if not isinstance(data, dict):
            return data
        cleaned = {
            key: value
            for key, value in data.items()
            if key not in PATCH_STRING_FIELDS or isinstance(value, str)
        }
        if "selectedIssues" in cleaned and not isinstance(cleaned["selectedIssues"], list):
            del cleaned["selectedIssues"]
        return cleaned

    @field_validator(
        "name",
        "address",
        "location",
        "pickupAddress",
        "service",
        "status",
        "pickupOption",
        "technician",
        "technicianName",
        "adminNote",
        "brand",
        "model",
        "issueOne",
        "issueTwo",
        "mapUrl",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v):
        return clean_string(v)

    @field_validator("phone", "pickupPhone", "technicianPhone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email_address(cls, v):
        return clean_email(v)

    @field_validator("selectedIssues", mode="before")
    @classmethod
    def clean_issues(cls, v):
        return clean_string_list(v)

    @field_validator("technicianId", mode="before")
    @classmethod
    def clean_technician_id(cls, v):
        return _technician_id(v)

    def provided(self) -> set[str]:
        return set(self.model_fields_set)


class AssignTechnicianRequest(BaseModel):
    technicianId: Optional[str] = None
    technicianName: str = ""
    technician: str = ""
    technicianPhone: str = ""
    status: str = ""

    @field_validator("technicianId", mode="before")
    @classmethod
    def clean_technician_id(cls, v):
        return _technician_id(v)

    @field_validator("technicianName", "technician", "status", mode="before")
    @classmethod
    def clean_text(cls, v):
        return clean_string(v)

    @field_validator("technicianPhone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v)


class StatusUpdateRequest(BaseModel):
    status: str = ""
    # None means the note was not part of the request
    adminNote: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, v):
        return clean_string(v)

    @field_validator("adminNote", mode="before")
    @classmethod
    def clean_admin_note(cls, v):
        return _optional_string(v)


class LiveLocationUpdateRequest(CoordinatesMixin):
    status: str = ""
    adminNote: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, v):
        return clean_string(v)

    @field_validator("adminNote", mode="before")
    @classmethod
    def clean_admin_note(cls, v):
        return _optional_string(v)


class TrackBookingRequest(BaseModel):
    trackingId: str = ""
    phone: str = ""

    @field_validator("trackingId", mode="before")
    @classmethod
    def clean_tracking_id(cls, v):
        return clean_string(v)

    @field_validator("phone", mode="before")
    @classmethod
    def clean_phone_number(cls, v):
        return clean_phone(v)


class LiveLocationResponse(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    updatedAt: Optional[datetime] = None


class BookingResponse(BaseModel):
    """Schema for booking responses; also the snapshot handed to notifications"""

    id: int
    trackingId: str
    brand: str
    model: str
    service: str
    selectedIssues: list[str]
    issueOne: str
    issueTwo: str
    name: str
    phone: str
    email: str
    pickupOption: str
    address: str
    location: str
    pickupAddress: str
    pickupPhone: str
    pickupMapUrl: str
    status: str
    technicianId: Optional[int] = None
    technician: str
    technicianName: str
    technicianPhone: str
    liveLocation: LiveLocationResponse
    mapUrl: str
    adminNote: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = ConfigDict(protected_namespaces=(), frozen=True)

    @classmethod
    def from_model(cls, booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            trackingId=booking.tracking_id,
            brand=booking.brand,
            model=booking.model,
            service=booking.service,
            selectedIssues=list(booking.selected_issues or []),
            issueOne=booking.issue_one or "",
            issueTwo=booking.issue_two or "",
            name=booking.name,
            phone=booking.phone,
            email=booking.email,
            pickupOption=booking.pickup_option,
            address=booking.address,
            location=booking.location or "",
            pickupAddress=booking.pickup_address or "",
            pickupPhone=booking.pickup_phone or "",
            pickupMapUrl=booking.pickup_map_url or "",
            status=booking.status,
            technicianId=booking.technician_id,
            technician=booking.technician or "",
            technicianName=booking.technician_name or "",
            technicianPhone=booking.technician_phone or "",
            liveLocation=LiveLocationResponse(
                lat=booking.live_lat,
                lng=booking.live_lng,
                updatedAt=booking.live_updated_at,
            ),
            mapUrl=booking.map_url or "",
            adminNote=booking.admin_note or "",
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
        )
