"""
Booking and Technician models for the repair booking workflow
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .domain.bookings.status import DEFAULT_PICKUP_OPTION, DEFAULT_STATUS
from .domain.bookings.tracking import generate_tracking_id


class Technician(Base):
    __tablename__ = "technicians"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="assigned_technician")


class Booking(Base):
    """A device repair booking from intake through completion"""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # Customer-facing identifier, e.g. BMR-LZ3K9Q1A-7GX2QD
    tracking_id = Column(
        String(40), unique=True, nullable=False, index=True, default=generate_tracking_id
    )

    # Repair request
    brand = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    service = Column(String(255), nullable=False)
    selected_issues = Column(JSON, nullable=False, default=list)
    issue_one = Column(Text, nullable=False, default="")
    issue_two = Column(Text, nullable=False, default="")

    # Customer identity; phone doubles as the secret for public tracking
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=False)

    # Address and pickup details (derived, see domain.bookings.location)
    pickup_option = Column(String(100), nullable=False, default=DEFAULT_PICKUP_OPTION)
    address = Column(Text, nullable=False)
    location = Column(Text, nullable=False, default="")
    pickup_address = Column(Text, nullable=False, default="")
    pickup_phone = Column(String(50), nullable=False, default="")
    pickup_map_url = Column(Text, nullable=False, default="")

    # Pending → Assigned → Pickup Started → In Service → In Progress → Completed | Cancelled
    status = Column(String(50), nullable=False, default=DEFAULT_STATUS, index=True)

    # Denormalized technician snapshot, cleared when the technician is deleted
    technician_id = Column(
        Integer, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True, index=True
    )
    technician = Column(String(255), nullable=False, default="")
    technician_name = Column(String(255), nullable=False, default="")
    technician_phone = Column(String(50), nullable=False, default="")

    # Last reported technician position
    live_lat = Column(Float, nullable=True)
    live_lng = Column(Float, nullable=True)
    live_updated_at = Column(DateTime, nullable=True)
    map_url = Column(Text, nullable=False, default="")

    admin_note = Column(Text, nullable=False, default="")

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assigned_technician = relationship("Technician", back_populates="bookings")
