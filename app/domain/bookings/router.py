"""Booking router - FastAPI endpoints for the repair booking lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from ...config import NOTIFICATION_TIMEOUT_SECONDS
from ...database import get_db
from ...services.notification_service import (
    BookingNotifier,
    dispatch_status_notification,
    notify_booking_created,
)
from .schemas import (
    AssignTechnicianRequest,
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    LiveLocationUpdateRequest,
    StatusUpdateRequest,
    TrackBookingRequest,
)
from .service import BookingMutation, BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def get_notifier(request: Request) -> BookingNotifier:
    """The process-wide notifier built in the app lifespan"""
    return request.app.state.notifier


def respond_and_notify(
    mutation: BookingMutation,
    background_tasks: BackgroundTasks,
    notifier: BookingNotifier,
    context: str,
) -> BookingResponse:
    """Build the response and, if something customer-visible changed, queue the status message"""
    response = BookingResponse.from_model(mutation.booking)
    if mutation.should_notify:
        logger.info(
            f"{context}: notifying customer of booking {response.id} "
            f"({', '.join(mutation.changes)})"
        )
        background_tasks.add_task(
            dispatch_status_notification,
            notifier,
            response,
            mutation.previous_status,
            context,
        )
    return response


# ============================================================================
# INTAKE AND LOOKUP
# ============================================================================


@router.post("", status_code=201)
async def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(get_notifier),
):
    """Create a booking and report how the confirmation notifications went"""
    booking = service.create_booking(data)
    response = BookingResponse.from_model(booking)
    notification = await notify_booking_created(notifier, response, NOTIFICATION_TIMEOUT_SECONDS)
    return {**response.model_dump(), "notification": notification.model_dump()}


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    status: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings, latest first"""
    return [BookingResponse.from_model(b) for b in service.list_bookings(status)]


@router.post("/track", response_model=BookingResponse)
async def track_booking(
    data: TrackBookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Public tracking by tracking ID and phone"""
    return BookingResponse.from_model(service.track_booking(data))


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_model(service.get_booking(booking_id))


# ============================================================================
# ADMIN UPDATES
# ============================================================================


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: int,
    data: BookingUpdate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(get_notifier),
):
    mutation = service.update_booking(booking_id, data)
    return respond_and_notify(mutation, background_tasks, notifier, "Booking update")


@router.put("/{booking_id}/assign-technician", response_model=BookingResponse)
async def assign_technician(
    booking_id: int,
    data: AssignTechnicianRequest,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(get_notifier),
):
    mutation = service.assign_technician(booking_id, data)
    return respond_and_notify(mutation, background_tasks, notifier, "Booking assign")


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(get_notifier),
):
    mutation = service.update_status(booking_id, data)
    return respond_and_notify(mutation, background_tasks, notifier, "Booking status")


@router.put("/{booking_id}/live-location", response_model=BookingResponse)
async def update_live_location(
    booking_id: int,
    data: LiveLocationUpdateRequest,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(get_notifier),
):
    mutation = service.update_live_location(booking_id, data)
    return respond_and_notify(mutation, background_tasks, notifier, "Booking live-location")


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    return service.delete_booking(booking_id)
