"""Technician router - FastAPI endpoints for the technician registry"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import TechnicianCreate, TechnicianResponse, TechnicianUpdate
from .service import TechnicianService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/technicians", tags=["Technicians"])


def get_technician_service(db: Session = Depends(get_db)) -> TechnicianService:
    """Dependency injection for TechnicianService"""
    return TechnicianService(db)


@router.get("", response_model=list[TechnicianResponse])
async def list_technicians(
    active: bool = Query(True),
    service: TechnicianService = Depends(get_technician_service),
):
    """List technicians sorted by name; active ones only unless active=false"""
    return [TechnicianResponse.from_model(t) for t in service.list_technicians(active)]


@router.post("", response_model=TechnicianResponse, status_code=201)
async def create_technician(
    data: TechnicianCreate,
    service: TechnicianService = Depends(get_technician_service),
):
    return TechnicianResponse.from_model(service.create_technician(data))


@router.put("/{technician_id}", response_model=TechnicianResponse)
async def update_technician(
    technician_id: int,
    data: TechnicianUpdate,
    service: TechnicianService = Depends(get_technician_service),
):
    return TechnicianResponse.from_model(service.update_technician(technician_id, data))


@router.delete("/{technician_id}")
async def delete_technician(
    technician_id: int,
    service: TechnicianService = Depends(get_technician_service),
):
    """Delete a technician; bookings keep their history but lose the assignment"""
    return service.delete_technician(technician_id)
