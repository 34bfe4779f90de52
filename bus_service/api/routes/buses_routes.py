import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bus_service import schemas
from bus_service.api.dependencies import parse_bus_id, raw_body, validate_body
from bus_service.core.exceptions import PersistenceError
from bus_service.data_access import bus_repo
from bus_service.db.session import get_db
from bus_service.models import Bus

logger = logging.getLogger(__name__)

router = APIRouter()

BUS_NOT_FOUND = "Bus not found"


def _get_bus_or_404(db: Session, bus_id: int) -> Bus:
    try:
        bus = bus_repo.get(db, id=bus_id)
    except PersistenceError as e:
        logger.error(f"Failed to load bus {bus_id}: {e}")
        raise HTTPException(status_code=500, detail="Database error")
    if bus is None:
        raise HTTPException(status_code=404, detail=BUS_NOT_FOUND)
    return bus


@router.post(
    "",
    response_model=schemas.bus_schemas.BusRead,
    status_code=status.HTTP_201_CREATED,
)
def create_bus(
    bus_in: schemas.bus_schemas.BusCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new bus. New buses always start as active."""
    try:
        return bus_repo.create(db, obj_in=bus_in)
    except PersistenceError as e:
        logger.error(f"Failed to create bus {bus_in.plate_number}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create bus")


@router.get("", response_model=schemas.bus_schemas.BusListResponse)
def get_buses(db: Annotated[Session, Depends(get_db)]):
    """Retrieve all buses, newest first."""
    try:
        buses = bus_repo.get_all(db)
    except PersistenceError as e:
        logger.error(f"Failed to list buses: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve buses")
    return {"buses": buses, "count": len(buses)}


@router.get("/{id}", response_model=schemas.bus_schemas.BusRead)
def get_bus(
    bus_id: Annotated[int, Depends(parse_bus_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific bus by ID."""
    return _get_bus_or_404(db, bus_id)


@router.put("/{id}", response_model=schemas.bus_schemas.BusRead)
def update_bus(
    bus_id: Annotated[int, Depends(parse_bus_id)],
    body: Annotated[bytes, Depends(raw_body)],
    db: Annotated[Session, Depends(get_db)],
):
    """
    Replace a bus.
    Existence is checked before the body is validated, so an unknown id
    answers 404 even when the body is invalid.
    """
    existing = schemas.bus_schemas.BusRead.model_validate(_get_bus_or_404(db, bus_id))
    bus_update = validate_body(schemas.bus_schemas.BusUpdate, body)

    values = bus_update.model_dump(mode="json")
    if values["status"] is None:
        values["status"] = existing.status

    try:
        updated_at = bus_repo.update(db, id=bus_id, values=values)
    except PersistenceError as e:
        logger.error(f"Failed to update bus {bus_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update bus")

    # Deleted by another request between the read and the write.
    if updated_at is None:
        raise HTTPException(status_code=404, detail=BUS_NOT_FOUND)

    return existing.model_copy(update={**values, "updated_at": updated_at})


@router.delete("/{id}", response_model=schemas.response_schemas.MessageResponse)
def delete_bus(
    bus_id: Annotated[int, Depends(parse_bus_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a bus."""
    try:
        deleted = bus_repo.remove(db, id=bus_id)
    except PersistenceError as e:
        logger.error(f"Failed to delete bus {bus_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete bus")

    if not deleted:
        raise HTTPException(status_code=404, detail=BUS_NOT_FOUND)

    return {"message": "Bus deleted successfully"}
