import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bus_service import schemas
from bus_service.api.dependencies import parse_staff_id, raw_body, validate_body
from bus_service.core.exceptions import PersistenceError
from bus_service.data_access import staff_repo
from bus_service.db.session import get_db
from bus_service.models import Staff

logger = logging.getLogger(__name__)

router = APIRouter()

STAFF_NOT_FOUND = "Staff member not found"


def _get_staff_or_404(db: Session, staff_id: int) -> Staff:
    try:
        staff_member = staff_repo.get(db, id=staff_id)
    except PersistenceError as e:
        logger.error(f"Failed to load staff member {staff_id}: {e}")
        raise HTTPException(status_code=500, detail="Database error")
    if staff_member is None:
        raise HTTPException(status_code=404, detail=STAFF_NOT_FOUND)
    return staff_member


@router.post(
    "",
    response_model=schemas.staff_schemas.StaffRead,
    status_code=status.HTTP_201_CREATED,
)
def create_staff(
    staff_in: schemas.staff_schemas.StaffCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new staff member."""
    try:
        return staff_repo.create(db, obj_in=staff_in)
    except PersistenceError as e:
        logger.error(f"Failed to create staff member {staff_in.email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create staff member")


@router.get("", response_model=schemas.staff_schemas.StaffListResponse)
def get_staff(db: Annotated[Session, Depends(get_db)]):
    """Retrieve all staff members, newest first."""
    try:
        staff = staff_repo.get_all(db)
    except PersistenceError as e:
        logger.error(f"Failed to list staff: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve staff")
    return {"staff": staff, "count": len(staff)}


@router.get("/{id}", response_model=schemas.staff_schemas.StaffRead)
def get_staff_member(
    staff_id: Annotated[int, Depends(parse_staff_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a staff member by ID."""
    return _get_staff_or_404(db, staff_id)


@router.put("/{id}", response_model=schemas.staff_schemas.StaffRead)
def update_staff(
    staff_id: Annotated[int, Depends(parse_staff_id)],
    body: Annotated[bytes, Depends(raw_body)],
    db: Annotated[Session, Depends(get_db)],
):
    """Replace a staff member (full update)."""
    existing = schemas.staff_schemas.StaffRead.model_validate(_get_staff_or_404(db, staff_id))
    staff_update = validate_body(schemas.staff_schemas.StaffUpdate, body)

    values = staff_update.model_dump(mode="json")
    if values["status"] is None:
        values["status"] = existing.status

    try:
        updated_at = staff_repo.update(db, id=staff_id, values=values)
    except PersistenceError as e:
        logger.error(f"Failed to update staff member {staff_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update staff member")

    if updated_at is None:
        raise HTTPException(status_code=404, detail=STAFF_NOT_FOUND)

    return existing.model_copy(update={**values, "updated_at": updated_at})


@router.delete("/{id}", response_model=schemas.response_schemas.MessageResponse)
def delete_staff(
    staff_id: Annotated[int, Depends(parse_staff_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a staff member."""
    try:
        deleted = staff_repo.remove(db, id=staff_id)
    except PersistenceError as e:
        logger.error(f"Failed to delete staff member {staff_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete staff member")

    if not deleted:
        raise HTTPException(status_code=404, detail=STAFF_NOT_FOUND)

    return {"message": "Staff member deleted successfully"}
