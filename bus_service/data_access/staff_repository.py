from sqlalchemy.orm import Session

from bus_service.models import Staff, StaffStatusEnum
from bus_service.schemas.staff_schemas import StaffCreate

from .base_repository import BaseRepository


class StaffRepository(BaseRepository[Staff, StaffCreate]):
    def create(self, db: Session, *, obj_in: StaffCreate) -> Staff:
        return super().create(db, obj_in=obj_in, status=StaffStatusEnum.active.value)


staff_repo = StaffRepository(Staff)
