from sqlalchemy.orm import Session

from bus_service.models import Bus, BusStatusEnum
from bus_service.schemas.bus_schemas import BusCreate

from .base_repository import BaseRepository


class BusRepository(BaseRepository[Bus, BusCreate]):
    def create(self, db: Session, *, obj_in: BusCreate) -> Bus:
        return super().create(db, obj_in=obj_in, status=BusStatusEnum.active.value)


bus_repo = BusRepository(Bus)
