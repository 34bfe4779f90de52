from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic, Iterator, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bus_service.core.exceptions import ConstraintViolation, Unavailable
from bus_service.models import utcnow

class SQLAlchemyModel(Protocol):
    id: Any
    created_at: Any
    updated_at: Any

ModelType = TypeVar("ModelType", bound=SQLAlchemyModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


@contextmanager
def translate_errors(db: Session) -> Iterator[None]:
    """Roll back and re-raise driver errors as persistence errors."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise Unavailable(str(exc)) from exc


class BaseRepository(Generic[ModelType, CreateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        Base class for data access repositories.
        Every method runs exactly one statement and never logs; callers decide
        how a ConstraintViolation or Unavailable is reported.
        """
        self.model = model

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        with translate_errors(db):
            return db.execute(
                select(self.model).where(self.model.id == id)
            ).scalar_one_or_none()

    def get_all(self, db: Session) -> list[ModelType]:
        """All rows, newest first."""
        with translate_errors(db):
            rows = db.execute(
                select(self.model).order_by(self.model.created_at.desc(), self.model.id.desc())
            ).scalars().all()
        return list(rows)

    def create(self, db: Session, *, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        now = utcnow()
        db_obj = self.model(
            **obj_in.model_dump(mode="json"),
            **extra,
            created_at=now,
            updated_at=now,
        )
        with translate_errors(db):
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, id: int, values: dict[str, Any]) -> Optional[datetime]:
        """
        Overwrite the given columns of row ``id`` and refresh updated_at.
        Returns the new updated_at, or None when no row matched the id.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**values, updated_at=utcnow())
            .returning(self.model.updated_at)
            .execution_options(synchronize_session=False)
        )
        with translate_errors(db):
            updated_at = db.execute(stmt).scalar_one_or_none()
            db.commit()
        return updated_at

    def remove(self, db: Session, *, id: int) -> bool:
        """Delete row ``id``. Deleting a missing row is not an error."""
        stmt = (
            delete(self.model)
            .where(self.model.id == id)
            .execution_options(synchronize_session=False)
        )
        with translate_errors(db):
            deleted = db.execute(stmt).rowcount
            db.commit()
        return deleted > 0
