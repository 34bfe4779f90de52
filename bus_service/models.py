import enum
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BusStatusEnum(str, enum.Enum):
    active = "active"
    maintenance = "maintenance"
    retired = "retired"


class StaffPositionEnum(str, enum.Enum):
    driver = "driver"
    conductor = "conductor"
    mechanic = "mechanic"


class StaffStatusEnum(str, enum.Enum):
    active = "active"
    inactive = "inactive"


def _in_clause(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


class Bus(Base):
    __tablename__ = "buses"
    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(20), unique=True, nullable=False)
    model = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BusStatusEnum.active.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_buses_capacity_positive"),
        CheckConstraint(_in_clause("status", BusStatusEnum), name="ck_buses_status"),
        Index("idx_buses_plate_number", "plate_number"),
        Index("idx_buses_status", "status"),
    )


class Staff(Base):
    __tablename__ = "staff"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20), nullable=False)
    position = Column(String(50), nullable=False)
    license_no = Column(String(50))
    status = Column(String(20), nullable=False, default=StaffStatusEnum.active.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(_in_clause("position", StaffPositionEnum), name="ck_staff_position"),
        CheckConstraint(_in_clause("status", StaffStatusEnum), name="ck_staff_status"),
        Index("idx_staff_email", "email"),
        Index("idx_staff_position", "position"),
        Index("idx_staff_status", "status"),
    )
