"""
Repository tests against the real ORM models and constraints.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from bus_service.core.exceptions import ConstraintViolation, Unavailable
from bus_service.data_access import bus_repo, staff_repo
from bus_service.db.session import Database
from bus_service.models import Base
from bus_service.schemas.bus_schemas import BusCreate
from bus_service.schemas.staff_schemas import StaffCreate
from tests.conftest import BUS_PAYLOAD, STAFF_PAYLOAD, as_utc


def make_bus(session: Session, plate: str = "ABC-123"):
    return bus_repo.create(session, obj_in=BusCreate(**{**BUS_PAYLOAD, "plate_number": plate}))


def make_staff(session: Session, email: str = "jane.doe@example.com"):
    return staff_repo.create(session, obj_in=StaffCreate(**{**STAFF_PAYLOAD, "email": email}))


def test_init_schema_is_idempotent(database: Database) -> None:
    database.init_schema()
    database.init_schema()

    inspector = inspect(database.engine)
    assert {"buses", "staff"} <= set(inspector.get_table_names())
    bus_indexes = {index["name"] for index in inspector.get_indexes("buses")}
    staff_indexes = {index["name"] for index in inspector.get_indexes("staff")}
    assert {"idx_buses_plate_number", "idx_buses_status"} <= bus_indexes
    assert {"idx_staff_email", "idx_staff_position", "idx_staff_status"} <= staff_indexes


def test_create_bus_assigns_id_status_and_timestamps(session: Session) -> None:
    bus = make_bus(session)

    assert bus.id > 0
    assert bus.status == "active"
    assert bus.created_at == bus.updated_at
    assert as_utc(bus.created_at) <= datetime.now(timezone.utc)


def test_created_ids_are_unique(session: Session) -> None:
    ids = {make_bus(session, plate=f"BUS-{n}").id for n in range(5)}
    assert len(ids) == 5


def test_duplicate_plate_is_a_constraint_violation(session: Session) -> None:
    first = make_bus(session)
    first_id = first.id

    with pytest.raises(ConstraintViolation):
        make_bus(session)

    assert bus_repo.get(session, id=first_id) is not None


def test_check_constraints_reject_bad_capacity_and_status(session: Session) -> None:
    bus = make_bus(session)
    bus_id = bus.id

    with pytest.raises(ConstraintViolation):
        bus_repo.update(session, id=bus_id, values={"capacity": 0})
    with pytest.raises(ConstraintViolation):
        bus_repo.update(session, id=bus_id, values={"status": "scrapped"})


def test_get_missing_returns_none(session: Session) -> None:
    assert bus_repo.get(session, id=404) is None
    assert staff_repo.get(session, id=404) is None


def test_get_all_empty_table(session: Session) -> None:
    assert bus_repo.get_all(session) == []
    assert staff_repo.get_all(session) == []


def test_get_all_returns_newest_first(session: Session) -> None:
    created = [make_bus(session, plate=f"BUS-{n}").id for n in range(4)]

    listed = [bus.id for bus in bus_repo.get_all(session)]

    assert listed == list(reversed(created))
    assert len(set(listed)) == 4


def test_update_overwrites_fields_and_refreshes_timestamp(session: Session) -> None:
    bus = make_bus(session)
    bus_id, before = bus.id, bus.updated_at
    created_at = bus.created_at

    updated_at = bus_repo.update(
        session,
        id=bus_id,
        values={"plate_number": "XYZ-999", "model": "MAN Lion", "capacity": 50, "status": "maintenance"},
    )

    assert updated_at is not None
    assert as_utc(updated_at) > as_utc(before)

    reloaded = bus_repo.get(session, id=bus_id)
    assert reloaded.plate_number == "XYZ-999"
    assert reloaded.model == "MAN Lion"
    assert reloaded.capacity == 50
    assert reloaded.status == "maintenance"
    assert reloaded.created_at == created_at
    assert as_utc(reloaded.updated_at) == as_utc(updated_at)


def test_update_missing_row_reports_none(session: Session) -> None:
    assert bus_repo.update(session, id=12345, values={"model": "Ghost"}) is None


def test_remove_is_idempotent(session: Session) -> None:
    bus_id = make_bus(session).id

    assert bus_repo.remove(session, id=bus_id) is True
    assert bus_repo.get(session, id=bus_id) is None
    assert bus_repo.remove(session, id=bus_id) is False


def test_staff_duplicate_email_is_a_constraint_violation(session: Session) -> None:
    make_staff(session)

    with pytest.raises(ConstraintViolation):
        make_staff(session)


def test_staff_position_check_constraint(session: Session) -> None:
    staff_id = make_staff(session).id

    with pytest.raises(ConstraintViolation):
        staff_repo.update(session, id=staff_id, values={"position": "pilot"})


def test_staff_create_keeps_optional_license(session: Session) -> None:
    member = staff_repo.create(
        session,
        obj_in=StaffCreate(**{k: v for k, v in STAFF_PAYLOAD.items() if k != "license_no"}),
    )

    assert member.license_no is None
    assert member.position == "driver"
    assert member.status == "active"


def test_backend_failure_is_unavailable(database: Database, session: Session) -> None:
    Base.metadata.drop_all(bind=database.engine)

    with pytest.raises(Unavailable):
        bus_repo.get_all(session)
    with pytest.raises(Unavailable):
        staff_repo.get(session, id=1)
