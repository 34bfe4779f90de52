import re
from typing import Callable, Type, TypeVar

from fastapi import HTTPException, Path, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)

# Optional sign and ASCII digits only; int() alone also takes "0_1", " 1" and non-ASCII digits.
_RECORD_ID_RE = re.compile(r"[+-]?[0-9]+")


def record_id(label: str) -> Callable[[str], int]:
    """
    Factory for a dependency that parses the ``{id}`` path segment.
    A non-numeric id is rejected with 400 before any storage access.
    Usage: Depends(record_id("bus"))
    """
    def parse_id(id: str = Path(..., description=f"Numeric {label} identifier")) -> int:
        if not _RECORD_ID_RE.fullmatch(id):
            raise HTTPException(status_code=400, detail=f"Invalid {label} ID")
        return int(id)
    return parse_id


parse_bus_id = record_id("bus")
parse_staff_id = record_id("staff")


async def raw_body(request: Request) -> bytes:
    """The undecoded request body, so routes choose when to validate it."""
    return await request.body()


def validate_body(schema: Type[SchemaType], body: bytes) -> SchemaType:
    """Decode and validate a JSON body, reporting failures like FastAPI does."""
    if not body.strip():
        raise RequestValidationError(
            [{"type": "missing", "loc": ["body"], "msg": "Field required", "input": None}]
        )
    try:
        return schema.model_validate_json(body)
    except ValidationError as exc:
        errors = jsonable_encoder(exc.errors(include_url=False), custom_encoder={Exception: str})
        for error in errors:
            error["loc"] = ["body", *error["loc"]]
        raise RequestValidationError(errors)
