from typing import Any, List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Confirmation body for operations that return no record."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str = Field(..., description="Human readable error message")
    details: Optional[List[Any]] = Field(None, description="Field level validation errors")


class HealthResponse(BaseModel):
    status: str
    service: str
