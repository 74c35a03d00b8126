"""Shared schema base and the error body."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Reads straight off ORM rows."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Body returned for every reservation engine error."""

    error: str
    # Omitted for internal failures
    detail: str | None = None
    timestamp: datetime
