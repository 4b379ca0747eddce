"""Pydantic snapshots of context rows, safe to keep in the instance cache."""

from pydantic import BaseModel, ConfigDict


class ContextRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    contextlevel: int
    instanceid: int
    path: str | None = None
    depth: int = 0
    tenantid: int | None = None
