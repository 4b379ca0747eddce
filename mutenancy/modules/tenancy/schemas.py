"""Pydantic schemas for tenant records."""

from pydantic import BaseModel, ConfigDict


class TenantRecord(BaseModel):
    """Read-only view of a tenant row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    idnumber: str
    categoryid: int | None = None
    archived: bool = False
