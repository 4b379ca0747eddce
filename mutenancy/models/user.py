from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mutenancy.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from mutenancy.models.tenant import Tenant


class User(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    tenantid: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="SET NULL")
    )
    suspended: Mapped[bool] = mapped_column(Boolean, server_default="0", default=False, nullable=False)

    # Relationships
    tenant: Mapped[Tenant | None] = relationship("Tenant", back_populates="users")

    __table_args__ = (
        Index("ix_users_tenantid", "tenantid"),
    )
