from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mutenancy.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from mutenancy.models.config import TenantConfigOverride
    from mutenancy.models.user import User


class Tenant(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    idnumber: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # Root course category owned by this tenant
    categoryid: Mapped[int | None] = mapped_column(Integer)
    archived: Mapped[bool] = mapped_column(Boolean, server_default="0", default=False, nullable=False)

    # Relationships
    users: Mapped[list[User]] = relationship("User", back_populates="tenant")
    config_overrides: Mapped[list[TenantConfigOverride]] = relationship(
        "TenantConfigOverride", back_populates="tenant", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_tenants_categoryid", "categoryid"),
    )
