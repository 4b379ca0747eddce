from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mutenancy.database.base import Base, IntegerPrimaryKeyMixin

if TYPE_CHECKING:
    from mutenancy.models.tenant import Tenant


class ConfigSetting(IntegerPrimaryKeyMixin, Base):
    __tablename__ = "config_settings"

    plugin: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("plugin", "name", name="uq_config_settings_plugin_name"),
    )


class TenantConfigOverride(IntegerPrimaryKeyMixin, Base):
    __tablename__ = "tenant_config_overrides"

    tenantid: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    plugin: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str | None] = mapped_column(Text)

    # Relationships
    tenant: Mapped[Tenant] = relationship("Tenant", back_populates="config_overrides")

    __table_args__ = (
        UniqueConstraint("tenantid", "plugin", "name", name="uq_tenant_config_overrides"),
    )
