from sqlalchemy import Index, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from mutenancy.database.base import Base, IntegerPrimaryKeyMixin


class Capability(IntegerPrimaryKeyMixin, Base):
    __tablename__ = "capabilities"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    contextlevel: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    component: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        Index("ix_capabilities_contextlevel", "contextlevel"),
    )
