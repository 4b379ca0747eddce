from sqlalchemy import Index, Integer, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from mutenancy.database.base import Base, IntegerPrimaryKeyMixin


class Context(IntegerPrimaryKeyMixin, Base):
    """One node of the permission inheritance tree.

    ``path`` is the materialized chain of ancestor ids from the system root
    down to this node, ``depth`` is the number of segments in it and
    ``tenantid`` is derived from the depth 2 ancestor.
    """

    __tablename__ = "context"

    contextlevel: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    instanceid: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str | None] = mapped_column(String(255))
    depth: Mapped[int] = mapped_column(SmallInteger, server_default="0", default=0, nullable=False)
    tenantid: Mapped[int | None] = mapped_column(Integer)

    __table_args__ = (
        UniqueConstraint("contextlevel", "instanceid", name="uq_context_level_instance"),
        Index("ix_context_path", "path"),
        Index("ix_context_tenantid", "tenantid"),
    )

    def __repr__(self) -> str:
        return (
            f"Context(id={self.id!r}, contextlevel={self.contextlevel!r}, "
            f"instanceid={self.instanceid!r}, path={self.path!r}, tenantid={self.tenantid!r})"
        )
