from mutenancy.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

__all__ = [
    "Base",
    "IntegerPrimaryKeyMixin",
    "TimestampMixin",
]
