"""ContextLevelRegistry: one descriptor per context level, looked up by numeric tag."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.models.enums import ContextLevel

logger = logging.getLogger(__name__)

CreateInstancesHook = Callable[[AsyncSession], Awaitable[None]]
BuildPathsHook = Callable[[AsyncSession, bool], Awaitable[None]]
CleanupQueryHook = Callable[[], Select]
TenantIdResolver = Callable[[AsyncSession, int, int, "str | None"], Awaitable["int | None"]]


@dataclass(frozen=True)
class ContextLevelDescriptor:
    """Static description of a context level.

    The optional hooks are used by the generic maintenance sweeps in
    ``ContextService``; levels without a backing table leave them unset.
    """

    level: int
    short_name: str
    name_key: str
    name_component: str = "core"
    instance_table: str | None = None
    possible_parent_levels: tuple[int, ...] = ()
    compatible_role_archetypes: tuple[str, ...] = ()
    capability_levels: tuple[int, ...] = ()
    create_instances: CreateInstancesHook | None = field(default=None, compare=False)
    build_paths: BuildPathsHook | None = field(default=None, compare=False)
    cleanup_query: CleanupQueryHook | None = field(default=None, compare=False)


class ContextLevelRegistry:
    """Process wide registry of context level descriptors."""

    _levels: dict[int, ContextLevelDescriptor] = {}
    _tenantid_resolver: TenantIdResolver | None = None

    @classmethod
    def register(cls, descriptor: ContextLevelDescriptor) -> None:
        cls._levels[descriptor.level] = descriptor
        logger.debug("Registered context level %s (%s)", descriptor.level, descriptor.short_name)

    @classmethod
    def get(cls, level: int) -> ContextLevelDescriptor | None:
        return cls._levels.get(level)

    @classmethod
    def all(cls) -> list[ContextLevelDescriptor]:
        """Return registered descriptors ordered by level."""
        return [cls._levels[level] for level in sorted(cls._levels)]

    @classmethod
    def set_tenantid_resolver(cls, resolver: TenantIdResolver | None) -> None:
        """Install the callable used to derive ``tenantid`` for newly inserted rows."""
        cls._tenantid_resolver = resolver

    @classmethod
    def get_tenantid_resolver(cls) -> TenantIdResolver | None:
        return cls._tenantid_resolver


SYSTEM_LEVEL = ContextLevelDescriptor(
    level=ContextLevel.SYSTEM,
    short_name="system",
    name_key="system",
    compatible_role_archetypes=("manager",),
    capability_levels=(ContextLevel.SYSTEM,),
)

USER_LEVEL = ContextLevelDescriptor(
    level=ContextLevel.USER,
    short_name="user",
    name_key="user",
    instance_table="users",
    possible_parent_levels=(ContextLevel.SYSTEM, ContextLevel.TENANT),
    capability_levels=(ContextLevel.USER,),
)

COURSECAT_LEVEL = ContextLevelDescriptor(
    level=ContextLevel.COURSECAT,
    short_name="coursecat",
    name_key="category",
    instance_table="course_categories",
    possible_parent_levels=(ContextLevel.SYSTEM, ContextLevel.COURSECAT),
    compatible_role_archetypes=("manager", "coursecreator"),
    capability_levels=(ContextLevel.COURSECAT, ContextLevel.COURSE, ContextLevel.MODULE, ContextLevel.BLOCK),
)

COURSE_LEVEL = ContextLevelDescriptor(
    level=ContextLevel.COURSE,
    short_name="course",
    name_key="course",
    instance_table="courses",
    possible_parent_levels=(ContextLevel.SYSTEM, ContextLevel.COURSECAT),
    compatible_role_archetypes=("manager", "editingteacher", "teacher", "student"),
    capability_levels=(ContextLevel.COURSE, ContextLevel.MODULE, ContextLevel.BLOCK),
)

for _descriptor in (SYSTEM_LEVEL, USER_LEVEL, COURSECAT_LEVEL, COURSE_LEVEL):
    ContextLevelRegistry.register(_descriptor)
