"""Generic context tree layer: level registry, instance cache and storage helpers."""

from mutenancy.modules.context.cache import ContextCache, context_cache
from mutenancy.modules.context.constants import Strictness
from mutenancy.modules.context.levels import ContextLevelDescriptor, ContextLevelRegistry
from mutenancy.modules.context.schemas import ContextRecord
from mutenancy.modules.context.service import ContextService, path_depth

__all__ = [
    "ContextCache",
    "context_cache",
    "Strictness",
    "ContextLevelDescriptor",
    "ContextLevelRegistry",
    "ContextRecord",
    "ContextService",
    "path_depth",
]
