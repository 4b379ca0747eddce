"""Generic context layer constants."""

import enum

# Upper bound for the in-process context instance cache
CONTEXT_CACHE_MAX_SIZE = 2500

# Capability listing order used by get_capabilities()
DEFAULT_CAPABILITY_SORT = ("contextlevel", "component", "name")


class Strictness(str, enum.Enum):
    MUST_EXIST = "MUST_EXIST"
    IGNORE_MISSING = "IGNORE_MISSING"
