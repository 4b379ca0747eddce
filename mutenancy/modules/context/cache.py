"""In-process context instance cache keyed by (level, instanceid) and by id."""

import logging
from collections import OrderedDict

from mutenancy.modules.context.constants import CONTEXT_CACHE_MAX_SIZE

logger = logging.getLogger(__name__)


class ContextCache:
    """Bounded LRU cache of context nodes.

    Any object with ``id``, ``contextlevel`` and ``instanceid`` attributes can
    be stored. Entries are not invalidated across processes.
    """

    def __init__(self, max_size: int = CONTEXT_CACHE_MAX_SIZE) -> None:
        self._max_size = max_size
        self._by_id: OrderedDict[int, object] = OrderedDict()
        self._by_instance: dict[tuple[int, int], int] = {}

    def get(self, level: int, instanceid: int):
        contextid = self._by_instance.get((int(level), int(instanceid)))
        if contextid is None:
            return None
        return self.get_by_id(contextid)

    def get_by_id(self, contextid: int):
        context = self._by_id.get(int(contextid))
        if context is not None:
            self._by_id.move_to_end(int(contextid))
        return context

    def add(self, context) -> None:
        self._by_id[context.id] = context
        self._by_id.move_to_end(context.id)
        self._by_instance[(int(context.contextlevel), int(context.instanceid))] = context.id
        while len(self._by_id) > self._max_size:
            _, evicted = self._by_id.popitem(last=False)
            self._by_instance.pop((int(evicted.contextlevel), int(evicted.instanceid)), None)

    def remove(self, context) -> None:
        self._by_id.pop(context.id, None)
        self._by_instance.pop((int(context.contextlevel), int(context.instanceid)), None)

    def remove_level(self, level: int) -> int:
        """Drop every entry of one context level, returns how many were dropped."""
        contextids = [
            contextid for (cached_level, _), contextid in self._by_instance.items()
            if cached_level == int(level)
        ]
        for contextid in contextids:
            context = self._by_id.get(contextid)
            if context is not None:
                self.remove(context)
        return len(contextids)

    def discard(self, context) -> None:
        """Remove ``context`` only if it is still the cached entry for its id."""
        if self._by_id.get(context.id) is context:
            self.remove(context)

    def reset(self) -> None:
        self._by_id.clear()
        self._by_instance.clear()
        logger.debug("Context cache reset")

    def __len__(self) -> int:
        return len(self._by_id)


context_cache = ContextCache()
