"""
CachedInspector

Memoizing decorator around another inspector, for containers that sit in
a hot path and resolve non-singleton services repeatedly.
"""

import logging
from typing import Any, Callable, Dict, Hashable, List, Tuple

from .inspector import InspectorInterface
from .parameter import Parameter

logger = logging.getLogger(__name__)


class CachedInspector(InspectorInterface):
    """Caches the results of a wrapped inspector per subject.

    Parameters are immutable, so the same list can be handed out for
    every call. Subjects that cannot be hashed (some instances) are
    always forwarded to the wrapped inspector.

    Example::

        container = Container(CachedInspector(ReflectionInspector()))
    """

    def __init__(self, inspector: InspectorInterface):
        self._inspector = inspector
        self._cache: Dict[Hashable, List[Parameter]] = {}

    def inspect_class(self, cls: Any) -> List[Parameter]:
        return self._cached(('class', cls), lambda: self._inspector.inspect_class(cls))

    def inspect_method(self, owner: Any, method: str) -> List[Parameter]:
        return self._cached(
            ('method', owner, method),
            lambda: self._inspector.inspect_method(owner, method)
        )

    def inspect_function(self, function: Any) -> List[Parameter]:
        return self._cached(
            ('function', function),
            lambda: self._inspector.inspect_function(function)
        )

    def clear(self) -> None:
        """Forget every cached result."""
        self._cache.clear()

    def _cached(self, key: Tuple, inspect: Callable[[], List[Parameter]]) -> List[Parameter]:
        try:
            cached = self._cache.get(key)
        except TypeError:
            return inspect()

        if cached is None:
            cached = self._cache[key] = inspect()
        else:
            logger.debug("Using cached parameters for %r", key)

        # Callers get their own list; the Parameter objects are shared
        return list(cached)
