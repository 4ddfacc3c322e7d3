"""
Entry

Registration record for a single service
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional

from .callable_type import CallableType


@dataclass
class Entry:
    """Service registration.

    Attributes:
        interface: Service key the entry is registered under
        factory: Callable producing the service, or None to construct ``interface``
        tags: Labels used by ``Container.tagged()``
        arguments: Manual arguments by parameter name, overriding auto-resolution
        once: Cache the first resolved instance and reuse it
        shape: How ``factory`` (or ``interface``) has to be inspected and called
    """
    interface: Hashable
    factory: Optional[Callable[..., Any]] = None
    tags: List[str] = field(default_factory=list)
    arguments: Dict[str, Any] = field(default_factory=dict)
    once: bool = True
    shape: Optional[CallableType] = None

    def __post_init__(self) -> None:
        if self.shape is None:
            if self.factory is None:
                self.shape = CallableType.CLASS
            else:
                self.shape = CallableType.of(self.factory)

            # Plain objects are handed out as-is, never called
            if self.shape is CallableType.INSTANCE:
                instance = self.factory
                self.factory = lambda: instance

    @classmethod
    def from_instance(
        cls,
        interface: Hashable,
        instance: Any,
        tags: Optional[List[str]] = None
    ) -> 'Entry':
        """Create an entry that always returns ``instance`` as-is."""
        return cls(
            interface=interface,
            factory=lambda: instance,
            tags=list(tags or []),
            shape=CallableType.INSTANCE,
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def set_tags(self, tags: List[str]) -> 'Entry':
        """Replace the tags of this entry."""
        self.tags = list(tags)
        return self

    def set_arguments(self, arguments: Dict[str, Any]) -> 'Entry':
        """Replace the manual arguments of this entry.

        Example::

            container.register(Mailer).set_arguments({'host': 'localhost'})
        """
        self.arguments = dict(arguments)
        return self

    def set_once(self, once: bool) -> 'Entry':
        """Toggle caching of the resolved instance."""
        self.once = once
        return self
