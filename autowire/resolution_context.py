"""
ResolutionContext

Tracks the services a container is currently resolving. The chain is
used to detect circular dependencies and to tell top-level ``get()``
calls apart from nested ones.

The context is stored in a ContextVar and is tied to the container that
created it, so one container resolving services from inside another
container's factory starts a fresh chain.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Hashable, Iterator, List, Optional

from .exceptions import CircularDependencyError

if TYPE_CHECKING:
    from .container import Container


class ResolutionContext:
    """Chain of services being resolved by one container.

    Attributes:
        container: The container performing the resolution
        resolving: Service keys in the order they were requested
    """

    def __init__(self, container: 'Container'):
        self.container = container
        self.resolving: List[Hashable] = []

    @property
    def depth(self) -> int:
        return len(self.resolving)

    def enter(self, service: Hashable) -> None:
        """Push a service onto the chain.

        Raises:
            CircularDependencyError: When the service is already being resolved
        """
        if service in self.resolving:
            raise CircularDependencyError(self.resolving + [service])

        self.resolving.append(service)

    def leave(self) -> None:
        self.resolving.pop()


_resolution_context: ContextVar[Optional[ResolutionContext]] = ContextVar(
    '_AUTOWIRE_RESOLUTION_CONTEXT',
    default=None
)


@contextmanager
def resolving(container: 'Container', service: Hashable) -> Iterator[ResolutionContext]:
    """Mark ``service`` as being resolved by ``container`` for the block.

    Example (internal usage)::

        with resolving(self, 'app.Repository') as ctx:
            ...  # nested get() calls see ctx.depth == 1
    """
    ctx = _resolution_context.get()
    token = None

    if ctx is None or ctx.container is not container:
        ctx = ResolutionContext(container)
        token = _resolution_context.set(ctx)

    try:
        ctx.enter(service)
        try:
            yield ctx
        finally:
            ctx.leave()
    finally:
        if token is not None:
            _resolution_context.reset(token)
