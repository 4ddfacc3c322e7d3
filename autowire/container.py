"""
Container

This module provides the service container and its resolution engine.
It is responsible for:

- Storing service entries, aliases and cached instances
- Inspecting factories and constructors to find their parameters
- Resolving arguments (manual, recursive, default or None)
- Validating arguments before the factory is called
- Wrapping failures so they can be traced through the dependency chain
- Detecting circular dependencies

Example::

    container = Container()
    container.register(Database).set_arguments({'dsn': 'sqlite://'})
    container.register(UserRepository)

    repository = container.get(UserRepository)
"""

import builtins
import inspect
import logging
from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Optional, Tuple

from .callable_type import CallableType, import_string, is_service_instance
from .entry import Entry
from .exceptions import (
    InvalidArgumentError,
    MissingArgumentError,
    NestedServiceError,
    ServiceInstantiationError,
    UndefinedClassError,
    UndefinedServiceError,
    UnexpectedTypeError,
    describe,
)
from .inspector import InspectorInterface
from .parameter import NamedClassParameter, Parameter
from .reflection_inspector import ReflectionInspector
from .resolution_context import resolving

if TYPE_CHECKING:
    from .loader import LoaderInterface

logger = logging.getLogger(__name__)


class Container:
    """Registry of services plus the engine that resolves them.

    Service keys are usually classes (concrete, abstract or protocols),
    but any hashable works. String keys that are dotted import paths to a
    class behave exactly like the class itself when it comes to
    construction and type checks.

    Attributes:
        _inspector: Inspector used to discover factory parameters
        _entries: Registered entries by service key, in registration order
        _aliases: Alias name to canonical service key
        _cached: Resolved instances by canonical service key
        _constraints: Classes named by string keys, resolved on first use
    """

    def __init__(self, inspector: Optional[InspectorInterface] = None):
        """Create an empty container.

        Args:
            inspector: Parameter inspector, defaults to ``ReflectionInspector``.
                Wrap it in a ``CachedInspector`` when non-singleton services
                are resolved in a hot path.
        """
        self._inspector: InspectorInterface = inspector or ReflectionInspector()
        self._entries: Dict[Hashable, Entry] = {}
        self._aliases: Dict[Hashable, Hashable] = {}
        self._cached: Dict[Hashable, Any] = {}
        self._constraints: Dict[str, Optional[type]] = {}

    def register(self, interface: Hashable, factory_or_instance: Any = None) -> Entry:
        """Register a service, returning its entry for further configuration.

        Args:
            interface: Service key, usually a class
            factory_or_instance: One of
                - None: construct ``interface`` directly
                - a class, function, lambda or partial: used as the factory
                - a ``(class_or_instance, method_name)`` pair: method factory
                - any other object: returned as-is on every ``get()``

        Example::

            container.register(Clock, SystemClock)
            container.register(Config, Config.from_env)
            container.register(Logger, logging.getLogger('app'))
            container.register(Mailer).set_tags(['notifier']).set_once(False)
        """
        if factory_or_instance is not None and is_service_instance(factory_or_instance):
            entry = Entry.from_instance(interface, factory_or_instance)
        else:
            entry = Entry(interface, factory_or_instance)

        if interface in self._entries:
            logger.debug("Replacing existing registration for %s", describe(interface))

        # Re-registering must not hand out the previous instance
        self._cached.pop(interface, None)
        self._entries[interface] = entry

        logger.debug("Registered %s (%s)", describe(interface), entry.shape.value)
        return entry

    def alias(self, service: Hashable, alias: Hashable) -> 'Container':
        """Make ``alias`` resolve to the already registered ``service``.

        Raises:
            UndefinedServiceError: When ``service`` is not registered
        """
        if service not in self._entries:
            raise UndefinedServiceError(service, list(self._entries))

        self._aliases[alias] = service
        return self

    def has(self, interface: Hashable) -> bool:
        """Whether ``get(interface)`` would find a registration."""
        try:
            return interface in self._aliases or interface in self._entries
        except TypeError:
            return False

    def load(self, loader: 'LoaderInterface') -> 'Container':
        """Register services using the given loader."""
        return loader.load(self)

    def get(self, interface: Hashable) -> Any:
        """Resolve a service.

        Args:
            interface: Service key or alias

        Returns:
            The service instance

        Raises:
            UndefinedServiceError: When the service is not registered
            ServiceInstantiationError: When the service cannot be created,
                with the original failure as its cause
            CircularDependencyError: When the service is requested again
                while it is being resolved
            UnexpectedTypeError: When the result is not an instance of the
                requested class
        """
        if not self.has(interface):
            raise UndefinedServiceError(interface, list(self._entries))

        is_alias = interface in self._aliases
        name = self._aliases[interface] if is_alias else interface
        entry = self._entries[name]

        if entry.once and name in self._cached:
            logger.debug("Using cached instance of %s", describe(name))
            instance = self._cached[name]
        else:
            with resolving(self, name) as ctx:
                logger.debug("Resolving %s (depth %d)", describe(name), ctx.depth)
                instance = self._resolve(name, entry)

            self._check_type(name, instance)
            if entry.once:
                self._cached[name] = instance

        if is_alias:
            self._check_type(interface, instance)

        return instance

    def tagged(self, tag: str, interface: Optional[Hashable] = None) -> List[Any]:
        """Resolve every service carrying ``tag``, in registration order.

        Args:
            tag: Tag name
            interface: Optional class every resolved service must be an
                instance of

        Raises:
            UnexpectedTypeError: When a service breaks the type constraint
        """
        services = []

        for name, entry in list(self._entries.items()):
            if not entry.has_tag(tag):
                continue

            instance = self.get(name)
            if interface is not None:
                self._check_type(interface, instance)
            services.append(instance)

        return services

    def __getitem__(self, interface: Hashable) -> Any:
        return self.get(interface)

    def __contains__(self, interface: Hashable) -> bool:
        return self.has(interface)

    def _resolve(self, name: Hashable, entry: Entry) -> Any:
        """Inspect, resolve arguments and invoke the factory for ``entry``.

        Every failure is wrapped in a ServiceInstantiationError naming
        the service, so errors can be traced back through the chain.
        """
        if entry.shape is CallableType.INSTANCE:
            return entry.factory()

        try:
            subject = self._subject(entry)
            parameters = self._inspect(entry.shape, subject)
            args, kwargs = self._resolve_arguments(parameters, entry.arguments)
            return self._invoke(entry.shape, subject, args, kwargs)
        except Exception as e:
            raise ServiceInstantiationError(name, e) from e

    @staticmethod
    def _subject(entry: Entry) -> Any:
        subject = entry.interface if entry.factory is None else entry.factory

        if entry.shape is not CallableType.CLASS:
            return subject

        if isinstance(subject, str):
            try:
                subject = import_string(subject)
            except ImportError as e:
                raise UndefinedClassError(subject) from e

        if not inspect.isclass(subject):
            raise UndefinedClassError(subject)
        return subject

    def _inspect(self, shape: CallableType, subject: Any) -> List[Parameter]:
        if shape is CallableType.CLASS:
            return self._inspector.inspect_class(subject)
        if shape is CallableType.INVOKABLE:
            return self._inspector.inspect_method(subject, '__call__')
        if shape is CallableType.METHOD:
            if isinstance(subject, tuple):
                return self._inspector.inspect_method(subject[0], subject[1])
            return self._inspector.inspect_method(subject.__self__, subject.__name__)
        return self._inspector.inspect_function(subject)

    @staticmethod
    def _invoke(shape: CallableType, subject: Any, args: List[Any], kwargs: Dict[str, Any]) -> Any:
        if shape is CallableType.METHOD and isinstance(subject, tuple):
            owner, method = subject
            if isinstance(owner, str):
                owner = import_string(owner)
            subject = getattr(owner, method)
        elif shape is CallableType.FUNCTION and isinstance(subject, str):
            subject = import_string(subject)

        return subject(*args, **kwargs)

    def _resolve_arguments(
        self,
        parameters: List[Parameter],
        arguments: Dict[str, Any]
    ) -> Tuple[List[Any], Dict[str, Any]]:
        """Resolve and validate a value for each parameter, in order.

        Raises:
            MissingArgumentError: When no value can be found
            InvalidArgumentError: When a value does not satisfy its parameter
            NestedServiceError: When resolving a dependency fails
        """
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}

        for parameter in parameters:
            name = parameter.get_name()

            if name in arguments:
                value = arguments[name]
            else:
                value = self._resolve_argument(parameter)

            if not parameter.accepts(value):
                raise InvalidArgumentError(
                    name,
                    parameter.get_type(),
                    describe(value.__class__)
                )

            if parameter.is_keyword_only():
                kwargs[name] = value
            else:
                args.append(value)

        return args, kwargs

    def _resolve_argument(self, parameter: Parameter) -> Any:
        service = self._service_for(parameter)

        if service is not None:
            try:
                return self.get(service)
            except Exception as e:
                raise NestedServiceError(service, e) from e

        if parameter.has_default():
            return parameter.get_default_callback()()

        if parameter.is_nullable():
            return None

        raise MissingArgumentError(parameter.get_name())

    def _service_for(self, parameter: Parameter) -> Optional[Hashable]:
        """Find the registered key able to satisfy ``parameter``, if any."""
        if parameter.is_builtin():
            return None

        if isinstance(parameter, NamedClassParameter) and self.has(parameter.get_class()):
            return parameter.get_class()

        if self.has(parameter.get_type()):
            return parameter.get_type()

        return None

    def _check_type(self, interface: Hashable, instance: Any) -> None:
        """Raise UnexpectedTypeError if ``instance`` is not an ``interface``.

        Keys that do not name a class (plain strings, other hashables)
        carry no type constraint.
        """
        expected = self._constraint_for(interface)
        if expected is None:
            return

        try:
            valid = isinstance(instance, expected)
        except TypeError:
            # Protocols that are not runtime checkable
            return

        if not valid:
            raise UnexpectedTypeError(expected, instance)

    def _constraint_for(self, interface: Hashable) -> Optional[type]:
        """Return the class named by ``interface``, if any.

        String keys are resolved once per container. Bare names only match
        builtins, so plain keys such as ``'db'`` never trigger an import.
        """
        if not isinstance(interface, str):
            return interface if inspect.isclass(interface) else None

        if interface not in self._constraints:
            if '.' in interface:
                try:
                    resolved = import_string(interface)
                except ImportError:
                    resolved = None
            else:
                resolved = getattr(builtins, interface, None)

            self._constraints[interface] = resolved if inspect.isclass(resolved) else None

        return self._constraints[interface]
