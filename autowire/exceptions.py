"""
Autowire Exceptions

Flat exception family for the autowire container. Every concrete error
derives directly from ``AutowireError`` and is classified by an ``ErrorKind``
so callers can branch on the kind of failure instead of the class hierarchy.
"""

from enum import Enum
from typing import Any, List, Optional


class ErrorKind(Enum):
    """Kinds of failure raised by the container"""
    LOOKUP = "LOOKUP"
    SHAPE = "SHAPE"
    ARGUMENT = "ARGUMENT"
    COMPOSITION = "COMPOSITION"
    CONTRACT = "CONTRACT"
    CONFIGURATION = "CONFIGURATION"


def describe(subject: Any) -> str:
    """Return a readable name for a service key, class or callable.

    Classes are rendered as ``module.QualifiedName`` (builtins without
    the module prefix), strings are returned as-is and anything else
    falls back to its ``__qualname__`` or ``repr()``.
    """
    if isinstance(subject, str):
        return subject
    if isinstance(subject, type):
        if subject.__module__ == 'builtins':
            return subject.__qualname__
        return f"{subject.__module__}.{subject.__qualname__}"
    name = getattr(subject, '__qualname__', None)
    if name is not None:
        return name
    return repr(subject)


class AutowireError(Exception):
    """
    Base exception for all autowire errors.

    You can catch this to handle any container error generically, or
    inspect ``kind`` to tell lookup failures from argument failures.

    Example:
        >>> try:
        ...     service = container.get(MyService)
        ... except AutowireError as e:
        ...     print(f"{e.kind.value}: {e}")
    """

    kind: ErrorKind = ErrorKind.LOOKUP


class UndefinedServiceError(AutowireError):
    """
    Raised when a requested service key is not registered.

    Common causes:
        - Forgetting to call ``container.register(MyService)``
        - Aliasing a service before registering it
        - Requesting an alias that was never created

    Solution:
        Register the service (or its alias) first::

            container.register(Database)
            container.alias(Database, 'db')
            container.get('db')
    """

    kind = ErrorKind.LOOKUP

    def __init__(self, service: Any, registered: Optional[List[Any]] = None):
        self.service = service
        message = f"Could not find service '{describe(service)}', no matching definitions found"
        if registered is not None:
            names = ", ".join(describe(name) for name in registered) or "None"
            message += f"\nRegistered services: {names}"
        super().__init__(message)


class UndefinedClassError(AutowireError):
    """Raised when a class (or dotted import path) cannot be resolved."""

    kind = ErrorKind.LOOKUP

    def __init__(self, class_name: Any):
        self.class_name = class_name
        super().__init__(f"Could not find class '{describe(class_name)}'")


class UndefinedMethodError(AutowireError):
    """Raised when a class exists but does not define the requested method."""

    kind = ErrorKind.LOOKUP

    def __init__(self, class_name: Any, method: str):
        self.class_name = class_name
        self.method = method
        super().__init__(
            f"Could not find method '{method}' on class '{describe(class_name)}'"
        )


class UndefinedFunctionError(AutowireError):
    """Raised when a function cannot be resolved or has no signature."""

    kind = ErrorKind.LOOKUP

    def __init__(self, function: Any):
        self.function = function
        super().__init__(f"Could not find function '{describe(function)}'")


class CompoundTypeError(AutowireError):
    """
    Raised when a parameter is annotated with a union of several types.

    ``Optional[X]`` is fine, but ``Union[X, Y]`` and ``X | Y`` give the
    container no single type to resolve.

    Solution:
        Introduce a common base class or protocol and annotate with that::

            class Storage(Protocol): ...

            def __init__(self, storage: Storage): ...
    """

    kind = ErrorKind.SHAPE

    def __init__(self, parameter: str, function_name: str):
        self.parameter = parameter
        self.function_name = function_name
        super().__init__(
            f"Failed resolving union type for parameter '{parameter}' of {function_name}"
        )


class UnknownTypeError(AutowireError):
    """
    Raised when a parameter annotation cannot be classified.

    Common causes:
        - Forward references to names that are not importable
        - Special forms such as ``Literal`` or a bare ``TypeVar``
    """

    kind = ErrorKind.SHAPE

    def __init__(self, parameter: str, type_name: str):
        self.parameter = parameter
        self.type_name = type_name
        super().__init__(
            f"Could not determine the type expected by parameter '{parameter}' "
            f"(declared as '{type_name}')"
        )


class UndefinedDefaultValueError(AutowireError):
    """Raised when asking for the default of a parameter that has none."""

    kind = ErrorKind.ARGUMENT

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(
            f"Could not determine a default value for parameter '{parameter}'"
        )


class MissingArgumentError(AutowireError):
    """
    Raised when no value can be found for a required parameter.

    The container tries, in order: manual arguments, registered services,
    default values and finally ``None`` for nullable parameters.

    Solution:
        Pass the value manually::

            container.register(Mailer).set_arguments({'host': 'localhost'})
    """

    kind = ErrorKind.ARGUMENT

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(
            f"Could not create service as no value provided for required parameter '{parameter}'"
        )


class InvalidArgumentError(AutowireError):
    """Raised when a resolved value does not satisfy its parameter."""

    kind = ErrorKind.ARGUMENT

    def __init__(self, parameter: str, expected: str, provided: str):
        self.parameter = parameter
        self.expected = expected
        self.provided = provided
        super().__init__(
            f"Invalid argument provided for parameter '{parameter}', "
            f"expected {expected} but received {provided} instead"
        )


class NestedServiceError(AutowireError):
    """
    Wraps a failure raised while resolving a dependency of another service.

    Only used to carry the dependency name up the chain so that
    ``ServiceInstantiationError`` can indent its rendered message.
    """

    kind = ErrorKind.COMPOSITION

    def __init__(self, service: Any, reason: BaseException):
        self.service = service
        self.reason = reason
        super().__init__(f"Could not resolve dependency '{describe(service)}'")


class CircularDependencyError(AutowireError):
    """
    Raised when a service is requested again while it is being resolved.

    Example of circular dependency::

        class ServiceA:
            def __init__(self, b: ServiceB): ...

        class ServiceB:
            def __init__(self, a: ServiceA): ...  # Circular!

    Solution:
        Extract the shared behaviour into a third service, or pass one
        side in manually with ``set_arguments()``.
    """

    kind = ErrorKind.COMPOSITION

    def __init__(self, chain: List[Any]):
        self.chain = list(chain)
        cycle = " -> ".join(describe(service) for service in self.chain)
        super().__init__(f"Circular dependency detected: {cycle}")


class ServiceInstantiationError(AutowireError):
    """
    Raised when any step of creating a service fails.

    The original failure is kept as ``__cause__``. The message unwraps the
    whole cause chain, indenting once per dependency level::

        Encountered an error while resolving service 'app.Repository':
            Could not resolve dependency 'app.Database':
                Could not create service as no value provided for required parameter 'dsn'
    """

    kind = ErrorKind.COMPOSITION

    def __init__(self, service: Any, reason: BaseException):
        self.service = service
        self.reason = reason
        super().__init__(
            f"Encountered an error while resolving service '{describe(service)}':\n"
            f"{self._unwrap_reason(reason)}"
        )

    @staticmethod
    def _unwrap_reason(reason: Optional[BaseException]) -> str:
        depth = 1
        lines = []

        while reason is not None:
            if isinstance(reason, NestedServiceError):
                lines.append("\t" * depth + str(reason) + ":")
                depth += 1
            elif not isinstance(reason, ServiceInstantiationError):
                lines.append("\t" * depth + str(reason))
            reason = reason.__cause__

        return "\n".join(lines)


class UnexpectedTypeError(AutowireError):
    """
    Raised when a resolved service does not satisfy the requested type.

    Common causes:
        - A factory returning the wrong class
        - Registering an unrelated instance under an interface
        - Tagged services that break the requested type constraint
    """

    kind = ErrorKind.CONTRACT

    def __init__(self, expected: Any, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Container expected to resolve a dependency of type {describe(expected)}, "
            f"but instead resolved a {describe(type(actual))}"
        )


class LoaderError(AutowireError):
    """Raised when a service definition file contains an invalid entry."""

    kind = ErrorKind.CONFIGURATION
