"""
CallableType

Stateless predicates used to tell the different shapes of "thing that
produces a service" apart, plus the enumeration the container and
inspectors dispatch on.

A subject handed to ``Container.register()`` can be:

- a class (or dotted import path to one), constructed directly
- a ``(class_or_instance, method_name)`` pair, or a method object
- an invokable object (anything with ``__call__`` that is not a function)
- a function, lambda or ``functools.partial``
- a plain object, used as a pre-built singleton
"""

import functools
import importlib
import inspect
from enum import Enum
from typing import Any

_FUNCTION_TYPES = (functools.partial,)


def import_string(path: str) -> Any:
    """Import a dotted path such as ``package.module.Name``.

    The longest importable module prefix is imported and the remaining
    segments are looked up as attributes, so nested classes and methods
    (``package.module.Outer.Inner``) work too.

    Raises:
        ImportError: When no part of the path can be imported or an
            attribute along the way does not exist.
    """
    if not path or not isinstance(path, str):
        raise ImportError(f"Invalid import path: {path!r}")

    parts = path.split('.')
    for index in range(len(parts), 0, -1):
        module_name = '.'.join(parts[:index])
        try:
            target = importlib.import_module(module_name)
        except ImportError:
            continue

        try:
            for attribute in parts[index:]:
                target = getattr(target, attribute)
        except AttributeError as e:
            raise ImportError(f"Cannot import '{path}': {e}") from e
        return target

    # Fall back to builtins for bare names like 'dict'
    builtins = importlib.import_module('builtins')
    if len(parts) == 1 and hasattr(builtins, path):
        return getattr(builtins, path)

    raise ImportError(f"No module found for '{path}'")


def _try_import(path: str) -> Any:
    try:
        return import_string(path)
    except ImportError:
        return None


def is_function(subject: Any) -> bool:
    """Function, lambda, builtin or partial (not a bound method)."""
    return (
        inspect.isfunction(subject)
        or inspect.isbuiltin(subject)
        or isinstance(subject, _FUNCTION_TYPES)
    )


def is_service_instance(subject: Any) -> bool:
    """Determine if the subject is an object instance rather than a factory.

    Invokable objects count as instances: registering one binds the
    object itself, not the result of calling it. Tuples are instances
    unless they form a ``(owner, method_name)`` pair.
    """
    return not (
        subject is None
        or isinstance(subject, str)
        or is_method(subject)
        or inspect.isclass(subject)
        or is_function(subject)
    )


def is_method(subject: Any) -> bool:
    """Determine if the subject is a method callable.

    Accepts bound methods and ``(class_or_instance, method_name)`` pairs.
    """
    if inspect.ismethod(subject):
        return True
    return (
        isinstance(subject, tuple)
        and len(subject) == 2
        and isinstance(subject[1], str)
    )


def is_invokable(subject: Any) -> bool:
    """Object exposing ``__call__`` that is not itself a function or class."""
    return (
        callable(subject)
        and not inspect.isclass(subject)
        and not inspect.ismethod(subject)
        and not is_function(subject)
    )


def is_classname(subject: Any) -> bool:
    """Determine if the subject is a class, or a dotted path to one."""
    if inspect.isclass(subject):
        return True
    if isinstance(subject, str):
        return inspect.isclass(_try_import(subject))
    return False


class CallableType(Enum):
    """Shapes a service factory can take"""
    CLASS = "CLASS"
    METHOD = "METHOD"
    INVOKABLE = "INVOKABLE"
    FUNCTION = "FUNCTION"
    INSTANCE = "INSTANCE"

    @classmethod
    def of(cls, subject: Any) -> 'CallableType':
        """Classify a factory, class or instance.

        Strings are treated as class names when they import to a class,
        otherwise as dotted paths to a function.
        """
        if is_classname(subject):
            return cls.CLASS
        if is_method(subject):
            return cls.METHOD
        if is_function(subject) or isinstance(subject, str):
            return cls.FUNCTION
        if is_invokable(subject):
            return cls.INVOKABLE
        return cls.INSTANCE
