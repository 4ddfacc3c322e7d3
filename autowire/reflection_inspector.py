"""
ReflectionInspector

Determines class, method and function parameters from their signatures
and type hints, using ``inspect.signature()`` and
``typing.get_type_hints()``.

Forward references (string annotations, PEP 563) are resolved through
``typing.get_type_hints()`` first. When that fails for the whole callable,
each string annotation is evaluated on its own in the namespace of the
module that defines the callable.
"""

import functools
import inspect
import types
import typing
from typing import Any, Callable, Dict, List, Optional

from .callable_type import import_string
from .exceptions import (
    UndefinedClassError,
    UndefinedFunctionError,
    UndefinedMethodError,
    UnknownTypeError,
    describe,
)
from .inspector import InspectorInterface, create_parameter, unwrap_annotation
from .parameter import DefaultCallback, Parameter

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class ReflectionInspector(InspectorInterface):
    """Inspector backed by the ``inspect`` and ``typing`` modules.

    This is the default inspector used by ``Container``.

    Example::

        class Repository:
            def __init__(self, db: Database, table: str = 'users'):
                ...

        ReflectionInspector().inspect_class(Repository)
        # [NamedClassParameter(db: ...Database), StringParameter(table: string)]
    """

    def inspect_class(self, cls: Any) -> List[Parameter]:
        cls = self._resolve_class(cls)
        constructor = cls.__init__

        # Classes that never define __init__ take no arguments
        if constructor is object.__init__:
            return []

        try:
            signature = inspect.signature(constructor)
        except (ValueError, TypeError):
            # C-level constructors without an introspectable signature
            return []

        return self._inspect_signature(
            signature,
            constructor,
            f"{describe(cls)}.__init__",
            skip_first=True
        )

    def inspect_method(self, owner: Any, method: str) -> List[Parameter]:
        if isinstance(owner, str):
            owner = self._resolve_class(owner)

        cls = owner if inspect.isclass(owner) else type(owner)

        try:
            raw = inspect.getattr_static(owner, method)
        except AttributeError:
            raise UndefinedMethodError(cls, method) from None

        target = getattr(owner, method)
        if not callable(target):
            raise UndefinedMethodError(cls, method)

        # Plain functions looked up on the class still expect `self`
        skip_first = inspect.isclass(owner) and isinstance(raw, types.FunctionType)

        try:
            signature = inspect.signature(target)
        except (ValueError, TypeError) as e:
            raise UndefinedMethodError(cls, method) from e

        return self._inspect_signature(
            signature,
            target,
            f"{describe(cls)}.{method}",
            skip_first=skip_first
        )

    def inspect_function(self, function: Any) -> List[Parameter]:
        if isinstance(function, str):
            try:
                function = import_string(function)
            except ImportError as e:
                raise UndefinedFunctionError(function) from e

        if not callable(function):
            raise UndefinedFunctionError(function)

        try:
            signature = inspect.signature(function)
        except (ValueError, TypeError) as e:
            raise UndefinedFunctionError(function) from e

        # Hints live on the wrapped function, not on the partial object
        hints_target = function
        while isinstance(hints_target, functools.partial):
            hints_target = hints_target.func

        return self._inspect_signature(signature, hints_target, describe(function))

    @staticmethod
    def _resolve_class(cls: Any) -> type:
        if isinstance(cls, str):
            try:
                resolved = import_string(cls)
            except ImportError as e:
                raise UndefinedClassError(cls) from e
        else:
            resolved = cls

        if not inspect.isclass(resolved):
            raise UndefinedClassError(cls)

        return resolved

    def _inspect_signature(
        self,
        signature: inspect.Signature,
        target: Callable,
        function_name: str,
        skip_first: bool = False
    ) -> List[Parameter]:
        hints = self._resolve_type_hints(target)
        formal = list(signature.parameters.values())

        if skip_first and formal:
            formal = formal[1:]

        parameters = []
        for param in formal:
            if param.kind in _SKIPPED_KINDS:
                continue

            parameters.append(
                self._inspect_parameter(param, hints, target, function_name)
            )

        return parameters

    def _inspect_parameter(
        self,
        param: inspect.Parameter,
        hints: Dict[str, Any],
        target: Callable,
        function_name: str
    ) -> Parameter:
        if param.annotation is inspect.Parameter.empty:
            annotation = None
        else:
            annotation = hints.get(param.name, param.annotation)

        if isinstance(annotation, str):
            annotation = self._resolve_string_annotation(target, param.name, annotation)

        annotation, nullable = unwrap_annotation(param.name, annotation, function_name)
        default = self._prepare_default_callback(param)

        # `def f(x: Service = None)` implies the parameter is optional
        if param.default is None:
            nullable = True

        return create_parameter(
            param.name,
            annotation,
            nullable,
            default,
            param.kind == inspect.Parameter.KEYWORD_ONLY
        )

    @staticmethod
    def _prepare_default_callback(param: inspect.Parameter) -> Optional[DefaultCallback]:
        if param.default is inspect.Parameter.empty:
            return None

        value = param.default
        return lambda: value

    @staticmethod
    def _resolve_type_hints(target: Callable) -> Dict[str, Any]:
        """Resolve type hints, returning an empty dict when that fails.

        Failing here is not fatal: each string annotation gets a second
        chance in ``_resolve_string_annotation``.
        """
        try:
            return typing.get_type_hints(target, include_extras=True)
        except (NameError, TypeError, AttributeError, SyntaxError, RecursionError):
            return {}

    @staticmethod
    def _resolve_string_annotation(
        target: Callable,
        param_name: str,
        annotation: str
    ) -> Any:
        """Evaluate a single forward reference in its module's namespace.

        Raises:
            UnknownTypeError: When the annotation cannot be evaluated
        """
        namespace: Dict[str, Any] = {}
        namespace.update(vars(typing))

        module = inspect.getmodule(target)
        if module is not None:
            namespace.update(vars(module))

        globalns = getattr(target, '__globals__', None)
        if globalns:
            namespace.update(globalns)

        try:
            return eval(annotation, namespace)
        except Exception as e:
            raise UnknownTypeError(param_name, annotation) from e
