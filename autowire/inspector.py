"""
InspectorInterface

Contract for components that turn a class, method or function into an
ordered list of ``Parameter`` descriptors, plus the classification table
shared by every implementation.
"""

import types
import typing
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from .exceptions import CompoundTypeError, UnknownTypeError
from .parameter import (
    ArrayParameter,
    BooleanParameter,
    DefaultCallback,
    MixedParameter,
    NamedClassParameter,
    NumericParameter,
    ObjectParameter,
    Parameter,
    StringParameter,
)

_ARRAY_TYPES = (list, tuple, dict, set, frozenset)
_NONE_TYPE = type(None)


class InspectorInterface(ABC):
    """Determines the parameters of classes, methods and functions.

    Implementations must preserve declaration order: the container
    passes arguments positionally in the order returned.
    """

    @abstractmethod
    def inspect_class(self, cls: Any) -> List[Parameter]:
        """Inspect the parameters required to instantiate the given class.

        Args:
            cls: A class or a dotted import path to one

        Returns:
            Constructor parameters, empty if the class has no constructor

        Raises:
            UndefinedClassError: If the class cannot be resolved
            CompoundTypeError: If a parameter is annotated with a union
            UnknownTypeError: If a parameter annotation cannot be classified
        """

    @abstractmethod
    def inspect_method(self, owner: Any, method: str) -> List[Parameter]:
        """Inspect the parameters of a method.

        Args:
            owner: Class, instance, or dotted import path to a class
            method: Method name

        Raises:
            UndefinedClassError: If the owning class cannot be resolved
            UndefinedMethodError: If the class has no such method
            CompoundTypeError: If a parameter is annotated with a union
            UnknownTypeError: If a parameter annotation cannot be classified
        """

    @abstractmethod
    def inspect_function(self, function: Any) -> List[Parameter]:
        """Inspect the parameters of a function, lambda or partial.

        Args:
            function: Callable or dotted import path to one

        Raises:
            UndefinedFunctionError: If the function cannot be resolved
            CompoundTypeError: If a parameter is annotated with a union
            UnknownTypeError: If a parameter annotation cannot be classified
        """


def unwrap_annotation(
    name: str,
    annotation: Any,
    function_name: str
) -> Tuple[Any, bool]:
    """Strip ``Annotated`` and ``Optional`` wrappers from an annotation.

    Returns:
        Tuple of (bare annotation, whether None is allowed)

    Raises:
        CompoundTypeError: When a union has more than one non-None member
    """
    if typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = typing.get_args(annotation)
        concrete = [member for member in members if member is not _NONE_TYPE]
        if len(concrete) != 1:
            raise CompoundTypeError(name, function_name)
        return unwrap_annotation(name, concrete[0], function_name)[0], len(concrete) < len(members)

    return annotation, False


def create_parameter(
    name: str,
    annotation: Any,
    nullable: bool = False,
    default: Optional[DefaultCallback] = None,
    keyword_only: bool = False
) -> Parameter:
    """Pick the Parameter subclass matching an unwrapped annotation.

    Raises:
        UnknownTypeError: When the annotation is not a class or a known tag
    """
    if annotation is None or annotation is typing.Any:
        return MixedParameter(name, default, keyword_only)

    # Parameterised generics (list[int], Dict[str, Any]) classify by origin
    origin = typing.get_origin(annotation)
    if origin is not None and isinstance(origin, type):
        annotation = origin

    if annotation in _ARRAY_TYPES:
        return ArrayParameter(name, nullable, default, keyword_only)
    if annotation is bool:
        return BooleanParameter(name, nullable, default, keyword_only)
    if annotation is int or annotation is float:
        return NumericParameter(name, annotation.__name__, nullable, default, keyword_only)
    if annotation is str:
        return StringParameter(name, nullable, default, keyword_only)
    if annotation is object:
        return ObjectParameter(name, nullable, default, keyword_only)
    if isinstance(annotation, type) and annotation is not _NONE_TYPE:
        return NamedClassParameter(name, annotation, nullable, default, keyword_only)

    raise UnknownTypeError(name, str(annotation))
