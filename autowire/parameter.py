"""
Parameter

Typed descriptors for a single formal parameter of a constructor, method
or function. The inspectors produce one of these per parameter and the
container uses ``accepts()`` to validate resolved arguments before the
factory is called.

The acceptance rules are loose: numeric strings
are valid numbers and any scalar is a valid string or boolean. The only
promise ``accepts()`` makes is that the value is of a reasonable shape for
the parameter, not that it is a sensible value.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .exceptions import UndefinedDefaultValueError, describe

_SCALAR_TYPES = (bool, int, float, str)
_ARRAY_TYPES = (list, tuple, dict, set, frozenset)
_NUMERIC_STRING = re.compile(
    r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$'
)

DefaultCallback = Callable[[], Any]


class Parameter(ABC):
    """Base class from which all parameter types inherit.

    The default value is wrapped in a callable so that it is only
    evaluated when the container actually needs it.

    Attributes:
        _name: Case-sensitive parameter name
        _nullable: Whether ``None`` is an acceptable value
        _default: Default value provider, or None when there is no default
        _keyword_only: Whether the parameter must be passed by name
    """

    def __init__(
        self,
        name: str,
        nullable: bool,
        default: Optional[DefaultCallback] = None,
        keyword_only: bool = False
    ):
        self._name = name
        self._nullable = nullable
        self._default = default
        self._keyword_only = keyword_only

    def get_name(self) -> str:
        return self._name

    def is_nullable(self) -> bool:
        return self._nullable

    def is_keyword_only(self) -> bool:
        return self._keyword_only

    def has_default(self) -> bool:
        return self._default is not None

    def get_default_callback(self) -> DefaultCallback:
        """Return a callback that resolves to the default value.

        Raises:
            UndefinedDefaultValueError: When the parameter has no default
        """
        if self._default is None:
            raise UndefinedDefaultValueError(self._name)

        return self._default

    @abstractmethod
    def get_type(self) -> str:
        """Return the primitive tag or qualified class name accepted."""

    @abstractmethod
    def is_builtin(self) -> bool:
        """Whether the parameter expects a plain value rather than a service.

        Builtin parameters are never auto-resolved from the container.
        """

    def accepts(self, value: Any) -> bool:
        """Determine if the given value would satisfy this parameter."""
        if value is None:
            return self._nullable
        return self._accepts_value(value)

    @abstractmethod
    def _accepts_value(self, value: Any) -> bool:
        """Check a non-None value."""

    def __repr__(self) -> str:
        nullable = "?" if self._nullable else ""
        return f"{type(self).__name__}({self._name}: {nullable}{self.get_type()})"


class ArrayParameter(Parameter):
    """Parameter expecting a list, tuple, dict or set"""

    def get_type(self) -> str:
        return 'array'

    def is_builtin(self) -> bool:
        return True

    def _accepts_value(self, value: Any) -> bool:
        return isinstance(value, _ARRAY_TYPES)


class BooleanParameter(Parameter):
    """Parameter expecting a boolean.

    Any scalar is accepted since it can be coerced with ``bool()``.
    """

    def get_type(self) -> str:
        return 'bool'

    def is_builtin(self) -> bool:
        return True

    def _accepts_value(self, value: Any) -> bool:
        return isinstance(value, _SCALAR_TYPES)


class NumericParameter(Parameter):
    """Parameter expecting either an int or a float.

    One class covers both since an int can stand in for a float and a
    numeric string for either. Booleans are rejected even though ``bool``
    subclasses ``int``.
    """

    def __init__(
        self,
        name: str,
        subtype: str,
        nullable: bool,
        default: Optional[DefaultCallback] = None,
        keyword_only: bool = False
    ):
        super().__init__(name, nullable, default, keyword_only)
        self._subtype = subtype

    def get_type(self) -> str:
        return self._subtype

    def is_builtin(self) -> bool:
        return True

    def _accepts_value(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        return isinstance(value, str) and _NUMERIC_STRING.match(value) is not None


class StringParameter(Parameter):
    """Parameter expecting a string; any scalar can be converted to one"""

    def get_type(self) -> str:
        return 'string'

    def is_builtin(self) -> bool:
        return True

    def _accepts_value(self, value: Any) -> bool:
        return isinstance(value, _SCALAR_TYPES)


class ObjectParameter(Parameter):
    """Parameter expecting some object that is not a plain scalar"""

    def get_type(self) -> str:
        return 'object'

    def is_builtin(self) -> bool:
        return False

    def _accepts_value(self, value: Any) -> bool:
        return not isinstance(value, _SCALAR_TYPES + (bytes, complex))


class NamedClassParameter(Parameter):
    """Parameter expecting an instance of a given class, ABC or protocol"""

    def __init__(
        self,
        name: str,
        cls: type,
        nullable: bool,
        default: Optional[DefaultCallback] = None,
        keyword_only: bool = False
    ):
        super().__init__(name, nullable, default, keyword_only)
        self._cls = cls

    def get_type(self) -> str:
        return describe(self._cls)

    def get_class(self) -> type:
        return self._cls

    def is_builtin(self) -> bool:
        return False

    def _accepts_value(self, value: Any) -> bool:
        try:
            return isinstance(value, self._cls)
        except TypeError:
            # Non runtime-checkable protocols cannot be used with isinstance()
            return True


class MixedParameter(Parameter):
    """Parameter without type requirements; always nullable"""

    def __init__(
        self,
        name: str,
        default: Optional[DefaultCallback] = None,
        keyword_only: bool = False
    ):
        super().__init__(name, True, default, keyword_only)

    def get_type(self) -> str:
        return 'mixed'

    def is_builtin(self) -> bool:
        return False

    def _accepts_value(self, value: Any) -> bool:
        return True
