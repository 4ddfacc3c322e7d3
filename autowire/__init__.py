# Public API
from .cached_inspector import CachedInspector
from .callable_type import CallableType
from .container import Container
from .docstring_inspector import DocstringInspector
from .entry import Entry
from .exceptions import (
    AutowireError,
    CircularDependencyError,
    CompoundTypeError,
    ErrorKind,
    InvalidArgumentError,
    LoaderError,
    MissingArgumentError,
    NestedServiceError,
    ServiceInstantiationError,
    UndefinedClassError,
    UndefinedDefaultValueError,
    UndefinedFunctionError,
    UndefinedMethodError,
    UndefinedServiceError,
    UnexpectedTypeError,
    UnknownTypeError,
)
from .inspector import InspectorInterface
from .loader import JsonLoader, LoaderInterface, MappingLoader, ModuleLoader
from .parameter import (
    ArrayParameter,
    BooleanParameter,
    MixedParameter,
    NamedClassParameter,
    NumericParameter,
    ObjectParameter,
    Parameter,
    StringParameter,
)
from .reflection_inspector import ReflectionInspector

__all__ = [
    "Container",
    "Entry",
    "CallableType",
    # Inspectors
    "InspectorInterface",
    "ReflectionInspector",
    "DocstringInspector",
    "CachedInspector",
    # Parameters
    "Parameter",
    "ArrayParameter",
    "BooleanParameter",
    "MixedParameter",
    "NamedClassParameter",
    "NumericParameter",
    "ObjectParameter",
    "StringParameter",
    # Loaders
    "LoaderInterface",
    "MappingLoader",
    "JsonLoader",
    "ModuleLoader",
    # Exceptions
    "ErrorKind",
    "AutowireError",
    "UndefinedServiceError",
    "UndefinedClassError",
    "UndefinedMethodError",
    "UndefinedFunctionError",
    "CompoundTypeError",
    "UnknownTypeError",
    "UndefinedDefaultValueError",
    "MissingArgumentError",
    "InvalidArgumentError",
    "NestedServiceError",
    "CircularDependencyError",
    "ServiceInstantiationError",
    "UnexpectedTypeError",
    "LoaderError",
]

__version__ = '0.1.0'
