"""
DocstringInspector

Determines parameter types from reStructuredText docstring fields instead
of type hints::

    def create_mailer(host, port=25):
        \"\"\"
        :param str host: SMTP host
        :param int port: SMTP port
        :type port: Optional[int]
        \"\"\"

This exists mostly as an example of a non-annotation based inspector, for
code bases that document types without annotating them. Prefer the
``ReflectionInspector``: docstrings are easily out of date.

Parameter names, their order, defaults and keyword-only markers still come
from the signature. Only the types are read from the docstring; parameters
the docstring does not mention are mixed.
"""

import builtins
import inspect
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from .exceptions import CompoundTypeError, UnknownTypeError
from .inspector import create_parameter
from .parameter import Parameter
from .reflection_inspector import _SKIPPED_KINDS, ReflectionInspector

_PARAM_FIELD = re.compile(
    r'^\s*:param\s+(?:(?P<type>[^:\n]+?)\s+)?(?P<name>[A-Za-z_]\w*)\s*:',
    re.MULTILINE
)
_TYPE_FIELD = re.compile(
    r'^\s*:type\s+(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>[^\n]+?)\s*$',
    re.MULTILINE
)
_OPTIONAL = re.compile(r'^Optional\[(?P<inner>.+)\]$')
_UNION = re.compile(r'^Union\[(?P<inner>.+)\]$')
_ALTERNATIVES = re.compile(r'\s*\|\s*|\s+or\s+')

_PRIMITIVES: Dict[str, Any] = {
    'int': int,
    'integer': int,
    'float': float,
    'double': float,
    'bool': bool,
    'boolean': bool,
    'str': str,
    'string': str,
    'list': list,
    'array': list,
    'tuple': tuple,
    'dict': dict,
    'set': set,
    'object': object,
    'mixed': None,
    'Any': None,
}


class DocstringInspector(ReflectionInspector):
    """Inspector reading ``:param:`` and ``:type:`` docstring fields.

    Classes, methods and functions are located exactly like the
    ``ReflectionInspector`` does, so the same lookup errors apply.
    Parameters are returned in declaration order. A callable without a
    docstring of its own has no parameters; docstrings inherited from a
    base class are ignored.
    """

    def _inspect_signature(
        self,
        signature: inspect.Signature,
        target: Callable,
        function_name: str,
        skip_first: bool = False
    ) -> List[Parameter]:
        docstring = getattr(target, '__doc__', None)

        if not docstring:
            return []

        documented = dict(self._parse_docstring(inspect.cleandoc(docstring)))
        namespace = self._namespace(target)
        formal = list(signature.parameters.values())

        if skip_first and formal:
            formal = formal[1:]

        return [
            self._parse_parameter(param, documented.get(param.name), function_name, namespace)
            for param in formal
            if param.kind not in _SKIPPED_KINDS
        ]

    @staticmethod
    def _parse_docstring(docstring: str) -> List[Tuple[str, Optional[str]]]:
        """Return (name, type) pairs in documentation order."""
        declared: Dict[str, Optional[str]] = {}

        for match in _PARAM_FIELD.finditer(docstring):
            declared.setdefault(match.group('name'), match.group('type'))

        # `:type name:` wins over an inline `:param type name:`
        for match in _TYPE_FIELD.finditer(docstring):
            declared[match.group('name')] = match.group('type')

        return list(declared.items())

    def _parse_parameter(
        self,
        param: inspect.Parameter,
        declared: Optional[str],
        function_name: str,
        namespace: Dict[str, Any]
    ) -> Parameter:
        default = self._prepare_default_callback(param)
        keyword_only = param.kind == inspect.Parameter.KEYWORD_ONLY

        if not declared:
            return create_parameter(param.name, None, False, default, keyword_only)

        type_name, nullable = self._split_nullable(param.name, declared.strip(), function_name)
        annotation = self._resolve_type(param.name, type_name, namespace)

        if param.default is None:
            nullable = True

        return create_parameter(param.name, annotation, nullable, default, keyword_only)

    @staticmethod
    def _split_nullable(name: str, declared: str, function_name: str) -> Tuple[str, bool]:
        nullable = False

        if declared.startswith('?'):
            declared, nullable = declared[1:], True

        match = _OPTIONAL.match(declared)
        if match:
            declared, nullable = match.group('inner').strip(), True

        match = _UNION.match(declared)
        if match:
            members = [member.strip() for member in match.group('inner').split(',')]
        else:
            members = _ALTERNATIVES.split(declared)

        concrete = [member for member in members if member not in ('None', 'NoneType')]
        if len(concrete) != 1:
            raise CompoundTypeError(name, function_name)

        return concrete[0], nullable or len(concrete) < len(members)

    @staticmethod
    def _resolve_type(name: str, type_name: str, namespace: Dict[str, Any]) -> Any:
        if type_name in _PRIMITIVES:
            return _PRIMITIVES[type_name]

        try:
            resolved = eval(type_name, namespace)
        except Exception as e:
            raise UnknownTypeError(name, type_name) from e

        if not isinstance(resolved, type) and getattr(resolved, '__origin__', None) is None:
            raise UnknownTypeError(name, type_name)

        return resolved

    @staticmethod
    def _namespace(target: Callable) -> Dict[str, Any]:
        namespace: Dict[str, Any] = dict(vars(builtins))

        module = inspect.getmodule(target)
        if module is not None:
            namespace.update(vars(module))

        return namespace
