"""
Loaders

Register services from configuration instead of code. A loader only uses
the public ``Container`` API and returns the container for chaining::

    container = Container().load(JsonLoader('config/services.json'))

Service maps share one format, whether they come from JSON or from a
``SERVICES`` dict in a Python module::

    {
        "app.storage.Storage": {
            "handler": "app.storage.DiskStorage",
            "singleton": true,
            "arguments": {"root": "/var/data"},
            "tags": ["storage"],
            "aliases": ["storage"]
        },
        "app.mail.Mailer": "app.mail.SmtpMailer"
    }

Service names that import to a class are registered under the class
itself, anything else under the plain string.
"""

import importlib
import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Mapping, Optional

from .callable_type import import_string, is_classname
from .exceptions import LoaderError

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {'handler', 'singleton', 'arguments', 'tags', 'aliases'}


@dataclass
class ServiceDefinition:
    """One parsed entry of a service map"""
    name: str
    handler: Optional[str] = None
    singleton: bool = True
    arguments: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    @classmethod
    def parse(cls, name: Any, raw: Any) -> 'ServiceDefinition':
        """Build a definition from its raw config value.

        Args:
            name: Service name (map key)
            raw: None, a handler string, or a dict of options

        Raises:
            LoaderError: When the entry is malformed
        """
        if not isinstance(name, str) or not name:
            raise LoaderError(f"Service names must be non-empty strings, got {name!r}")

        if raw is None:
            return cls(name)
        if isinstance(raw, str):
            return cls(name, handler=raw)
        if not isinstance(raw, Mapping):
            raise LoaderError(
                f"Definition of service '{name}' must be a string or an object, "
                f"got {type(raw).__name__}"
            )

        unknown = set(raw) - _KNOWN_KEYS
        if unknown:
            raise LoaderError(
                f"Unknown option(s) for service '{name}': {', '.join(sorted(unknown))}"
            )

        handler = raw.get('handler')
        if handler is not None and (not isinstance(handler, str) or not handler):
            raise LoaderError(f"Handler of service '{name}' must be a dotted path")

        arguments = raw.get('arguments', {})
        if not isinstance(arguments, Mapping):
            raise LoaderError(f"Arguments of service '{name}' must be an object")

        tags = cls._string_list(name, 'tags', raw.get('tags', []))
        aliases = cls._string_list(name, 'aliases', raw.get('aliases', []))

        return cls(
            name,
            handler=handler,
            singleton=bool(raw.get('singleton', True)),
            arguments=dict(arguments),
            tags=tags,
            aliases=aliases,
        )

    @staticmethod
    def _string_list(name: str, option: str, value: Any) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise LoaderError(f"Option '{option}' of service '{name}' must be a list of strings")
        return list(value)

    def service_key(self) -> Hashable:
        """The class named by ``name`` when importable, else the string."""
        if is_classname(self.name):
            return import_string(self.name)
        return self.name

    def register(self, container: 'Container') -> None:
        key = self.service_key()

        entry = container.register(key, self.handler)
        entry.set_once(self.singleton)
        entry.set_arguments(self.arguments)
        entry.set_tags(self.tags)

        for alias in self.aliases:
            container.alias(key, alias)


class LoaderInterface(ABC):
    """Source of service registrations"""

    @abstractmethod
    def load(self, container: 'Container') -> 'Container':
        """Register services into ``container`` and return it."""


class MappingLoader(LoaderInterface):
    """Loads services from an in-memory service map"""

    def __init__(self, services: Mapping[str, Any]):
        self._services = services

    def load(self, container: 'Container') -> 'Container':
        services = self._read()

        if not services:
            return container

        for name, raw in services.items():
            ServiceDefinition.parse(name, raw).register(container)

        logger.debug("Loaded %d service(s) from %s", len(services), self)
        return container

    def _read(self) -> Optional[Mapping[str, Any]]:
        return self._services

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonLoader(MappingLoader):
    """Loads services from a JSON file.

    Missing or unreadable files are skipped with a warning; files that
    exist but do not contain a JSON object raise ``LoaderError``.
    """

    def __init__(self, file: str):
        super().__init__({})
        self._file = file

    def _read(self) -> Optional[Mapping[str, Any]]:
        if not os.path.isfile(self._file) or not os.access(self._file, os.R_OK):
            logger.warning("Service file %s is not readable, skipping", self._file)
            return None

        with open(self._file, encoding='utf-8') as handle:
            try:
                content = json.load(handle)
            except json.JSONDecodeError as e:
                raise LoaderError(f"Invalid JSON in service file {self._file}: {e}") from e

        if not isinstance(content, dict):
            raise LoaderError(f"Service file {self._file} must contain a JSON object")

        return content

    def __repr__(self) -> str:
        return f"JsonLoader({self._file!r})"


class ModuleLoader(MappingLoader):
    """Loads services from a dict attribute of a Python module.

    Example::

        # app/services.py
        SERVICES = {
            'app.mail.Mailer': {'handler': 'app.mail.SmtpMailer', 'singleton': False},
        }

        container.load(ModuleLoader('app.services'))
    """

    def __init__(self, module: str, attribute: str = 'SERVICES'):
        super().__init__({})
        self._module = module
        self._attribute = attribute

    def _read(self) -> Optional[Mapping[str, Any]]:
        try:
            module = importlib.import_module(self._module)
        except ImportError:
            logger.warning("Service module %s cannot be imported, skipping", self._module)
            return None

        content = getattr(module, self._attribute, None)
        if content is None:
            logger.warning("Service module %s has no %s, skipping", self._module, self._attribute)
            return None

        if not isinstance(content, Mapping):
            raise LoaderError(f"{self._module}.{self._attribute} must be a dict")

        return content

    def __repr__(self) -> str:
        return f"ModuleLoader({self._module!r}, {self._attribute!r})"
