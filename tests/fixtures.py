"""
Test Fixtures

Common test classes used across test modules
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union


class Database:
    """Test database class"""

    def __init__(self):
        self.name = "TestDB"


class CacheService:
    """Test cache service"""

    def __init__(self):
        self.cache = {}


class UserRepository:
    """Test repository with dependencies"""

    def __init__(self, db: Database, cache: CacheService):
        self.db = db
        self.cache = cache


class CounterService:
    """Service with mutable state for testing singleton behavior"""

    def __init__(self):
        self.counter = 0

    def increment(self):
        self.counter += 1
        return self.counter


class Level1:
    """First level of nested dependencies"""
    pass


class Level2:
    """Second level of nested dependencies"""

    def __init__(self, l1: Level1):
        self.l1 = l1


class Level3:
    """Third level of nested dependencies"""

    def __init__(self, l2: Level2):
        self.l2 = l2


class Greeter(ABC):
    """Abstract service bound to implementations in tests"""

    @abstractmethod
    def greet(self, name: str) -> str:
        pass


class EnglishGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Hello, {name}"


class FrenchGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Bonjour, {name}"


class Mailer:
    """Service with builtin parameters and defaults"""

    def __init__(self, host: str, port: int = 25, secure: bool = False):
        self.host = host
        self.port = port
        self.secure = secure


class Notifier:
    """Service depending on an abstract Greeter"""

    def __init__(self, greeter: Greeter, mailer: Optional[Mailer] = None):
        self.greeter = greeter
        self.mailer = mailer


class OptionalCache:
    """Nullable dependency without a default value"""

    def __init__(self, cache: Optional[CacheService]):
        self.cache = cache


class Settings:
    """Keyword-only parameters"""

    def __init__(self, *, debug: bool = False, name: str = 'app'):
        self.debug = debug
        self.name = name


class Report:
    """Variadic parameters are skipped"""

    def __init__(self, title: str, *lines, **meta):
        self.title = title
        self.lines = lines
        self.meta = meta


class Batch:
    """Mixed, array and object parameters"""

    def __init__(self, items: List[int], payload, owner: object = None):
        self.items = items
        self.payload = payload
        self.owner = owner


class UnionService:
    """Union parameters are not supported"""

    def __init__(self, value: Union[int, str]):
        self.value = value


class PipeUnionService:
    """PEP 604 unions are not supported either"""

    def __init__(self, value: int | str):
        self.value = value


class ServiceA:
    """First half of a dependency cycle"""

    def __init__(self, b: 'ServiceB'):
        self.b = b


class ServiceB:
    """Second half of a dependency cycle"""

    def __init__(self, a: ServiceA):
        self.a = a


class Plugin(ABC):
    """Base class for tagged services"""

    @abstractmethod
    def name(self) -> str:
        pass


class PluginOne(Plugin):
    def name(self) -> str:
        return 'one'


class PluginTwo(Plugin):
    def name(self) -> str:
        return 'two'


class MailerFactory:
    """Static, class and instance method factories"""

    def __init__(self):
        self.created = 0

    @staticmethod
    def build(host: str) -> Mailer:
        return Mailer(host)

    @classmethod
    def localhost(cls, port: int = 2525) -> Mailer:
        return Mailer('localhost', port)

    def make(self, host: str, secure: bool = True) -> Mailer:
        self.created += 1
        return Mailer(host, secure=secure)


class RepositoryFactory:
    """Invokable factory object"""

    def __call__(self, db: Database, cache: CacheService) -> UserRepository:
        return UserRepository(db, cache)


def create_database() -> Database:
    return Database()


def create_mailer(host: str, port: int = 587) -> Mailer:
    return Mailer(host, port)


def documented_factory(host, port, database, cache=None):
    """
    Build a mailer from documented parameters.

    :param str host: SMTP host
    :param int port: SMTP port
    :param Database database: Database used for logging
    :param cache: Optional cache
    :type cache: Optional[CacheService]
    """
    return Mailer(host, port)


def undocumented_factory(host, port):
    return Mailer(host, port)


def compound_documented_factory(value):
    """
    :param value: A value
    :type value: int | str
    """
    return value


def unknown_documented_factory(value):
    """
    :param NoSuchType value: A value
    """
    return value
