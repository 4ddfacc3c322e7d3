"""
Test Configuration and Utilities

Common base classes and helper functions for autowire tests
"""

import unittest
from typing import Type

from autowire import Container


class ContainerTestCase(unittest.TestCase):
    """
    Base test case class for container tests.

    Provides a fresh container for every test.
    """

    def setUp(self):
        """Create an empty container before each test"""
        self.container = Container()


def create_simple_container(*service_classes: Type) -> Container:
    """
    Create a container with the given classes registered as themselves.

    Args:
        *service_classes: Classes to register

    Returns:
        A Container with the registrations

    Example:
        >>> container = create_simple_container(Database, CacheService)
        >>> container.get(Database)
    """
    container = Container()
    for cls in service_classes:
        container.register(cls)
    return container
