"""
Loader Tests

Tests for registering services from JSON files and Python modules
"""

import sys
import os
import json
import shutil
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from autowire import Container, JsonLoader, MappingLoader, ModuleLoader
from autowire.exceptions import LoaderError, UndefinedServiceError
from autowire.loader import ServiceDefinition

from conftest import ContainerTestCase
from fixtures import (
    CacheService,
    Database,
    FrenchGreeter,
    Greeter,
    Mailer,
    UserRepository,
)


class TestServiceDefinition(unittest.TestCase):
    """Tests for parsing single service map entries"""

    def test_none(self):
        definition = ServiceDefinition.parse('fixtures.Database', None)

        self.assertIsNone(definition.handler)
        self.assertTrue(definition.singleton)

    def test_handler_string(self):
        definition = ServiceDefinition.parse('fixtures.Greeter', 'fixtures.FrenchGreeter')
        self.assertEqual(definition.handler, 'fixtures.FrenchGreeter')

    def test_full_definition(self):
        definition = ServiceDefinition.parse('mailer', {
            'handler': 'fixtures.create_mailer',
            'singleton': False,
            'arguments': {'host': 'localhost'},
            'tags': ['mail'],
            'aliases': ['smtp'],
        })

        self.assertEqual(definition.handler, 'fixtures.create_mailer')
        self.assertFalse(definition.singleton)
        self.assertEqual(definition.arguments, {'host': 'localhost'})
        self.assertEqual(definition.tags, ['mail'])
        self.assertEqual(definition.aliases, ['smtp'])

    def test_service_key(self):
        self.assertIs(ServiceDefinition('fixtures.Database').service_key(), Database)
        self.assertEqual(ServiceDefinition('mailer').service_key(), 'mailer')

    def test_invalid_entries(self):
        invalid = [
            ('mailer', 42),
            ('mailer', {'handler': 42}),
            ('mailer', {'handler': ''}),
            ('mailer', {'arguments': ['host']}),
            ('mailer', {'tags': 'mail'}),
            ('mailer', {'aliases': [1]}),
            ('mailer', {'shared': True}),
            ('', None),
            (42, None),
        ]

        for name, raw in invalid:
            with self.assertRaises(LoaderError, msg=(name, raw)):
                ServiceDefinition.parse(name, raw)

    def test_unknown_option_is_named(self):
        with self.assertRaises(LoaderError) as ctx:
            ServiceDefinition.parse('mailer', {'shared': True})

        self.assertIn('shared', str(ctx.exception))


class TestMappingLoader(ContainerTestCase):

    def test_load_returns_container(self):
        self.assertIs(self.container.load(MappingLoader({})), self.container)

    def test_registers_services(self):
        self.container.load(MappingLoader({
            'fixtures.Database': None,
            'fixtures.CacheService': None,
            'fixtures.UserRepository': {'aliases': ['users']},
        }))

        repository = self.container.get('users')

        self.assertIsInstance(repository, UserRepository)
        self.assertIs(repository.db, self.container.get(Database))

    def test_tags_and_arguments(self):
        self.container.load(MappingLoader({
            'fixtures.Mailer': {'arguments': {'host': 'mx'}, 'tags': ['mail', 'smtp']},
        }))

        (mailer,) = self.container.tagged('smtp')
        self.assertEqual(mailer.host, 'mx')

    def test_malformed_entry_is_not_registered(self):
        with self.assertRaises(LoaderError):
            self.container.load(MappingLoader({'fixtures.Database': {'aliases': 'db'}}))

        self.assertFalse(self.container.has('db'))

    def test_existing_registrations_are_replaced(self):
        self.container.register(Greeter, lambda: None)

        self.container.load(MappingLoader({'fixtures.Greeter': 'fixtures.FrenchGreeter'}))

        self.assertIsInstance(self.container.get(Greeter), FrenchGreeter)


class TestJsonLoader(ContainerTestCase):

    def setUp(self):
        super().setUp()
        self.directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.directory)

    def write(self, content, name='services.json'):
        path = os.path.join(self.directory, name)
        with open(path, 'w', encoding='utf-8') as handle:
            if isinstance(content, str):
                handle.write(content)
            else:
                json.dump(content, handle)
        return path

    def test_load_file(self):
        path = self.write({
            'fixtures.Database': None,
            'fixtures.Mailer': {
                'singleton': False,
                'arguments': {'host': 'localhost', 'port': 2525},
                'tags': ['mail'],
            },
        })

        self.container.load(JsonLoader(path))

        mailer = self.container.get(Mailer)
        self.assertEqual(mailer.port, 2525)
        self.assertIsNot(mailer, self.container.get(Mailer))
        self.assertEqual(len(self.container.tagged('mail')), 1)
        self.assertIsInstance(self.container.get(Database), Database)

    def test_missing_file_is_skipped(self):
        path = os.path.join(self.directory, 'missing.json')

        with self.assertLogs('autowire.loader', level='WARNING'):
            self.assertIs(self.container.load(JsonLoader(path)), self.container)

        self.assertFalse(self.container.has(Database))

    def test_empty_object(self):
        path = self.write({})
        self.assertIs(self.container.load(JsonLoader(path)), self.container)

    def test_invalid_json(self):
        path = self.write('{"fixtures.Database": ')

        with self.assertRaises(LoaderError) as ctx:
            self.container.load(JsonLoader(path))

        self.assertIn(path, str(ctx.exception))

    def test_not_an_object(self):
        path = self.write(['fixtures.Database'])

        with self.assertRaises(LoaderError):
            self.container.load(JsonLoader(path))

    def test_repr(self):
        self.assertEqual(repr(JsonLoader('services.json')), "JsonLoader('services.json')")


class TestModuleLoader(ContainerTestCase):

    def test_load_module(self):
        self.container.load(ModuleLoader('service_map'))

        self.assertIsInstance(self.container.get(Greeter), FrenchGreeter)
        self.assertIsInstance(self.container.get('users'), UserRepository)
        self.assertEqual(self.container.get('mail.smtp').host, 'smtp.example.com')
        self.assertIsNot(self.container.get(CacheService), self.container.get(CacheService))

    def test_missing_module_is_skipped(self):
        with self.assertLogs('autowire.loader', level='WARNING'):
            self.container.load(ModuleLoader('no_such_service_map'))

        with self.assertRaises(UndefinedServiceError):
            self.container.get(Database)

    def test_missing_attribute_is_skipped(self):
        with self.assertLogs('autowire.loader', level='WARNING'):
            self.container.load(ModuleLoader('service_map', 'MISSING'))

    def test_attribute_must_be_a_mapping(self):
        with self.assertRaises(LoaderError):
            self.container.load(ModuleLoader('service_map', 'BROKEN'))

    def test_repr(self):
        self.assertEqual(
            repr(ModuleLoader('service_map')),
            "ModuleLoader('service_map', 'SERVICES')"
        )


if __name__ == '__main__':
    unittest.main()
