"""
Support Module Tests

Exceptions, logging, configuration, storage backends and path parsing.

Run with: python -m pytest blobfs/tests -v

Version: 1.0.0
"""

import json
import logging
import os
import tempfile
import unittest


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_store_exception_codes(self):
        from blobfs.exceptions import (
            NodeStoreException,
            NotFoundError,
            WrongKindError,
            AlreadyExistsError,
            NoSuchPathError,
            RootRemovalError,
            InvalidNameError,
        )

        exc = NotFoundError(7)
        self.assertIsInstance(exc, NodeStoreException)
        self.assertEqual(exc.error_code, 4001)
        self.assertEqual(exc.slot_id, 7)
        self.assertIn("4001", str(exc))

        exc = WrongKindError(3, expected="file", actual="directory")
        self.assertEqual(exc.context['expected'], "file")
        self.assertEqual(exc.context['actual'], "directory")

        exc = AlreadyExistsError("a.txt", parent_id=0)
        self.assertEqual(exc.name, "a.txt")
        self.assertEqual(exc.error_code, 4005)

        exc = NoSuchPathError("docs/x", component="x")
        self.assertEqual(exc.component, "x")

        self.assertEqual(RootRemovalError().slot_id, 0)

        exc = InvalidNameError('')
        self.assertEqual(exc.error_code, 4009)
        self.assertEqual(exc.name, '')

    def test_storage_and_config_errors(self):
        from blobfs.exceptions import StorageError, StorageException, ConfigError

        exc = StorageError("local-fs", operation="set", reason="disk full")
        self.assertIsInstance(exc, StorageException)
        self.assertEqual(exc.error_code, 6001)
        self.assertIn("key=local-fs", str(exc))

        exc = ConfigError("bad", key="storage.backend")
        self.assertEqual(exc.context['key'], "storage.backend")


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def test_logger_singleton(self):
        from blobfs.logger import Logger, get_logger

        self.assertIs(Logger('store'), get_logger('store'))
        self.assertIsNot(Logger('store'), Logger('pointer'))
        self.assertEqual(get_logger('pointer').subsystem, 'pointer')

    def test_log_levels(self):
        from blobfs.logger import LogLevel

        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertEqual(LogLevel.from_name('debug'), LogLevel.DEBUG)
        with self.assertRaises(ValueError):
            LogLevel.from_name('verbose')

    def test_memory_handler_records_context(self):
        from blobfs.logger import MemoryLogHandler, get_logger

        handler = MemoryLogHandler(max_entries=2)
        std_logger = logging.getLogger('blobfs.test-memory')
        std_logger.addHandler(handler)
        std_logger.setLevel(logging.DEBUG)
        try:
            log = get_logger('test-memory')
            log.debug("first", slot_id=1)
            log.info("second", slot_id=2, context={'parent_id': 0})
            log.warning("third")
        finally:
            std_logger.removeHandler(handler)

        logs = handler.get_logs()
        self.assertEqual([l['message'] for l in logs], ["second", "third"])
        self.assertEqual(logs[0]['slot_id'], 2)
        self.assertEqual(logs[0]['context'], {'parent_id': 0})
        self.assertEqual(handler.get_logs(level='WARNING')[0]['message'], "third")

        handler.clear()
        self.assertEqual(handler.get_logs(), [])

    def test_formatter(self):
        from blobfs.logger import LogFormatter

        record = logging.LogRecord('blobfs.store', logging.INFO, __file__, 1, "Added file", None, None)
        record.subsystem = 'store'
        record.slot_id = 3
        record.context = {'parent_id': 0}

        line = LogFormatter(use_colors=False).format(record)

        self.assertIn("[store]", line)
        self.assertIn("(slot=3)", line)
        self.assertIn("{parent_id=0}", line)


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def tearDown(self):
        from blobfs.config import ConfigLoader
        ConfigLoader().reset()

    def write_config(self, tmp: str, data) -> str:
        path = os.path.join(tmp, 'blobfs.json')
        with open(path, 'w', encoding='utf-8') as f:
            f.write(data if isinstance(data, str) else json.dumps(data))
        return path

    def test_default_config(self):
        from blobfs.config import Config, get_config

        config = Config()

        self.assertEqual(config.storage.key, "local-fs")
        self.assertEqual(config.storage.backend, "memory")
        self.assertEqual(config.logging.level, "INFO")
        self.assertEqual(get_config().storage.key, "local-fs")

    def test_load(self):
        from blobfs.config import ConfigLoader, get_config

        with tempfile.TemporaryDirectory() as tmp:
            path = self.write_config(tmp, {
                'storage': {'backend': 'file', 'path': tmp, 'key': 'memos'},
                'logging': {'level': 'DEBUG'},
            })
            config = ConfigLoader().load(path)

        self.assertEqual(config.storage.backend, 'file')
        self.assertEqual(config.storage.key, 'memos')
        self.assertEqual(config.logging.level, 'DEBUG')
        self.assertTrue(config.logging.console_output)
        self.assertIs(get_config(), config)

    def test_invalid_files(self):
        from blobfs.config import ConfigLoader
        from blobfs.exceptions import ConfigError

        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError):
                ConfigLoader().load(os.path.join(tmp, 'missing.json'))
            for data in (
                '{not json',
                [1, 2],
                {'storage': 'memory'},
                {'storage': {'backend': 'redis'}},
                {'storage': {'key': ''}},
                {'logging': {'level': 'LOUD'}},
            ):
                with self.assertRaises(ConfigError):
                    ConfigLoader().load(self.write_config(tmp, data))

    def test_get_and_set(self):
        from blobfs.config import ConfigLoader, get_config
        from blobfs.exceptions import ConfigError

        loader = ConfigLoader()
        loader.set('storage.key', 'other')

        self.assertEqual(loader.get('storage.key'), 'other')
        self.assertEqual(get_config().storage.key, 'other')
        self.assertEqual(loader.get('storage.nope', 'default'), 'default')
        self.assertEqual(loader.to_dict()['storage']['key'], 'other')
        with self.assertRaises(ConfigError):
            loader.set('storage.nope', 1)


class TestStorage(unittest.TestCase):
    """Test storage backends."""

    def test_memory_storage(self):
        from blobfs.storage import MemoryStorage
        from blobfs.exceptions import StorageError

        storage = MemoryStorage()
        self.assertIsNone(storage.get('k'))

        storage.set('k', 'v')
        self.assertEqual(storage.get('k'), 'v')
        self.assertIn('k', storage)

        storage.remove('k')
        storage.remove('k')
        self.assertIsNone(storage.get('k'))

        with self.assertRaises(StorageError):
            storage.set('k', b'bytes')

    def test_file_storage(self):
        from blobfs.storage import FileStorage

        with tempfile.TemporaryDirectory() as tmp:
            storage = FileStorage(os.path.join(tmp, 'nested'))
            self.assertIsNone(storage.get('a/b'))

            storage.set('a/b', '[1]')
            storage.set('plain', '[]')

            self.assertEqual(storage.get('a/b'), '[1]')
            self.assertEqual(list(storage.keys()), ['a/b', 'plain'])
            self.assertEqual(
                sorted(os.listdir(storage.root)),
                ['a%2Fb.blob', 'plain.blob']
            )

            storage.remove('a/b')
            storage.remove('a/b')
            self.assertIsNone(storage.get('a/b'))

    def test_create_storage(self):
        from blobfs.config import Config, StorageConfig
        from blobfs.storage import create_storage, MemoryStorage, FileStorage
        from blobfs.exceptions import ConfigError

        self.assertIsInstance(create_storage(Config()), MemoryStorage)

        storage = create_storage(Config(storage=StorageConfig(backend='file', path='/tmp/x')))
        self.assertIsInstance(storage, FileStorage)

        with self.assertRaises(ConfigError):
            create_storage(Config(storage=StorageConfig(backend='redis')))


class TestPathResolver(unittest.TestCase):
    """Test path parsing."""

    def test_parse(self):
        from blobfs.filesystem import PathResolver

        parsed = PathResolver.parse('/docs//a.txt')
        self.assertTrue(parsed.is_absolute)
        self.assertEqual(parsed.components, ['docs', 'a.txt'])
        self.assertEqual(str(parsed), '/docs/a.txt')

        parsed = PathResolver.parse('docs/')
        self.assertFalse(parsed.is_absolute)
        self.assertEqual(parsed.components, ['docs'])

        self.assertTrue(PathResolver.parse('/').is_empty)
        self.assertEqual(PathResolver.parse('./..').components, ['.', '..'])

    def test_format(self):
        from blobfs.filesystem import PathResolver, ROOT_SENTINEL

        self.assertEqual(PathResolver.format([]), ROOT_SENTINEL)
        self.assertEqual(PathResolver.format(['docs', 'a.txt']), '/docs/a.txt')
        self.assertTrue(PathResolver.is_root_sentinel('ROOT'))
        self.assertFalse(PathResolver.is_root_sentinel('/ROOT'))


if __name__ == '__main__':
    unittest.main()
