import importlib
import os
import sys
from unittest.mock import patch

from django.test import SimpleTestCase
from environs import EnvError

PROD_ENV = {
    'SECRET_KEY': 'prod-secret',
    'ALLOWED_HOSTS': 'sync.example.com',
    'SYNC_QPI_PATH': '/srv/feeds/QPI_validation_full.csv',
    'SYNC_STATUS_DIR': '/srv/feeds/vc_extracts',
    'SYNC_PIM_PATH': '/srv/feeds/PIM Extract.xlsx',
}


class TestProdSettings(SimpleTestCase):
    def tearDown(self):
        sys.modules.pop('core.settings.prod', None)

    def _load(self, env):
        sys.modules.pop('core.settings.prod', None)
        with patch.dict(os.environ, env, clear=False):
            return importlib.import_module('core.settings.prod')

    def test_run_lock_uses_shared_cache(self):
        prod = self._load(PROD_ENV)
        self.assertEqual(
            prod.CACHES['default']['BACKEND'], 'django.core.cache.backends.redis.RedisCache',
        )
        self.assertEqual(prod.SYNC_QPI_PATH, '/srv/feeds/QPI_validation_full.csv')

    def test_feed_paths_are_required(self):
        env = {k: v for k, v in PROD_ENV.items() if k != 'SYNC_PIM_PATH'}
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop('SYNC_PIM_PATH', None)
            with self.assertRaises(EnvError):
                self._load(env)
