from .base import *  # noqa: F401,F403
from .base import BASE_DIR

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test.sqlite3',
    }
}

CACHES = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'},
}

CELERY_TASK_ALWAYS_EAGER = True
SYNC_PARALLEL = False
