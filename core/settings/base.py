from pathlib import Path

from celery.schedules import crontab
from environs import Env

env = Env()
env.read_env(recurse=False)

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = env.str('SECRET_KEY', 'django-insecure-catalog-sync-dev-key')

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', [])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'integrator',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'core.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'core.wsgi.application'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'integrator': {
            'handlers': ['console'],
            'level': env.str('SYNC_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}

# Celery
CELERY_BROKER_URL = env.str('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = CELERY_BROKER_URL
CELERY_TIMEZONE = env.str('SYNC_TIMEZONE', 'America/New_York')

# Catalog sync
SYNC_QPI_PATH = env.str('SYNC_QPI_PATH', str(BASE_DIR / 'feeds' / 'QPI_validation_full.csv'))
SYNC_STATUS_DIR = env.str('SYNC_STATUS_DIR', str(BASE_DIR / 'feeds' / 'vc_extracts'))
SYNC_STATUS_PATTERN = env.str('SYNC_STATUS_PATTERN', r'^vc_extracts_.*\.parquet$')
SYNC_PIM_PATH = env.str('SYNC_PIM_PATH', str(BASE_DIR / 'feeds' / 'PIM Extract.xlsx'))
SYNC_HTTP_TIMEOUT = env.float('SYNC_HTTP_TIMEOUT', 30.0)
SYNC_PARALLEL = env.bool('SYNC_PARALLEL', False)
SYNC_DAILY_HOUR = env.int('SYNC_DAILY_HOUR', 2)
SYNC_DAILY_MINUTE = env.int('SYNC_DAILY_MINUTE', 0)
SYNC_TIMEZONE = CELERY_TIMEZONE
SYNC_LOCK_TIMEOUT = env.int('SYNC_LOCK_TIMEOUT', 3600)

CELERY_BEAT_SCHEDULE = {
    'sync-catalog-daily': {
        'task': 'integrator.tasks.sync_catalog',
        'schedule': crontab(hour=SYNC_DAILY_HOUR, minute=SYNC_DAILY_MINUTE),
    },
}
