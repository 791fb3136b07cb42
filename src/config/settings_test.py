"""
Settings para a suíte de testes (pytest-django).

- SQLite em memória
- Migrations desligadas via `--nomigrations` (pyproject)
- Celery em modo eager e publisher síncrono
"""

from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EVENT_PUBLISHER_MODE = 'sync'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

MEDIA_ROOT = BASE_DIR / '.test_media'

LOGGING['loggers']['src.core']['level'] = 'WARNING'
LOGGING['loggers']['src.adapters']['level'] = 'WARNING'
