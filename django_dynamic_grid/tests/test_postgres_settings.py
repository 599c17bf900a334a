from .test_sqlite_settings import *  # noqa: F401,F403

BACKEND = 'postgres'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'dynamic_grid',
    }
}
