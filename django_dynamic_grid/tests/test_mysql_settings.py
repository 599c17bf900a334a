from .test_sqlite_settings import *  # noqa: F401,F403

BACKEND = 'mysql'

# functional unique constraints need MySQL 8.0.13 or newer
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.mysql',
        'NAME': 'dynamic_grid',
    }
}
