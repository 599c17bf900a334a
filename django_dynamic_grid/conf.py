"""
Settings for django_dynamic_grid live in a ``DYNAMIC_GRID`` dict in the project
settings, for example::

    DYNAMIC_GRID = {
        'POSITION_INCREMENT': 1000,
        'REFRESH_AFTER_COMMIT': True,
    }

Values are looked up on every access so ``override_settings`` works in tests.
"""
from django.conf import settings


DEFAULTS = {
    # Gap between ordinal positions, leaves room to reorder without renumbering
    'POSITION_INCREMENT': 1000,
    'DEFAULT_COLUMN_WIDTH': 200,
    'DEFAULT_VIEW_NAME': 'Grid view',
    'REFRESH_AFTER_COMMIT': False,
}


def grid_setting(name):
    if name not in DEFAULTS:
        raise AttributeError("Invalid DYNAMIC_GRID setting: '%s'" % name)
    user_settings = getattr(settings, 'DYNAMIC_GRID', {}) if settings.configured else {}
    return user_settings.get(name, DEFAULTS[name])
