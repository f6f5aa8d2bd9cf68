"""Access to the LEASING settings block with defaults."""

from django.conf import settings

DEFAULTS = {
    'RENT_PERIODS': [24, 36, 48, 60],
    'DEFAULT_RENT_PERIOD': 60,
    'IMPORT_SKIPPED_PREVIEW': 10,
}


def get_setting(name):
    return getattr(settings, 'LEASING', {}).get(name, DEFAULTS[name])
