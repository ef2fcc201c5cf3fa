from django.conf import settings


def get_setting(name):
    """Read one entry of ``settings.SCORELINE``.

    Looked up on every call so ``override_settings(SCORELINE=...)`` in tests
    takes effect.
    """
    return settings.SCORELINE[name]
