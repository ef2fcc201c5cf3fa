from scoreline.conf import get_setting

from .models import Profile, is_admin_user
from .translations import DEFAULT_LANGUAGE, translations_for

LANGUAGE_SESSION_KEY = 'scoreline_language'
THEME_SESSION_KEY = 'scoreline_theme'
THEME_COOKIE = 'theme'


def get_language(request):
    language = request.session.get(LANGUAGE_SESSION_KEY)
    if language in get_setting('LANGUAGES'):
        return language
    return DEFAULT_LANGUAGE


def get_theme(request):
    theme = request.session.get(THEME_SESSION_KEY) or request.COOKIES.get(THEME_COOKIE)
    if theme in get_setting('THEMES'):
        return theme
    return 'light'


def preferences(request):
    language = get_language(request)
    credits = None
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        try:
            credits = user.profile.credits
        except Profile.DoesNotExist:
            credits = 0
    return {
        'language': language,
        'theme': get_theme(request),
        't': translations_for(language),
        'user_credits': credits,
        'user_is_admin': bool(user is not None and is_admin_user(user)),
    }
