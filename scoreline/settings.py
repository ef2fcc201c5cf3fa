"""
Django settings for the scoreline project.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ['true', 'on', '1', 'yes']


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY') or 'dev-secret-key-change-in-production'

DEBUG = env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'main.apps.MainConfig',
    'teams.apps.TeamsConfig',
    'matches.apps.MatchesConfig',
    'predictions.apps.PredictionsConfig',
    'credits.apps.CreditsConfig',
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

ROOT_URLCONF = 'scoreline.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'main.context_processors.preferences',
            ],
        },
    },
]

WSGI_APPLICATION = 'scoreline.wsgi.application'


DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('SCORELINE_DB_PATH') or BASE_DIR / 'db.sqlite3',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'scoreline-challenges',
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
]

LOGIN_URL = 'main:login'

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
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        app: {'handlers': ['console'], 'level': os.environ.get('SCORELINE_LOG_LEVEL', 'INFO'), 'propagate': False}
        for app in ('main', 'teams', 'matches', 'predictions', 'credits')
    },
}


# Application settings
SCORELINE = {
    'INITIAL_CREDITS': int(os.environ.get('SCORELINE_INITIAL_CREDITS') or 3),
    'PREDICTION_COST': 1,
    'MATCH_DURATION': 120,
    'PREDICTOR_WINDOW': 10,
    'MIN_ACTIVE_MATCHES': 5,
    'KICKOFF_LEAD': 300,
    'MAX_RANDOM_GOALS': 5,
    'CHALLENGE_TTL': 5 * 60,
    'CRON_SECRET': os.environ.get('SCORELINE_CRON_SECRET') or '',
    'LANGUAGES': ('en', 'vi'),
    'THEMES': ('light', 'dark'),
}
