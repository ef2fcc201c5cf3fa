"""
Per-user store for the active math challenge.

Challenges live in Django's cache under one key per user. Each entry keeps
its own expiry timestamp so an expired challenge can be told apart from a
missing one; the cache timeout is only there to evict abandoned entries.
"""
import math
import time

from django.core.cache import cache

from scoreline.conf import get_setting

ANSWER_TOLERANCE = 0.01


class ChallengeError(Exception):
    pass


class NoActiveChallenge(ChallengeError):
    message = 'No active challenge found. Request a new one.'


class ChallengeExpired(ChallengeError):
    message = 'Challenge expired. Request a new one.'


def _key(user_id):
    return f'math-challenge:{user_id}'


def store_challenge(user_id, problem, now=None):
    now = time.time() if now is None else now
    ttl = get_setting('CHALLENGE_TTL')
    entry = {
        'question': problem.question,
        'answer': problem.answer,
        'difficulty': problem.difficulty,
        'expires_at': now + ttl,
    }
    cache.set(_key(user_id), entry, timeout=ttl * 2)
    return entry


def get_challenge(user_id, now=None):
    """Return the active challenge or raise a ``ChallengeError``."""
    now = time.time() if now is None else now
    entry = cache.get(_key(user_id))
    if entry is None:
        raise NoActiveChallenge()
    if now > entry['expires_at']:
        discard_challenge(user_id)
        raise ChallengeExpired()
    return entry


def discard_challenge(user_id):
    return cache.delete(_key(user_id))


def parse_answer(value):
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def is_correct(submitted, expected):
    number = parse_answer(submitted)
    return number is not None and abs(number - expected) < ANSWER_TOLERANCE
