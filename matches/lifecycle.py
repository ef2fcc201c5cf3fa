"""
Match lifecycle simulator.

Matches move SCHEDULED -> LIVE once kickoff passes and LIVE -> FINISHED after
``MATCH_DURATION`` seconds. ``manage_matches`` applies every due transition in
one pass and keeps at least ``MIN_ACTIVE_MATCHES`` scheduled or live matches
around. It is driven by the cron endpoint and the ``manage_matches`` command,
and is safe to call repeatedly: each transition locks the row and re-checks
the status before writing.
"""
import logging
import random
from collections import namedtuple
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from scoreline.conf import get_setting
from teams.models import Team
from .models import Match
from .predictor import predict_match_result

logger = logging.getLogger(__name__)

POPULAR_TEAMS = [
    "Manchester United",
    "Liverpool",
    "Arsenal",
    "Chelsea",
    "Manchester City",
    "Tottenham Hotspur",
    "Barcelona",
    "Real Madrid",
    "Bayern Munich",
    "Paris Saint-Germain",
    "Juventus",
    "AC Milan",
    "Inter Milan",
    "Borussia Dortmund",
    "Ajax",
    "Porto",
    "Benfica",
    "Sporting CP",
    "Atletico Madrid",
    "Sevilla",
]

LEAGUES = [
    "Premier League",
    "La Liga",
    "Bundesliga",
    "Serie A",
    "Ligue 1",
    "Champions League",
    "Europa League",
]

ManageResult = namedtuple('ManageResult', ['started', 'finished', 'generated', 'scheduled', 'live'])


class MatchTransitionError(Exception):
    """Raised when a match is asked to move to a state it cannot reach."""

    def __init__(self, match, target):
        self.match_id = match.pk
        self.current = match.status
        self.target = target
        super().__init__(f'Match {match.pk} cannot go from {match.status} to {target}')


def available_teams():
    teams = list(Team.objects.all())
    if len(teams) >= 2:
        return teams
    logger.info('Fewer than two teams in the database, creating the default team pool')
    for name in POPULAR_TEAMS:
        Team.objects.get_or_create(name=name)
    return list(Team.objects.all())


def generate_random_match(now=None, rng=None):
    rng = rng or random
    now = now or timezone.now()

    home_team, away_team = rng.sample(available_teams(), 2)
    match = Match.objects.create(
        home_team=home_team,
        away_team=away_team,
        kickoff_time=now + timedelta(seconds=get_setting('KICKOFF_LEAD')),
        status=Match.SCHEDULED,
        league=rng.choice(LEAGUES),
    )
    logger.info('Generated match %s: %s', match.pk, match)
    return match


def generate_random_matches(count, now=None, rng=None):
    return [generate_random_match(now=now, rng=rng) for _ in range(count)]


def _lock(match):
    return Match.objects.select_for_update().select_related('home_team', 'away_team').get(pk=match.pk)


def start_match(match, now=None):
    now = now or timezone.now()
    with transaction.atomic():
        current = _lock(match)
        if current.status != Match.SCHEDULED:
            raise MatchTransitionError(current, Match.LIVE)
        current.status = Match.LIVE
        current.started_at = now
        current.save(update_fields=['status', 'started_at', 'updated_at'])
    logger.info('Match %s is now LIVE', current.pk)
    return current


def finish_match(match, home_score, away_score, summary='', now=None):
    now = now or timezone.now()
    with transaction.atomic():
        current = _lock(match)
        if current.status != Match.LIVE:
            raise MatchTransitionError(current, Match.FINISHED)
        current.status = Match.FINISHED
        current.home_score = home_score
        current.away_score = away_score
        current.finished_at = now
        current.result_summary = summary
        current.save(update_fields=['status', 'home_score', 'away_score', 'finished_at',
                                    'result_summary', 'updated_at'])
    logger.info('Match %s finished %s-%s', current.pk, home_score, away_score)
    return current


def cancel_match(match):
    with transaction.atomic():
        current = _lock(match)
        if current.status not in Match.ACTIVE_STATUSES:
            raise MatchTransitionError(current, Match.CANCELLED)
        current.status = Match.CANCELLED
        current.save(update_fields=['status', 'updated_at'])
    logger.info('Match %s cancelled', current.pk)
    return current


def elapsed_seconds(match, now):
    started = match.started_at or match.updated_at
    return (now - started).total_seconds()


def resolve_score(match, elapsed, rng=None):
    """Pick the final score of a match that is due to finish.

    Inside the regular window the predictor decides; when the poll arrives
    after ``MATCH_DURATION`` the score is drawn at random instead.
    """
    rng = rng or random
    if elapsed <= get_setting('MATCH_DURATION'):
        result = predict_match_result(match, rng=rng)
        logger.info('AI prediction for %s vs %s: %s-%s', match.home_team.name, match.away_team.name,
                    result.home_score, result.away_score)
        return result.home_score, result.away_score, result.explanation

    max_goals = get_setting('MAX_RANDOM_GOALS')
    return rng.randint(0, max_goals), rng.randint(0, max_goals), ''


def manage_matches(now=None, rng=None):
    now = now or timezone.now()
    rng = rng or random
    started = finished = generated = 0

    due = Match.objects.filter(status=Match.SCHEDULED, kickoff_time__lte=now).order_by('kickoff_time')
    for match in due:
        try:
            start_match(match, now=now)
            started += 1
        except MatchTransitionError as e:
            logger.info('Skipping start: %s', e)
        except Exception:
            logger.exception('Error starting match %s', match.pk)

    finish_after = get_setting('MATCH_DURATION') - get_setting('PREDICTOR_WINDOW')
    live = Match.objects.filter(status=Match.LIVE).select_related('home_team', 'away_team')
    for match in live:
        elapsed = elapsed_seconds(match, now)
        if elapsed < finish_after:
            continue
        try:
            home_score, away_score, summary = resolve_score(match, elapsed, rng=rng)
            finish_match(match, home_score, away_score, summary=summary, now=now)
            finished += 1
            generate_random_match(now=now, rng=rng)
            generated += 1
        except MatchTransitionError as e:
            logger.info('Skipping finish: %s', e)
        except Exception:
            logger.exception('Error finishing match %s', match.pk)

    generated += len(top_up_matches(now=now, rng=rng))

    return ManageResult(
        started=started,
        finished=finished,
        generated=generated,
        scheduled=Match.objects.filter(status=Match.SCHEDULED).count(),
        live=Match.objects.filter(status=Match.LIVE).count(),
    )


def top_up_matches(now=None, rng=None):
    """Generate just enough matches to reach ``MIN_ACTIVE_MATCHES``."""
    active = Match.objects.filter(status__in=Match.ACTIVE_STATUSES).count()
    shortfall = get_setting('MIN_ACTIVE_MATCHES') - active
    if shortfall <= 0:
        return []
    return generate_random_matches(shortfall, now=now, rng=rng)
