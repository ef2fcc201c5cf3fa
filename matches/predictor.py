"""
Deterministic "pseudo-AI" result predictor used to settle simulated matches.

The score is derived from the first two characters of each team name plus a
small bonus for high scoring leagues, so the same fixture always produces the
same result.
"""
import logging
import math
import random
from collections import namedtuple

logger = logging.getLogger(__name__)

PredictedResult = namedtuple('PredictedResult', ['home_score', 'away_score', 'explanation'])

HIGH_SCORING_LEAGUES = ('Premier League', 'Bundesliga')
MAX_PREDICTED_GOALS = 5


def _name_code(name):
    # Single letter names count their only letter twice.
    return ord(name[0]) + ord(name[1] if len(name) > 1 else name[0])


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _clamp(value):
    return max(0, min(MAX_PREDICTED_GOALS, value))


def _explain(home_name, away_name, home_score, away_score):
    if home_score > away_score:
        return (f"{home_name} has a stronger offensive line and home advantage, which gives them "
                f"an edge over {away_name}. Recent form indicates they are likely to convert more chances.")
    if away_score > home_score:
        return (f"{away_name} has been performing exceptionally well in away games. Their defensive "
                f"structure and counter-attacking style should overcome {home_name}'s home advantage.")
    return (f"Both teams are evenly matched in current form and tactical setup. {home_name} and "
            f"{away_name} have similar defensive capabilities, leading to a balanced scoreline.")


def predict_score(home_name, away_name, league):
    home = (_name_code(home_name) % 10) / 2.5
    away = (_name_code(away_name) % 8) / 2.5

    if league in HIGH_SCORING_LEAGUES:
        home += 0.4
        away += 0.3

    home_score = _clamp(_round_half_up(home))
    away_score = _clamp(_round_half_up(away))
    return PredictedResult(home_score, away_score, _explain(home_name, away_name, home_score, away_score))


def predict_match_result(match, rng=None):
    """Predict the final score of ``match``.

    Falls back to a random 0-3 scoreline when the fixture cannot be analysed
    (for example a team with an empty name).
    """
    rng = rng or random
    home_name = match.home_team.name
    away_name = match.away_team.name
    logger.info('Predicting result for match: %s vs %s', home_name, away_name)
    try:
        return predict_score(home_name, away_name, match.league)
    except (IndexError, TypeError, AttributeError):
        logger.exception('Error predicting match result for match %s', match.pk)
        return PredictedResult(
            rng.randint(0, 3),
            rng.randint(0, 3),
            'Prediction based on limited data due to an error in the analysis system.',
        )
