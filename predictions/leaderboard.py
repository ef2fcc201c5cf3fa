from datetime import timedelta

from django.contrib.auth.models import User
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from matches.models import Match

TIME_RANGES = {
    'all': None,
    'week': timedelta(days=7),
    'month': timedelta(days=30),
}


def build_leaderboard(time_range='all', now=None):
    """Users ranked by points earned on finished matches.

    Every user is listed, including those without predictions. Only
    predictions created inside ``time_range`` count.
    """
    now = now or timezone.now()
    scored = Q(predictions__match__status=Match.FINISHED)
    window = TIME_RANGES[time_range]
    if window is not None:
        scored &= Q(predictions__created_at__gte=now - window)

    return User.objects.annotate(
        total_points=Coalesce(Sum('predictions__points', filter=scored), 0),
        correct_predictions=Count('predictions', filter=scored & Q(predictions__points__gt=0)),
        total_predictions=Count('predictions', filter=scored),
    ).order_by('-total_points', 'username')


def user_rank(user):
    """1-based position of ``user`` on the all-time leaderboard."""
    totals = build_leaderboard()
    own = totals.get(pk=user.pk).total_points
    return totals.filter(total_points__gt=own).count() + 1, own
