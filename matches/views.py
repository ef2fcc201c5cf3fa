import logging

from django.shortcuts import render, get_object_or_404
from django.http import JsonResponse
from django.db import transaction
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from main.decorators import admin_required
from predictions.models import Prediction
from scoreline.conf import get_setting
from main.utils import read_payload
from .forms import MatchForm
from .lifecycle import MatchTransitionError, cancel_match, manage_matches, top_up_matches
from .models import Match

logger = logging.getLogger(__name__)

STATUS_FILTERS = ('upcoming', 'live', 'finished', 'all')
AUTO_UPDATE_INTERVAL = 30


def filter_matches(status_filter, now):
    matches = Match.objects.select_related('home_team', 'away_team')
    if status_filter == 'live':
        return matches.filter(status=Match.LIVE).order_by('started_at')
    if status_filter == 'finished':
        return matches.filter(status=Match.FINISHED).order_by('-finished_at', '-kickoff_time')
    if status_filter == 'all':
        return matches.order_by('-kickoff_time')
    return matches.filter(
        status__in=Match.ACTIVE_STATUSES,
        kickoff_time__gte=now,
    ).order_by('kickoff_time')


def serialize_matches(matches, user, now):
    prediction_map = {}
    if user.is_authenticated:
        predictions = Prediction.objects.filter(user=user, match__in=[m.pk for m in matches])
        prediction_map = {p.match_id: p for p in predictions}

    data = []
    for match in matches:
        entry = match.to_dict(now)
        prediction = prediction_map.get(match.pk)
        entry['prediction'] = prediction.to_dict() if prediction else None
        data.append(entry)
    return data


def matches_page(request):
    now = timezone.now()
    upcoming = list(filter_matches('upcoming', now))
    live = list(filter_matches('live', now))
    recent = list(filter_matches('finished', now)[:10])
    context = {
        'upcoming_matches': serialize_matches(upcoming, request.user, now),
        'live_matches': serialize_matches(live, request.user, now),
        'finished_matches': serialize_matches(recent, request.user, now),
        # Without a cron secret the page itself drives the lifecycle.
        'auto_update': not get_setting('CRON_SECRET'),
        'auto_update_interval': AUTO_UPDATE_INTERVAL,
    }
    return render(request, 'matches/matches.html', context)


@require_GET
def get_matches_json(request):
    status_filter = request.GET.get('status', 'upcoming')
    if status_filter not in STATUS_FILTERS:
        return JsonResponse({'status': 'error', 'message': f'Unknown status filter "{status_filter}".'}, status=400)

    now = timezone.now()
    matches = list(filter_matches(status_filter, now))
    return JsonResponse({'status': 'success', 'matches': serialize_matches(matches, request.user, now)})


@require_GET
def get_match_detail_json(request, match_id):
    match = get_object_or_404(Match.objects.select_related('home_team', 'away_team'), pk=match_id)
    now = timezone.now()
    return JsonResponse({'status': 'success', 'match': serialize_matches([match], request.user, now)[0]})


def cron_authorized(request):
    secret = get_setting('CRON_SECRET')
    if not secret:
        return True
    return request.headers.get('Authorization', '') == f'Bearer {secret}'


@require_GET
def manage_matches_view(request):
    if not cron_authorized(request):
        return JsonResponse({'status': 'error', 'message': 'Unauthorized'}, status=401)

    try:
        result = manage_matches()
    except Exception as e:
        logger.exception('Error managing matches in cron job')
        return JsonResponse({'status': 'error', 'message': 'Error managing matches', 'error': str(e)}, status=500)

    return JsonResponse({
        'status': 'success',
        'message': 'Match management completed successfully',
        'matches_managed': result._asdict(),
    })


@admin_required
@require_POST
def seed_matches_view(request):
    created = top_up_matches()
    if not created:
        return JsonResponse({
            'status': 'success',
            'message': 'No new matches needed',
            'existing_count': Match.objects.filter(status__in=Match.ACTIVE_STATUSES).count(),
        })
    now = timezone.now()
    return JsonResponse({
        'status': 'success',
        'message': f'Successfully seeded {len(created)} new matches',
        'matches': [match.to_dict(now) for match in created],
    })


# --- ADMIN API ---
@admin_required
@require_http_methods(['GET', 'POST'])
def admin_matches(request):
    now = timezone.now()
    if request.method == 'GET':
        matches = Match.objects.select_related('home_team', 'away_team').order_by('-kickoff_time')
        status_filter = request.GET.get('status')
        if status_filter:
            matches = matches.filter(status=status_filter.upper())
        return JsonResponse({'status': 'success', 'matches': [m.to_dict(now) for m in matches]})

    data = read_payload(request)
    if data is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid request data'}, status=400)

    form = MatchForm(data)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'Could not create match.',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)

    match = form.save()
    logger.info('Match %s created by %s', match.pk, request.user.username)
    return JsonResponse({'status': 'success', 'message': 'Match created.', 'match': match.to_dict(now)}, status=201)


@admin_required
@require_POST
def edit_match(request, match_id):
    match = get_object_or_404(Match, pk=match_id)
    previous_status = match.status

    data = read_payload(request)
    if data is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid request data'}, status=400)

    # Fields left out of the payload keep their current values.
    merged = {
        'home_team': match.home_team_id,
        'away_team': match.away_team_id,
        'kickoff_time': match.kickoff_time.isoformat(),
        'league': match.league,
        'status': match.status,
        'home_score': match.home_score,
        'away_score': match.away_score,
    }
    merged.update({k: v for k, v in data.items() if k in merged})
    merged = {k: ('' if v is None else v) for k, v in merged.items()}

    form = MatchForm(merged, instance=match)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'Could not update match.',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)

    match = form.save(commit=False)
    cancelling = match.status == Match.CANCELLED and previous_status != Match.CANCELLED
    if match.status == Match.LIVE and match.started_at is None:
        match.started_at = timezone.now()
    if match.status == Match.FINISHED and match.finished_at is None:
        match.finished_at = timezone.now()

    try:
        with transaction.atomic():
            if cancelling:
                match.status = previous_status
            match.save()
            if cancelling:
                match = cancel_match(match)
    except MatchTransitionError as e:
        return JsonResponse({'status': 'error', 'message': str(e)}, status=400)

    logger.info('Match %s updated by %s', match.pk, request.user.username)
    return JsonResponse({'status': 'success', 'message': 'Match updated.', 'match': match.to_dict()})


@admin_required
@require_POST
def delete_match(request, match_id):
    match = get_object_or_404(Match, pk=match_id)
    label = str(match)
    match.delete()
    logger.info('Match %s deleted by %s', label, request.user.username)
    return JsonResponse({'status': 'success', 'message': f'Match "{label}" deleted.'})
