import logging

from django.shortcuts import render
from django.http import JsonResponse
from django.utils import timezone
from django.db import transaction
from django.db.models import F
from django.views.decorators.http import require_GET, require_http_methods
from django.contrib.auth.decorators import login_required

from main.decorators import json_login_required
from main.models import Profile
from matches.models import Match
from scoreline.conf import get_setting
from main.utils import read_payload
from .forms import PredictionForm
from .leaderboard import TIME_RANGES, build_leaderboard
from .models import Prediction

logger = logging.getLogger(__name__)


def serialize_prediction(prediction):
    data = prediction.to_dict()
    data['match'] = prediction.match.to_dict()
    return data


def user_predictions(user):
    return Prediction.objects.filter(user=user).select_related(
        'match', 'match__home_team', 'match__away_team').order_by('-created_at')


@login_required
def my_predictions_view(request):
    predictions = user_predictions(request.user)
    context = {
        'predictions': predictions,
        'total_points': sum(p.points or 0 for p in predictions),
    }
    return render(request, 'predictions/my_predictions.html', context)


def leaderboard_view(request):
    time_range = request.GET.get('time_range', 'all')
    if time_range not in TIME_RANGES:
        time_range = 'all'

    context = {
        'leaderboard': build_leaderboard(time_range),
        'time_range': time_range,
        'time_ranges': list(TIME_RANGES),
    }
    return render(request, 'predictions/leaderboard.html', context)


@require_GET
def get_leaderboard_json(request):
    time_range = request.GET.get('time_range', 'all')
    if time_range not in TIME_RANGES:
        return JsonResponse({'status': 'error', 'message': f'Unknown time range "{time_range}".'}, status=400)

    users = [
        {
            'id': user.pk,
            'username': user.username,
            'total_points': user.total_points,
            'correct_predictions': user.correct_predictions,
            'total_predictions': user.total_predictions,
        }
        for user in build_leaderboard(time_range)
    ]
    return JsonResponse({'status': 'success', 'time_range': time_range, 'users': users})


@json_login_required
@require_http_methods(['GET', 'POST'])
def predictions_api(request):
    if request.method == 'GET':
        data = [serialize_prediction(p) for p in user_predictions(request.user)]
        return JsonResponse({'status': 'success', 'predictions': data})
    return submit_prediction(request)


def submit_prediction(request):
    data = read_payload(request)
    if data is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid data provided'}, status=400)

    form = PredictionForm(data)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'Invalid data provided',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)

    match_id = form.cleaned_data['match_id']
    home_score = form.cleaned_data['predicted_home_score']
    away_score = form.cleaned_data['predicted_away_score']

    match = Match.objects.filter(pk=match_id).first()
    if match is None:
        return JsonResponse({'status': 'error', 'message': 'Match not found'}, status=404)

    if not match.is_open_for_predictions(timezone.now()):
        return JsonResponse({'status': 'error', 'message': 'Predictions closed for this match'}, status=400)

    cost = get_setting('PREDICTION_COST')
    with transaction.atomic():
        Profile.objects.get_or_create(user=request.user)
        profile = Profile.objects.select_for_update().get(user=request.user)
        if profile.credits < cost:
            return JsonResponse({
                'status': 'error',
                'message': 'Insufficient credits to make a prediction. Please earn more credits.',
                'credits_needed': cost,
                'current_credits': profile.credits,
            }, status=400)

        Profile.objects.filter(pk=profile.pk).update(credits=F('credits') - cost)
        prediction, created = Prediction.objects.update_or_create(
            user=request.user,
            match=match,
            defaults={
                'predicted_home_score': home_score,
                'predicted_away_score': away_score,
            },
        )
        profile.refresh_from_db(fields=['credits'])

    logger.info('%s predicted %s-%s for match %s', request.user.username, home_score, away_score, match.pk)
    return JsonResponse({
        'status': 'success',
        'created': created,
        'prediction': prediction.to_dict(),
        'remaining_credits': profile.credits,
    })
