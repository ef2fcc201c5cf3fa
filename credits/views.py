import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from main.decorators import json_login_required
from main.models import Profile
from main.utils import read_payload
from .challenges import ChallengeError, NoActiveChallenge, discard_challenge, get_challenge, is_correct, store_challenge
from .problems import CREDIT_REWARDS, difficulty_for_credits, generate_math_problem

logger = logging.getLogger(__name__)


@json_login_required
@require_GET
def get_user_credits(request):
    profile, _ = Profile.objects.get_or_create(user=request.user)
    return JsonResponse({
        'status': 'success',
        'user': {
            'id': request.user.pk,
            'username': request.user.username,
            'email': request.user.email,
            'credits': profile.credits,
        }
    })


@json_login_required
@require_http_methods(['GET', 'POST'])
def math_challenge(request):
    if request.method == 'GET':
        return new_challenge(request)
    return answer_challenge(request)


def new_challenge(request):
    profile, _ = Profile.objects.get_or_create(user=request.user)
    problem = generate_math_problem(difficulty_for_credits(profile.credits))
    store_challenge(request.user.pk, problem)
    return JsonResponse({
        'status': 'success',
        'question': problem.question,
        'difficulty': problem.difficulty,
    })


def answer_challenge(request):
    data = read_payload(request)
    if data is None or data.get('answer') in (None, ''):
        return JsonResponse({'status': 'error', 'message': 'Answer is required'}, status=400)

    try:
        challenge = get_challenge(request.user.pk)
    except ChallengeError as e:
        return JsonResponse({'status': 'error', 'message': e.message}, status=400)

    if not is_correct(data['answer'], challenge['answer']):
        return JsonResponse({
            'status': 'success',
            'success': False,
            'message': f"Incorrect answer. The correct answer was {challenge['answer']}.",
            'correct_answer': challenge['answer'],
        })

    # Only the request that removes the challenge gets paid.
    if not discard_challenge(request.user.pk):
        return JsonResponse({'status': 'error', 'message': NoActiveChallenge.message}, status=400)

    reward = CREDIT_REWARDS[challenge['difficulty']]
    profile, _ = Profile.objects.get_or_create(user=request.user)
    balance = profile.add_credits(reward)
    logger.info('%s solved a %s challenge and earned %s credits', request.user.username,
                challenge['difficulty'], reward)

    return JsonResponse({
        'status': 'success',
        'success': True,
        'message': f"Correct! You've earned {reward} credit{'s' if reward > 1 else ''}.",
        'credits_awarded': reward,
        'credits': balance,
    })
