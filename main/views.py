import logging

from django.shortcuts import render, redirect
from django.http import JsonResponse
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.contrib.auth.decorators import login_required
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from matches.models import Match
from predictions.leaderboard import build_leaderboard, user_rank
from scoreline.conf import get_setting
from .context_processors import (
    LANGUAGE_SESSION_KEY, THEME_COOKIE, THEME_SESSION_KEY, get_theme,
)
from .decorators import admin_required, json_login_required
from .forms import AdminFlagForm, UserRegisterForm, CustomLoginForm as LoginForm
from .models import Profile, is_admin_user
from .utils import read_payload

logger = logging.getLogger(__name__)

THEME_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def home_context(user, now):
    upcoming_matches = Match.objects.filter(
        status=Match.SCHEDULED,
        kickoff_time__gte=now,
    ).select_related('home_team', 'away_team').order_by('kickoff_time')[:3]

    top_predictors = [u for u in build_leaderboard()[:3] if u.total_points > 0]

    rank = None
    total_points = 0
    credits = None
    if user.is_authenticated:
        rank, total_points = user_rank(user)
        profile, _ = Profile.objects.get_or_create(user=user)
        credits = profile.credits

    return {
        'upcoming_matches': upcoming_matches,
        'top_predictors': top_predictors,
        'user_rank': rank,
        'user_total_points': total_points,
        'user_credits': credits,
    }


def home_view(request):
    context = home_context(request.user, timezone.now())
    return render(request, 'main/home.html', context)


@require_GET
def show_home_json(request):
    now = timezone.now()
    context = home_context(request.user, now)

    user_data = None
    if request.user.is_authenticated:
        user_data = {
            'username': request.user.username,
            'email': request.user.email,
            'credits': context['user_credits'],
            'is_admin': is_admin_user(request.user),
            'rank': context['user_rank'],
            'total_points': context['user_total_points'],
        }

    stats = {
        'upcoming_count': Match.objects.filter(status=Match.SCHEDULED).count(),
        'live_count': Match.objects.filter(status=Match.LIVE).count(),
        'predictors_count': User.objects.filter(predictions__isnull=False).distinct().count(),
    }

    return JsonResponse({
        'status': 'success',
        'upcoming_matches': [m.to_dict(now) for m in context['upcoming_matches']],
        'top_predictors': [
            {'username': u.username, 'total_points': u.total_points} for u in context['top_predictors']
        ],
        'user_data': user_data,
        'stats': stats,
    })


def register_view(request):
    if request.user.is_authenticated:
        return redirect('main:home')
    if request.method == 'POST':
        form = UserRegisterForm(request.POST)
        if form.is_valid():
            user = form.save()
            logger.info('New user registered: %s', user.username)
            return JsonResponse({"status": "success", "message": "Registration successful! You will be redirected to the login page.",
                                 "redirect_url": reverse('main:login')}, status=201)
        errors_dict = form.errors.get_json_data(escape_html=True)
        return JsonResponse({"status": "error", "message": "Registration failed.", "errors": errors_dict}, status=400)
    form = UserRegisterForm()
    return render(request, 'main/register.html', {'form': form})


def login_view(request):
    if request.user.is_authenticated:
        return redirect('main:home')
    if request.method == 'POST':
        form = LoginForm(request, data=request.POST)
        if form.is_valid():
            login(request, form.get_user())
            return JsonResponse({"status": "success", "message": "Login successful!",
                                 "redirect_url": reverse("main:home")}, status=200)
        return JsonResponse({"status": "error", "message": "Invalid username or password."}, status=401)
    form = LoginForm()
    return render(request, 'main/login.html', {'form': form})


@login_required
def logout_view(request):
    logout(request)
    return JsonResponse({"status": "success", "message": "You have been logged out.",
                         "redirect_url": reverse('main:login')})


# --- JSON auth for API clients ---
@require_POST
def login_api(request):
    data = read_payload(request)
    if data is None:
        return JsonResponse({"status": False, "message": "Invalid request data."}, status=400)

    user = authenticate(request, username=data.get('username'), password=data.get('password'))
    if user is None:
        return JsonResponse({"status": False, "message": "Invalid username or password."}, status=401)

    login(request, user)
    return JsonResponse({
        "status": True,
        "message": "Login successful!",
        "username": user.username,
        "is_admin": is_admin_user(user),
    }, status=200)


@require_POST
def register_api(request):
    data = read_payload(request)
    if data is None:
        return JsonResponse({"status": False, "message": "Invalid request data."}, status=400)

    form = UserRegisterForm({
        'username': data.get('username', ''),
        'email': data.get('email', ''),
        'password1': data.get('password', ''),
        'password2': data.get('password_confirmation', ''),
    })
    if not form.is_valid():
        return JsonResponse({"status": False, "message": "Registration failed.",
                             "errors": form.errors.get_json_data(escape_html=True)}, status=400)

    user = form.save()
    logger.info('New user registered: %s', user.username)
    return JsonResponse({"status": True, "message": "Account created!"}, status=201)


@require_POST
def logout_api(request):
    logout(request)
    return JsonResponse({"status": True, "message": "Logged out!"}, status=200)


# --- Preferences ---
@require_POST
def set_language(request):
    data = read_payload(request) or {}
    language = data.get('language')
    if language not in get_setting('LANGUAGES'):
        return JsonResponse({'status': 'error', 'message': 'Unsupported language'}, status=400)

    request.session[LANGUAGE_SESSION_KEY] = language
    return JsonResponse({'status': 'success', 'language': language})


@require_POST
def set_theme(request):
    data = read_payload(request) or {}
    theme = data.get('theme')
    if theme is None:
        theme = 'light' if get_theme(request) == 'dark' else 'dark'
    if theme not in get_setting('THEMES'):
        return JsonResponse({'status': 'error', 'message': 'Unsupported theme'}, status=400)

    request.session[THEME_SESSION_KEY] = theme
    response = JsonResponse({'status': 'success', 'theme': theme})
    response.set_cookie(THEME_COOKIE, theme, max_age=THEME_COOKIE_MAX_AGE, samesite='Lax')
    return response


# --- ADMIN ---
@json_login_required
@require_GET
def check_admin(request):
    return JsonResponse({'status': 'success', 'is_admin': is_admin_user(request.user)})


def serialize_user(user):
    try:
        profile = user.profile
        credits, flag = profile.credits, profile.is_admin
    except Profile.DoesNotExist:
        credits, flag = 0, False
    return {
        'id': user.pk,
        'username': user.username,
        'email': user.email,
        'credits': credits,
        'is_admin': flag or user.is_superuser,
        'date_joined': user.date_joined.isoformat(),
    }


@admin_required
@require_http_methods(['GET', 'POST'])
def admin_users(request):
    if request.method == 'GET':
        users = User.objects.select_related('profile').order_by('username')
        return JsonResponse({'status': 'success', 'users': [serialize_user(u) for u in users]})

    form = AdminFlagForm(read_payload(request) or {})
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'user_id and is_admin are required',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)
    user_id = form.cleaned_data['user_id']
    is_admin = form.cleaned_data['is_admin']

    target = User.objects.filter(pk=user_id).first()
    if target is None:
        return JsonResponse({'status': 'error', 'message': 'User not found'}, status=404)
    if target.pk == request.user.pk and not is_admin:
        return JsonResponse({'status': 'error', 'message': 'You cannot remove your own admin access'}, status=400)

    profile, _ = Profile.objects.get_or_create(user=target)
    profile.is_admin = is_admin
    profile.save(update_fields=['is_admin'])
    target.profile = profile
    logger.info('%s set is_admin=%s for %s', request.user.username, profile.is_admin, target.username)
    return JsonResponse({'status': 'success', 'user': serialize_user(target)})


@login_required
def admin_dashboard(request):
    if not is_admin_user(request.user):
        return redirect('main:home')

    context = {
        'users_count': User.objects.count(),
        'matches_by_status': {
            label: Match.objects.filter(status=status).count() for status, label in Match.STATUS_CHOICES
        },
    }
    return render(request, 'main/admin_dashboard.html', context)
