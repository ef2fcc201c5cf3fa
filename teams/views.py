import logging

from django.shortcuts import get_object_or_404
from django.http import JsonResponse
from django.views.decorators.http import require_POST, require_http_methods
from django.db.models import Q, Count
from django.core.paginator import Paginator, EmptyPage

from main.decorators import admin_required
from main.utils import read_payload
from .forms import TeamEntryForm
from .models import Team

logger = logging.getLogger(__name__)


def list_teams(request):
    query = request.GET.get('q', '').strip()
    page = request.GET.get('page', 1)

    teams = Team.objects.all()
    if query:
        teams = teams.filter(Q(name__icontains=query))

    paginator = Paginator(teams, 20)
    try:
        page_obj = paginator.get_page(page)
    except EmptyPage:
        page_obj = paginator.page(paginator.num_pages)

    return JsonResponse({
        'status': 'success',
        'results': [team.to_dict() for team in page_obj],
        'pagination': {
            'current_page': page_obj.number,
            'total_pages': paginator.num_pages,
            'has_next': page_obj.has_next(),
            'has_previous': page_obj.has_previous(),
        }
    })


# --- ADMIN API ---
@admin_required
@require_http_methods(['GET', 'POST'])
def admin_teams(request):
    if request.method == 'GET':
        teams = Team.objects.annotate(
            home_count=Count('home_matches', distinct=True),
            away_count=Count('away_matches', distinct=True),
        )
        data = []
        for team in teams:
            entry = team.to_dict()
            entry['matches_count'] = team.home_count + team.away_count
            data.append(entry)
        return JsonResponse({'status': 'success', 'teams': data})

    data = read_payload(request)
    if data is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid request data'}, status=400)

    form = TeamEntryForm(data)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'Could not create team.',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)

    team = form.save()
    logger.info('Team %s created by %s', team.name, request.user.username)
    return JsonResponse({'status': 'success', 'message': 'Team created.', 'team': team.to_dict()}, status=201)


@admin_required
@require_POST
def edit_team(request, team_id):
    team = get_object_or_404(Team, id=team_id)

    data = read_payload(request)
    if data is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid request data'}, status=400)

    # Fields left out of the payload keep their current values.
    merged = {'name': team.name, 'logo': team.logo or ''}
    merged.update({k: v for k, v in data.items() if k in merged and v is not None})

    form = TeamEntryForm(merged, instance=team)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'message': 'Could not update team.',
                             'errors': form.errors.get_json_data(escape_html=True)}, status=400)

    team = form.save()
    return JsonResponse({'status': 'success', 'message': 'Team updated.', 'team': team.to_dict()})


@admin_required
@require_POST
def delete_team(request, team_id):
    team = get_object_or_404(Team, id=team_id)
    name = team.name
    team.delete()
    logger.info('Team %s deleted by %s', name, request.user.username)
    return JsonResponse({'status': 'success', 'message': f'Team {name} deleted.'})
