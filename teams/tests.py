import json
from datetime import timedelta

from django.contrib.admin.sites import AdminSite
from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from matches.models import Match
from teams.admin import TeamAdmin
from teams.forms import TeamEntryForm
from teams.models import Team


class MockRequest:
    def __init__(self, user):
        self.user = user


class TeamModelTests(TestCase):
    def test_to_dict(self):
        team = Team.objects.create(name='Arsenal', logo='/teams/arsenal.png')
        self.assertEqual(team.to_dict(), {'id': team.pk, 'name': 'Arsenal', 'logo': '/teams/arsenal.png'})
        self.assertIsNone(Team.objects.create(name='Chelsea').to_dict()['logo'])

    def test_form_rejects_duplicate_name(self):
        Team.objects.create(name='Arsenal')
        form = TeamEntryForm({'name': 'Arsenal', 'logo': ''})
        self.assertFalse(form.is_valid())
        self.assertIn('name', form.errors)


class TeamAdminTests(TestCase):
    def test_matches_count(self):
        home = Team.objects.create(name='Home')
        away = Team.objects.create(name='Away')
        Match.objects.create(home_team=home, away_team=away, kickoff_time=timezone.now())
        Match.objects.create(home_team=away, away_team=home, kickoff_time=timezone.now())

        superuser = User.objects.create_superuser(username='root', email='root@test.com', password='12345')
        model_admin = TeamAdmin(Team, AdminSite())
        team = model_admin.get_queryset(MockRequest(superuser)).get(pk=home.pk)
        self.assertEqual(model_admin.get_matches_count(team), 2)


class TeamViewsTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='testuser', password='12345')
        self.admin = User.objects.create_user(username='adminuser', password='12345')
        self.admin.profile.is_admin = True
        self.admin.profile.save()
        self.team = Team.objects.create(name='Test Team')

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def test_list_teams_is_public(self):
        Team.objects.create(name='Another Team')
        response = self.client.get(reverse('teams:list_teams'), {'q': 'another'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([t['name'] for t in data['results']], ['Another Team'])
        self.assertEqual(data['pagination']['total_pages'], 1)

    def test_admin_teams_requires_login(self):
        response = self.client.get(reverse('teams:admin_teams'))
        self.assertEqual(response.status_code, 401)

    def test_admin_teams_forbidden_for_players(self):
        self.client.login(username='testuser', password='12345')
        response = self.client.get(reverse('teams:admin_teams'))
        self.assertEqual(response.status_code, 403)
        self.assertJSONEqual(
            str(response.content, encoding='utf8'),
            {'status': 'error', 'message': 'Forbidden. Admin access required.'}
        )

    def test_admin_lists_teams_with_match_counts(self):
        other = Team.objects.create(name='Other Team')
        Match.objects.create(home_team=self.team, away_team=other,
                             kickoff_time=timezone.now() + timedelta(hours=1))
        self.client.login(username='adminuser', password='12345')
        data = self.client.get(reverse('teams:admin_teams')).json()
        counts = {t['name']: t['matches_count'] for t in data['teams']}
        self.assertEqual(counts, {'Other Team': 1, 'Test Team': 1})

    def test_admin_creates_team(self):
        self.client.login(username='adminuser', password='12345')
        response = self.post_json(reverse('teams:admin_teams'), {'name': 'New FC', 'logo': '/teams/new.png'})
        self.assertEqual(response.status_code, 201)
        self.assertTrue(Team.objects.filter(name='New FC').exists())

    def test_admin_create_team_invalid(self):
        self.client.login(username='adminuser', password='12345')
        response = self.post_json(reverse('teams:admin_teams'), {'name': ''})
        self.assertEqual(response.status_code, 400)
        self.assertIn('name', response.json()['errors'])

    def test_edit_team_keeps_missing_fields(self):
        self.team.logo = '/teams/test.png'
        self.team.save()
        self.client.login(username='adminuser', password='12345')
        response = self.post_json(reverse('teams:edit_team', args=[self.team.id]), {'name': 'Renamed'})
        self.assertEqual(response.status_code, 200)
        self.team.refresh_from_db()
        self.assertEqual(self.team.name, 'Renamed')
        self.assertEqual(self.team.logo, '/teams/test.png')

    def test_edit_team_not_found(self):
        self.client.login(username='adminuser', password='12345')
        response = self.post_json(reverse('teams:edit_team', args=[9999]), {'name': 'Ghost'})
        self.assertEqual(response.status_code, 404)

    def test_delete_team(self):
        self.client.login(username='adminuser', password='12345')
        response = self.client.post(reverse('teams:delete_team', args=[self.team.id]))
        self.assertEqual(response.status_code, 200)
        with self.assertRaises(Team.DoesNotExist):
            Team.objects.get(id=self.team.id)

    def test_delete_team_as_player(self):
        self.client.login(username='testuser', password='12345')
        response = self.client.post(reverse('teams:delete_team', args=[self.team.id]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(Team.objects.filter(id=self.team.id).exists())

    def test_team_name_is_case_insensitive_unique(self):
        self.client.login(username='adminuser', password='12345')
        response = self.post_json(reverse('teams:admin_teams'), {'name': 'test team'})
        self.assertEqual(response.status_code, 400)

    def test_relative_logo_rejected(self):
        form = TeamEntryForm({'name': 'Logo FC', 'logo': 'logo.png'})
        self.assertFalse(form.is_valid())
        self.assertIn('logo', form.errors)
