import json
import random
from datetime import timedelta
from io import StringIO
from unittest import mock

from django.conf import settings
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import Client, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from predictions.models import Prediction
from teams.models import Team
from .forms import MatchForm
from .lifecycle import (
    LEAGUES, MatchTransitionError, cancel_match, finish_match, generate_random_match,
    manage_matches, resolve_score, start_match, top_up_matches,
)
from .models import Match
from .predictor import PredictedResult, predict_match_result, predict_score


class BaseMatchTestCase(TestCase):
    """Two teams and a fixed clock shared by the match tests."""

    @classmethod
    def setUpTestData(cls):
        cls.arsenal = Team.objects.create(name='Arsenal')
        cls.chelsea = Team.objects.create(name='Chelsea')
        cls.now = timezone.now().replace(microsecond=0)

    def create_match(self, status=Match.SCHEDULED, kickoff=None, league='La Liga', **kwargs):
        return Match.objects.create(
            home_team=self.arsenal,
            away_team=self.chelsea,
            kickoff_time=kickoff or self.now + timedelta(minutes=5),
            status=status,
            league=league,
            **kwargs
        )


class MatchModelTests(BaseMatchTestCase):
    def test_clean_rejects_same_team(self):
        match = Match(home_team=self.arsenal, away_team=self.arsenal, kickoff_time=self.now)
        with self.assertRaises(ValidationError):
            match.clean()

    def test_clean_requires_scores_when_finished(self):
        match = Match(home_team=self.arsenal, away_team=self.chelsea, kickoff_time=self.now,
                      status=Match.FINISHED, home_score=1)
        with self.assertRaises(ValidationError):
            match.clean()

    def test_open_for_predictions(self):
        match = self.create_match()
        self.assertTrue(match.is_open_for_predictions(self.now))
        self.assertFalse(match.is_open_for_predictions(self.now + timedelta(minutes=6)))

        match.status = Match.LIVE
        self.assertFalse(match.is_open_for_predictions(self.now))

    def test_to_dict(self):
        match = self.create_match()
        data = match.to_dict(self.now)
        self.assertEqual(data['home_team']['name'], 'Arsenal')
        self.assertEqual(data['seconds_to_kickoff'], 300)
        self.assertEqual(data['status'], Match.SCHEDULED)
        self.assertIsNone(data['home_score'])
        self.assertTrue(data['is_open_for_predictions'])

    def test_str(self):
        self.assertEqual(str(self.create_match(league='')), 'Arsenal vs Chelsea (Friendly)')


class MatchFormTests(BaseMatchTestCase):
    def test_status_defaults_to_scheduled(self):
        form = MatchForm({
            'home_team': self.arsenal.pk,
            'away_team': self.chelsea.pk,
            'kickoff_time': '2030-01-01T12:00',
        })
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['status'], Match.SCHEDULED)

    def test_same_team_is_invalid(self):
        form = MatchForm({
            'home_team': self.arsenal.pk,
            'away_team': self.arsenal.pk,
            'kickoff_time': '2030-01-01T12:00',
        })
        self.assertFalse(form.is_valid())
        self.assertIn('__all__', form.errors)


class PredictorTests(TestCase):
    def test_predict_score_is_deterministic(self):
        result = predict_score('Arsenal', 'Chelsea', 'La Liga')
        self.assertEqual((result.home_score, result.away_score), (4, 1))
        self.assertIn('Arsenal', result.explanation)

    def test_high_scoring_league_bonus(self):
        result = predict_score('Arsenal', 'Chelsea', 'Premier League')
        self.assertEqual((result.home_score, result.away_score), (4, 2))

    def test_single_letter_name(self):
        # 'A' counts twice: 130 % 10 = 0 and 130 % 8 = 2
        result = predict_score('A', 'A', 'Serie A')
        self.assertEqual((result.home_score, result.away_score), (0, 1))
        self.assertIn('evenly matched', predict_score('Barcelona', 'Barcelona', 'Serie A').explanation)

    def test_scores_stay_in_range(self):
        for home in ('Arsenal', 'Zz', 'Real Madrid', 'Porto'):
            for away in ('Chelsea', 'Ajax', 'Benfica'):
                result = predict_score(home, away, 'Bundesliga')
                self.assertTrue(0 <= result.home_score <= 5)
                self.assertTrue(0 <= result.away_score <= 5)

    def test_fallback_on_unusable_name(self):
        blank = Team.objects.create(name='')
        other = Team.objects.create(name='Chelsea')
        match = Match.objects.create(home_team=blank, away_team=other, kickoff_time=timezone.now())
        with self.assertLogs('matches.predictor', level='ERROR'):
            result = predict_match_result(match, rng=random.Random(3))
        self.assertIsInstance(result, PredictedResult)
        self.assertTrue(0 <= result.home_score <= 3)
        self.assertIn('limited data', result.explanation)


class LifecycleTests(BaseMatchTestCase):
    def test_start_and_finish(self):
        match = self.create_match()
        match = start_match(match, now=self.now)
        self.assertEqual(match.status, Match.LIVE)
        self.assertEqual(match.started_at, self.now)

        match = finish_match(match, 2, 1, summary='Close game', now=self.now)
        self.assertEqual(match.status, Match.FINISHED)
        self.assertEqual((match.home_score, match.away_score), (2, 1))
        self.assertEqual(match.finished_at, self.now)

    def test_invalid_transitions(self):
        match = self.create_match()
        with self.assertRaises(MatchTransitionError) as cm:
            finish_match(match, 1, 0)
        self.assertEqual(cm.exception.current, Match.SCHEDULED)
        self.assertEqual(cm.exception.target, Match.FINISHED)

        cancel_match(match)
        with self.assertRaises(MatchTransitionError):
            start_match(match)
        with self.assertRaises(MatchTransitionError):
            cancel_match(match)

    def test_generate_random_match(self):
        match = generate_random_match(now=self.now, rng=random.Random(7))
        self.assertEqual(match.status, Match.SCHEDULED)
        self.assertNotEqual(match.home_team_id, match.away_team_id)
        self.assertIn(match.league, LEAGUES)
        self.assertEqual(match.kickoff_time, self.now + timedelta(seconds=settings.SCORELINE['KICKOFF_LEAD']))

    def test_resolve_score_inside_window_uses_predictor(self):
        match = self.create_match(status=Match.LIVE)
        self.assertEqual(resolve_score(match, 115)[:2], (4, 1))

    def test_resolve_score_after_duration_is_random(self):
        match = self.create_match(status=Match.LIVE)
        home, away, summary = resolve_score(match, 300, rng=random.Random(1))
        self.assertTrue(0 <= home <= 5)
        self.assertTrue(0 <= away <= 5)
        self.assertEqual(summary, '')

    def test_manage_matches_on_empty_database(self):
        Team.objects.all().delete()
        result = manage_matches(now=self.now, rng=random.Random(0))
        self.assertEqual(result.generated, 5)
        self.assertEqual(result.scheduled, 5)
        self.assertEqual(Team.objects.count(), 20)

    def test_manage_matches_full_cycle(self):
        due = self.create_match(kickoff=self.now - timedelta(seconds=1))
        live = self.create_match(status=Match.LIVE, started_at=self.now - timedelta(seconds=115))
        fresh = self.create_match(status=Match.LIVE, started_at=self.now - timedelta(seconds=30))
        Prediction.objects.create(user=User.objects.create_user('fan', password='pass'), match=live,
                                  predicted_home_score=4, predicted_away_score=1)

        result = manage_matches(now=self.now, rng=random.Random(0))

        due.refresh_from_db()
        live.refresh_from_db()
        fresh.refresh_from_db()
        self.assertEqual(due.status, Match.LIVE)
        self.assertEqual(live.status, Match.FINISHED)
        self.assertEqual((live.home_score, live.away_score), (4, 1))
        self.assertNotEqual(live.result_summary, '')
        self.assertEqual(fresh.status, Match.LIVE)
        self.assertEqual(Prediction.objects.get(match=live).points, 3)

        self.assertEqual((result.started, result.finished), (1, 1))
        # One replacement plus a top-up of two: due and fresh are live.
        self.assertEqual(result.generated, 3)
        self.assertEqual(result.live, 2)
        self.assertEqual(result.scheduled, 3)

    def test_manage_matches_continues_after_a_failing_match(self):
        broken = self.create_match(status=Match.LIVE, started_at=self.now - timedelta(seconds=115))
        healthy = self.create_match(status=Match.LIVE, started_at=self.now - timedelta(seconds=115))

        def flaky_resolve(match, elapsed, rng=None):
            if match.pk == broken.pk:
                raise RuntimeError('scoreboard offline')
            return resolve_score(match, elapsed, rng=rng)

        with mock.patch('matches.lifecycle.resolve_score', side_effect=flaky_resolve):
            with self.assertLogs('matches.lifecycle', level='ERROR') as logs:
                result = manage_matches(now=self.now, rng=random.Random(0))

        self.assertIn(f'Error finishing match {broken.pk}', logs.output[0])
        broken.refresh_from_db()
        healthy.refresh_from_db()
        self.assertEqual(broken.status, Match.LIVE)
        self.assertEqual(healthy.status, Match.FINISHED)
        self.assertEqual(result.finished, 1)

    def test_manage_matches_late_poll_uses_random_score(self):
        late = self.create_match(status=Match.LIVE, started_at=self.now - timedelta(seconds=600))
        manage_matches(now=self.now, rng=random.Random(2))
        late.refresh_from_db()
        self.assertEqual(late.status, Match.FINISHED)
        self.assertEqual(late.result_summary, '')

    def test_manage_matches_is_idempotent(self):
        manage_matches(now=self.now, rng=random.Random(0))
        result = manage_matches(now=self.now, rng=random.Random(0))
        self.assertEqual((result.started, result.finished, result.generated), (0, 0, 0))

    def test_top_up_matches(self):
        self.create_match()
        self.create_match(status=Match.CANCELLED)
        created = top_up_matches(now=self.now)
        self.assertEqual(len(created), 4)
        self.assertEqual(top_up_matches(now=self.now), [])


class MatchViewTests(BaseMatchTestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='player', password='password')
        self.admin = User.objects.create_superuser(username='admin', email='admin@test.com', password='password')

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def test_matches_page(self):
        self.create_match(kickoff=timezone.now() + timedelta(minutes=5))
        response = self.client.get(reverse('matches:matches_page'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'matches/matches.html')
        self.assertEqual(len(response.context['upcoming_matches']), 1)

    def test_matches_page_polls_lifecycle_without_cron_secret(self):
        response = self.client.get(reverse('matches:matches_page'))
        self.assertTrue(response.context['auto_update'])
        self.assertContains(response, reverse('matches:manage_matches'))

    @override_settings(SCORELINE={**settings.SCORELINE, 'CRON_SECRET': 's3cret'})
    def test_matches_page_leaves_lifecycle_to_cron_with_secret(self):
        response = self.client.get(reverse('matches:matches_page'))
        self.assertFalse(response.context['auto_update'])
        self.assertNotContains(response, reverse('matches:manage_matches'))

    def test_matches_json_filters(self):
        upcoming = self.create_match(kickoff=timezone.now() + timedelta(minutes=5))
        self.create_match(status=Match.LIVE, kickoff=timezone.now() - timedelta(minutes=1))
        self.create_match(status=Match.FINISHED, home_score=1, away_score=0,
                          kickoff=timezone.now() - timedelta(hours=1))

        data = self.client.get(reverse('matches:get_matches_json')).json()
        self.assertEqual([m['id'] for m in data['matches']], [upcoming.pk])

        for status_filter, expected in (('live', 1), ('finished', 1), ('all', 3)):
            data = self.client.get(reverse('matches:get_matches_json'), {'status': status_filter}).json()
            self.assertEqual(len(data['matches']), expected, status_filter)

    def test_matches_json_unknown_filter(self):
        response = self.client.get(reverse('matches:get_matches_json'), {'status': 'postponed'})
        self.assertEqual(response.status_code, 400)

    def test_matches_json_includes_own_prediction(self):
        match = self.create_match(kickoff=timezone.now() + timedelta(minutes=5))
        Prediction.objects.create(user=self.user, match=match, predicted_home_score=2, predicted_away_score=2)
        self.client.login(username='player', password='password')
        data = self.client.get(reverse('matches:get_match_detail_json', args=[match.pk])).json()
        self.assertEqual(data['match']['prediction']['predicted_home_score'], 2)

        self.client.logout()
        data = self.client.get(reverse('matches:get_match_detail_json', args=[match.pk])).json()
        self.assertIsNone(data['match']['prediction'])

    def test_match_detail_not_found(self):
        response = self.client.get(reverse('matches:get_match_detail_json', args=[9999]))
        self.assertEqual(response.status_code, 404)

    def test_cron_endpoint(self):
        response = self.client.get(reverse('matches:manage_matches'))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'success')
        self.assertEqual(data['matches_managed']['generated'], 5)

    @override_settings(SCORELINE={**settings.SCORELINE, 'CRON_SECRET': 's3cret'})
    def test_cron_endpoint_requires_secret(self):
        response = self.client.get(reverse('matches:manage_matches'))
        self.assertEqual(response.status_code, 401)
        response = self.client.get(reverse('matches:manage_matches'), HTTP_AUTHORIZATION='Bearer s3cret')
        self.assertEqual(response.status_code, 200)

    def test_seed_endpoint(self):
        response = self.client.post(reverse('matches:seed_matches'))
        self.assertEqual(response.status_code, 401)

        self.client.login(username='admin', password='password')
        data = self.client.post(reverse('matches:seed_matches')).json()
        self.assertEqual(len(data['matches']), 5)

        data = self.client.post(reverse('matches:seed_matches')).json()
        self.assertEqual(data['message'], 'No new matches needed')
        self.assertEqual(data['existing_count'], 5)

    def test_admin_creates_match(self):
        self.client.login(username='admin', password='password')
        response = self.post_json(reverse('matches:admin_matches'), {
            'home_team': self.arsenal.pk,
            'away_team': self.chelsea.pk,
            'kickoff_time': '2030-01-01T12:00',
            'league': 'Serie A',
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['match']['status'], Match.SCHEDULED)

    def test_admin_create_match_invalid(self):
        self.client.login(username='admin', password='password')
        response = self.post_json(reverse('matches:admin_matches'), {
            'home_team': self.arsenal.pk,
            'away_team': self.arsenal.pk,
            'kickoff_time': '2030-01-01T12:00',
        })
        self.assertEqual(response.status_code, 400)

    def test_admin_matches_forbidden_for_players(self):
        self.client.login(username='player', password='password')
        self.assertEqual(self.client.get(reverse('matches:admin_matches')).status_code, 403)

    def test_admin_finishes_match_and_scores_predictions(self):
        match = self.create_match(kickoff=timezone.now() + timedelta(minutes=5))
        Prediction.objects.create(user=self.user, match=match, predicted_home_score=3, predicted_away_score=2)
        self.client.login(username='admin', password='password')

        response = self.post_json(reverse('matches:edit_match', args=[match.pk]), {
            'status': Match.FINISHED, 'home_score': 2, 'away_score': 1,
        })
        self.assertEqual(response.status_code, 200)
        match.refresh_from_db()
        self.assertEqual(match.status, Match.FINISHED)
        self.assertIsNotNone(match.finished_at)
        self.assertEqual(Prediction.objects.get(match=match).points, 2)

    def test_admin_finish_without_scores_is_rejected(self):
        match = self.create_match()
        self.client.login(username='admin', password='password')
        response = self.post_json(reverse('matches:edit_match', args=[match.pk]), {'status': Match.FINISHED})
        self.assertEqual(response.status_code, 400)

    def test_admin_cancels_scheduled_match(self):
        match = self.create_match()
        self.client.login(username='admin', password='password')
        response = self.post_json(reverse('matches:edit_match', args=[match.pk]), {
            'status': Match.CANCELLED, 'league': 'Serie A',
        })
        self.assertEqual(response.status_code, 200)
        match.refresh_from_db()
        self.assertEqual((match.status, match.league), (Match.CANCELLED, 'Serie A'))

    def test_admin_cannot_cancel_finished_match(self):
        match = self.create_match(status=Match.FINISHED, home_score=1, away_score=1)
        self.client.login(username='admin', password='password')
        response = self.post_json(reverse('matches:edit_match', args=[match.pk]), {
            'status': Match.CANCELLED, 'league': 'Serie A',
        })
        self.assertEqual(response.status_code, 400)
        match.refresh_from_db()
        self.assertEqual((match.status, match.league), (Match.FINISHED, 'La Liga'))

    def test_admin_deletes_match(self):
        match = self.create_match()
        self.client.login(username='admin', password='password')
        response = self.client.post(reverse('matches:delete_match', args=[match.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Match.objects.filter(pk=match.pk).exists())


class MatchCommandTests(BaseMatchTestCase):
    def test_manage_matches_command(self):
        out = StringIO()
        call_command('manage_matches', stdout=out)
        self.assertIn('generated 5 matches (5 scheduled, 0 live)', out.getvalue())

    def test_seed_matches_command(self):
        out = StringIO()
        call_command('seed_matches', '--teams', '--count', '3', stdout=out)
        self.assertIn('Added 6 sample teams.', out.getvalue())
        self.assertIn('Successfully seeded 3 new matches.', out.getvalue())
        self.assertEqual(Match.objects.count(), 3)

    def test_seed_matches_command_nothing_needed(self):
        for _ in range(5):
            self.create_match()
        out = StringIO()
        call_command('seed_matches', stdout=out)
        self.assertIn('No new matches needed.', out.getvalue())
