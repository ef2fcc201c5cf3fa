import json
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import User
from django.test import TestCase, Client, override_settings
from django.urls import reverse
from django.utils import timezone

from main.models import Profile
from matches.models import Match
from teams.models import Team
from .leaderboard import build_leaderboard, user_rank
from .models import Prediction
from .scoring import calculate_points, result_label


class ScoringTests(TestCase):
    def test_exact_score(self):
        self.assertEqual(calculate_points(2, 1, 2, 1), 3)
        self.assertEqual(calculate_points(0, 0, 0, 0), 3)

    def test_goal_difference(self):
        self.assertEqual(calculate_points(3, 2, 2, 1), 2)
        self.assertEqual(calculate_points(1, 1, 2, 2), 2)

    def test_correct_result(self):
        self.assertEqual(calculate_points(3, 0, 1, 0), 1)
        self.assertEqual(calculate_points(0, 2, 1, 4), 1)

    def test_wrong(self):
        self.assertEqual(calculate_points(2, 0, 0, 1), 0)
        self.assertEqual(calculate_points(1, 1, 2, 1), 0)

    def test_result_label(self):
        self.assertIsNone(result_label(None))
        self.assertEqual([result_label(p) for p in (3, 2, 1, 0)], ['exact', 'difference', 'result', 'wrong'])


class PredictionTestCase(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='user', password='pass')
        self.other = User.objects.create_user(username='other', password='pass')

        self.teamA = Team.objects.create(name='Team A')
        self.teamB = Team.objects.create(name='Team B')

        self.match = Match.objects.create(
            home_team=self.teamA,
            away_team=self.teamB,
            kickoff_time=timezone.now() + timedelta(minutes=5),
        )

    def predict(self, match_id=None, home=2, away=1):
        payload = {
            'match_id': match_id or self.match.id,
            'predicted_home_score': home,
            'predicted_away_score': away,
        }
        return self.client.post(reverse('predictions:predictions_api'),
                                data=json.dumps(payload), content_type='application/json')

    def finish(self, match, home, away):
        match.status = Match.FINISHED
        match.home_score = home
        match.away_score = away
        match.save()


class PredictionSignalTests(PredictionTestCase):
    def test_points_awarded_when_match_finishes(self):
        exact = Prediction.objects.create(user=self.user, match=self.match,
                                          predicted_home_score=2, predicted_away_score=1)
        wrong = Prediction.objects.create(user=self.other, match=self.match,
                                          predicted_home_score=0, predicted_away_score=1)
        self.assertIsNone(exact.points)

        self.finish(self.match, 2, 1)
        exact.refresh_from_db()
        wrong.refresh_from_db()
        self.assertEqual(exact.points, 3)
        self.assertEqual(exact.result, 'exact')
        self.assertEqual(wrong.points, 0)

    def test_points_recomputed_on_correction(self):
        prediction = Prediction.objects.create(user=self.user, match=self.match,
                                               predicted_home_score=2, predicted_away_score=1)
        self.finish(self.match, 2, 1)
        self.finish(self.match, 3, 1)
        prediction.refresh_from_db()
        self.assertEqual(prediction.points, 1)

    def test_points_cleared_when_reopened(self):
        prediction = Prediction.objects.create(user=self.user, match=self.match,
                                               predicted_home_score=2, predicted_away_score=1)
        self.finish(self.match, 2, 1)
        self.match.status = Match.LIVE
        self.match.save()
        prediction.refresh_from_db()
        self.assertIsNone(prediction.points)


class SubmitPredictionTests(PredictionTestCase):
    def test_requires_login(self):
        response = self.predict()
        self.assertEqual(response.status_code, 401)

    def test_submit_prediction_success(self):
        self.client.login(username='user', password='pass')
        response = self.predict()
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['created'])
        self.assertEqual(data['remaining_credits'], settings.SCORELINE['INITIAL_CREDITS'] - 1)
        self.assertTrue(Prediction.objects.filter(user=self.user, match=self.match).exists())

    def test_update_prediction_charges_again(self):
        self.client.login(username='user', password='pass')
        self.predict(home=1, away=0)
        data = self.predict(home=3, away=3).json()
        self.assertFalse(data['created'])
        self.assertEqual(data['remaining_credits'], settings.SCORELINE['INITIAL_CREDITS'] - 2)

        prediction = Prediction.objects.get(user=self.user, match=self.match)
        self.assertEqual((prediction.predicted_home_score, prediction.predicted_away_score), (3, 3))
        self.assertEqual(Prediction.objects.filter(user=self.user).count(), 1)

    def test_insufficient_credits(self):
        Profile.objects.filter(user=self.user).update(credits=0)
        self.client.login(username='user', password='pass')
        response = self.predict()
        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertEqual(data['credits_needed'], 1)
        self.assertEqual(data['current_credits'], 0)
        self.assertFalse(Prediction.objects.exists())

    @override_settings(SCORELINE={**settings.SCORELINE, 'INITIAL_CREDITS': 1})
    def test_last_credit_can_be_spent(self):
        user = User.objects.create_user(username='poor', password='pass')
        self.client.login(username='poor', password='pass')
        self.assertEqual(self.predict().json()['remaining_credits'], 0)
        self.assertEqual(self.predict().status_code, 400)
        self.assertEqual(Profile.objects.get(user=user).credits, 0)

    def test_closed_when_match_started(self):
        self.match.status = Match.LIVE
        self.match.save()
        self.client.login(username='user', password='pass')
        response = self.predict()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Predictions closed for this match')
        self.assertEqual(Profile.objects.get(user=self.user).credits, settings.SCORELINE['INITIAL_CREDITS'])

    def test_closed_after_kickoff(self):
        self.match.kickoff_time = timezone.now() - timedelta(seconds=1)
        self.match.save()
        self.client.login(username='user', password='pass')
        self.assertEqual(self.predict().status_code, 400)

    def test_match_not_found(self):
        self.client.login(username='user', password='pass')
        self.assertEqual(self.predict(match_id=9999).status_code, 404)

    def test_invalid_scores(self):
        self.client.login(username='user', password='pass')
        self.assertEqual(self.predict(home=-1).status_code, 400)
        self.assertEqual(self.predict(home='two').status_code, 400)
        self.assertEqual(self.predict(away=True).status_code, 400)

    def test_unicode_digit_and_huge_scores_are_rejected(self):
        self.client.login(username='user', password='pass')
        for home in ('²', 10 ** 20, 100):
            response = self.predict(home=home)
            self.assertEqual(response.status_code, 400, home)
            self.assertEqual(response.json()['message'], 'Invalid data provided')
            self.assertIn('predicted_home_score', response.json()['errors'])
        self.assertEqual(self.predict(match_id=10 ** 20).status_code, 400)
        self.assertFalse(Prediction.objects.exists())
        self.assertEqual(Profile.objects.get(user=self.user).credits, settings.SCORELINE['INITIAL_CREDITS'])

    def test_highest_allowed_score(self):
        self.client.login(username='user', password='pass')
        self.assertEqual(self.predict(home=99, away=0).status_code, 200)

    def test_form_encoded_submission(self):
        self.client.login(username='user', password='pass')
        response = self.client.post(reverse('predictions:predictions_api'), {
            'match_id': self.match.id, 'predicted_home_score': '0', 'predicted_away_score': '0',
        })
        self.assertEqual(response.status_code, 200)

    def test_list_own_predictions(self):
        Prediction.objects.create(user=self.user, match=self.match, predicted_home_score=1, predicted_away_score=0)
        Prediction.objects.create(user=self.other, match=self.match, predicted_home_score=0, predicted_away_score=0)
        self.client.login(username='user', password='pass')
        data = self.client.get(reverse('predictions:predictions_api')).json()
        self.assertEqual(len(data['predictions']), 1)
        self.assertEqual(data['predictions'][0]['match']['id'], self.match.id)


class LeaderboardTests(PredictionTestCase):
    def setUp(self):
        super().setUp()
        self.second = Match.objects.create(
            home_team=self.teamB, away_team=self.teamA,
            kickoff_time=timezone.now() + timedelta(minutes=10),
        )
        Prediction.objects.create(user=self.user, match=self.match, predicted_home_score=2, predicted_away_score=1)
        Prediction.objects.create(user=self.other, match=self.match, predicted_home_score=1, predicted_away_score=0)
        Prediction.objects.create(user=self.other, match=self.second, predicted_home_score=0, predicted_away_score=0)
        self.finish(self.match, 2, 1)

    def test_ranking(self):
        board = list(build_leaderboard())
        self.assertEqual([u.username for u in board], ['user', 'other'])
        self.assertEqual([u.total_points for u in board], [3, 2])
        # Predictions on unfinished matches are not counted yet.
        self.assertEqual(board[1].total_predictions, 1)

    def test_users_without_predictions_are_listed(self):
        User.objects.create_user(username='lurker', password='pass')
        board = list(build_leaderboard())
        self.assertEqual(board[-1].username, 'lurker')
        self.assertEqual(board[-1].total_points, 0)

    def test_time_range_excludes_old_predictions(self):
        Prediction.objects.filter(user=self.user).update(created_at=timezone.now() - timedelta(days=10))
        week = list(build_leaderboard('week'))
        self.assertEqual(week[0].username, 'other')
        month = list(build_leaderboard('month'))
        self.assertEqual(month[0].username, 'user')

    def test_user_rank(self):
        self.assertEqual(user_rank(self.user), (1, 3))
        self.assertEqual(user_rank(self.other), (2, 2))

    def test_leaderboard_json(self):
        response = self.client.get(reverse('predictions:get_leaderboard_json'), {'time_range': 'week'})
        data = response.json()
        self.assertEqual(data['time_range'], 'week')
        self.assertEqual(data['users'][0], {
            'id': self.user.id, 'username': 'user', 'total_points': 3,
            'correct_predictions': 1, 'total_predictions': 1,
        })

    def test_leaderboard_json_bad_range(self):
        response = self.client.get(reverse('predictions:get_leaderboard_json'), {'time_range': 'year'})
        self.assertEqual(response.status_code, 400)

    def test_leaderboard_page(self):
        response = self.client.get(reverse('predictions:leaderboard'), {'time_range': 'bogus'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['time_range'], 'all')

    def test_my_predictions_page(self):
        response = self.client.get(reverse('predictions:my_predictions'))
        self.assertEqual(response.status_code, 302)

        self.client.login(username='other', password='pass')
        response = self.client.get(reverse('predictions:my_predictions'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_points'], 2)
