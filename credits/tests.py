import json
import random
import time

from django.conf import settings
from django.contrib.auth.models import User
from django.core.cache import cache
from django.test import TestCase, Client, override_settings
from django.urls import reverse

from main.models import Profile
from .challenges import (
    ChallengeExpired, NoActiveChallenge, discard_challenge, get_challenge, is_correct,
    parse_answer, store_challenge,
)
from .problems import (
    DIFFICULTIES, EASY, HARD, MEDIUM, OPERATION_RULES, SEQUENCE_LENGTHS, WORD_PROBLEMS,
    MathProblem, apply_operation, difficulty_for_credits, generate_math_problem,
    generate_operation_problem, generate_pattern_problem, generate_word_problem, round_half_up,
)


def evaluate_left_to_right(question):
    tokens = question.split(': ', 1)[1].split()
    value = int(tokens[0])
    for operation, operand in zip(tokens[1::2], tokens[2::2]):
        value = apply_operation(value, operation, int(operand))
    if isinstance(value, float):
        value = round_half_up(value, 2)
    return value


class ArithmeticTests(TestCase):
    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(3.14159, 2), 3.14)

    def test_apply_operation(self):
        self.assertEqual(apply_operation(10, '/', 4), 2.5)
        self.assertEqual(apply_operation(10, '/', 3), 3.33)
        self.assertEqual(apply_operation(-7, '%', 3), -1)
        self.assertEqual(apply_operation(6, '*', 7), 42)
        with self.assertRaises(ValueError):
            apply_operation(1, '^', 2)


class ProblemGeneratorTests(TestCase):
    def test_operation_problems_evaluate_left_to_right(self):
        for difficulty in DIFFICULTIES:
            for seed in range(25):
                problem = generate_operation_problem(difficulty, random.Random(seed))
                self.assertTrue(problem.question.startswith('Calculate from left to right: '))
                tokens = problem.question.split(': ', 1)[1].split()
                self.assertEqual(len(tokens[::2]), OPERATION_RULES[difficulty]['operands'])
                for operation in tokens[1::2]:
                    self.assertIn(operation, OPERATION_RULES[difficulty]['operations'])
                self.assertEqual(problem.answer, evaluate_left_to_right(problem.question))

    def test_integral_results_are_ints(self):
        for seed in range(25):
            problem = generate_operation_problem(EASY, random.Random(seed))
            self.assertIsInstance(problem.answer, int)

    def test_pattern_problems(self):
        for difficulty in DIFFICULTIES:
            for seed in range(25):
                problem = generate_pattern_problem(difficulty, random.Random(seed))
                sequence = problem.question.split(': ', 1)[1].split(', ')
                self.assertEqual(sequence[-1], '?')
                self.assertEqual(len(sequence) - 1, SEQUENCE_LENGTHS[difficulty])
                self.assertGreater(problem.answer, int(sequence[-2]))

    def test_word_problems_come_from_the_bank(self):
        problem = generate_word_problem(HARD, random.Random(4))
        self.assertIn((problem.question, problem.answer), WORD_PROBLEMS[HARD])

    def test_generate_math_problem(self):
        for seed in range(10):
            problem = generate_math_problem(MEDIUM, random.Random(seed))
            self.assertIsInstance(problem, MathProblem)
            self.assertEqual(problem.difficulty, MEDIUM)
        self.assertEqual(generate_math_problem().difficulty, MEDIUM)
        with self.assertRaises(ValueError):
            generate_math_problem('impossible')

    def test_difficulty_for_credits(self):
        self.assertEqual([difficulty_for_credits(c) for c in (0, 2, 3, 10, 11)],
                         [EASY, EASY, MEDIUM, MEDIUM, HARD])


class ChallengeStoreTests(TestCase):
    def setUp(self):
        cache.clear()
        self.problem = MathProblem('1 + 1?', 2, EASY)

    def test_store_and_get(self):
        store_challenge(1, self.problem, now=1000)
        entry = get_challenge(1, now=1000 + settings.SCORELINE['CHALLENGE_TTL'])
        self.assertEqual(entry['answer'], 2)
        self.assertEqual(entry['difficulty'], EASY)

    def test_missing(self):
        with self.assertRaises(NoActiveChallenge):
            get_challenge(1)

    def test_expired_is_discarded(self):
        store_challenge(1, self.problem, now=1000)
        with self.assertRaises(ChallengeExpired):
            get_challenge(1, now=1001 + settings.SCORELINE['CHALLENGE_TTL'])
        with self.assertRaises(NoActiveChallenge):
            get_challenge(1, now=1000)

    def test_new_challenge_replaces_old(self):
        store_challenge(1, self.problem)
        store_challenge(1, MathProblem('2 + 2?', 4, EASY))
        self.assertEqual(get_challenge(1)['answer'], 4)

    def test_discard(self):
        store_challenge(1, self.problem)
        self.assertTrue(discard_challenge(1))
        self.assertFalse(discard_challenge(1))

    def test_parse_answer(self):
        self.assertEqual(parse_answer('11.25'), 11.25)
        self.assertEqual(parse_answer(7), 7.0)
        self.assertIsNone(parse_answer('abc'))
        self.assertIsNone(parse_answer(True))
        self.assertIsNone(parse_answer('nan'))
        self.assertIsNone(parse_answer(None))

    def test_is_correct_tolerance(self):
        self.assertTrue(is_correct('11.255', 11.25))
        self.assertFalse(is_correct('11.27', 11.25))
        self.assertFalse(is_correct('eleven', 11))


class CreditViewTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = Client()
        self.user = User.objects.create_user(username='solver', email='solver@test.com', password='pass')
        self.url = reverse('credits:math_challenge')

    def answer(self, value):
        return self.client.post(self.url, data=json.dumps({'answer': value}), content_type='application/json')

    def test_requires_login(self):
        self.assertEqual(self.client.get(reverse('credits:get_user_credits')).status_code, 401)
        self.assertEqual(self.client.get(self.url).status_code, 401)

    def test_get_user_credits(self):
        self.client.login(username='solver', password='pass')
        data = self.client.get(reverse('credits:get_user_credits')).json()
        self.assertEqual(data['user']['username'], 'solver')
        self.assertEqual(data['user']['credits'], settings.SCORELINE['INITIAL_CREDITS'])

    def test_new_challenge_matches_balance(self):
        self.client.login(username='solver', password='pass')
        Profile.objects.filter(user=self.user).update(credits=0)
        data = self.client.get(self.url).json()
        self.assertEqual(data['difficulty'], EASY)
        self.assertNotIn('answer', data)
        self.assertEqual(get_challenge(self.user.pk)['question'], data['question'])

    def test_correct_answer_awards_credits(self):
        self.client.login(username='solver', password='pass')
        Profile.objects.filter(user=self.user).update(credits=5)
        self.client.get(self.url)
        challenge = get_challenge(self.user.pk)

        data = self.answer(challenge['answer']).json()
        self.assertTrue(data['success'])
        self.assertEqual(data['credits_awarded'], 2)
        self.assertEqual(data['credits'], 7)
        self.assertEqual(Profile.objects.get(user=self.user).credits, 7)

        response = self.answer(challenge['answer'])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], NoActiveChallenge.message)

    def test_wrong_answer_keeps_challenge(self):
        self.client.login(username='solver', password='pass')
        store_challenge(self.user.pk, MathProblem('1 + 1?', 2, EASY))
        data = self.answer('3').json()
        self.assertFalse(data['success'])
        self.assertEqual(data['correct_answer'], 2)
        self.assertEqual(Profile.objects.get(user=self.user).credits, settings.SCORELINE['INITIAL_CREDITS'])

        data = self.answer('2').json()
        self.assertTrue(data['success'])
        self.assertEqual(data['message'], "Correct! You've earned 1 credit.")

    def test_missing_answer(self):
        self.client.login(username='solver', password='pass')
        store_challenge(self.user.pk, MathProblem('1 + 1?', 2, EASY))
        self.assertEqual(self.answer('').status_code, 400)
        response = self.client.post(self.url, data=json.dumps({}), content_type='application/json')
        self.assertEqual(response.json()['message'], 'Answer is required')

    def test_no_active_challenge(self):
        self.client.login(username='solver', password='pass')
        response = self.answer('4')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], NoActiveChallenge.message)

    @override_settings(SCORELINE={**settings.SCORELINE, 'CHALLENGE_TTL': 60})
    def test_expired_challenge(self):
        self.client.login(username='solver', password='pass')
        store_challenge(self.user.pk, MathProblem('1 + 1?', 2, EASY), now=time.time() - 61)
        response = self.answer('2')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], ChallengeExpired.message)
        self.assertEqual(Profile.objects.get(user=self.user).credits, settings.SCORELINE['INITIAL_CREDITS'])
