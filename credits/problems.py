"""
Math problem generator for the credit challenges.

Three families are mixed by weight: operation chains (50%), number
sequences (30%) and a fixed bank of word problems (20%). Every generator
accepts a ``random.Random``-like ``rng`` so results can be reproduced.
"""
import math
import random
from collections import namedtuple

EASY = 'easy'
MEDIUM = 'medium'
HARD = 'hard'
DIFFICULTIES = (EASY, MEDIUM, HARD)

MathProblem = namedtuple('MathProblem', ['question', 'answer', 'difficulty'])

OPERATION_RULES = {
    EASY: {'min': 10, 'max': 50, 'operands': 3, 'operations': ['+', '-', '*']},
    MEDIUM: {'min': 10, 'max': 100, 'operands': 4, 'operations': ['+', '-', '*', '/']},
    HARD: {'min': 20, 'max': 200, 'operands': 5, 'operations': ['+', '-', '*', '/', '%']},
}

SEQUENCE_LENGTHS = {EASY: 5, MEDIUM: 6, HARD: 7}

WORD_PROBLEMS = {
    EASY: [
        ("A train travels 120 km in 2 hours. What is its average speed in km/h?", 60),
        ("If 3 shirts cost $60, how much would 5 shirts cost?", 100),
        ("A recipe requires 2.5 cups of flour for 20 cookies. How many cups are needed for 32 cookies?", 4),
    ],
    MEDIUM: [
        ("A car depreciates by 15% each year. If it costs $20,000 new, what will be its value after "
         "2 years? Round to the nearest dollar.", 14450),
        ("If 8 workers can build a wall in 10 days, how many days would it take 5 workers to build "
         "the same wall?", 16),
        ("A phone costs $800 after a 30% discount. What was the original price? Round to the nearest "
         "dollar.", 1143),
    ],
    HARD: [
        ("If a ball is thrown upward with an initial velocity of 15 m/s, its height (in meters) after "
         "t seconds is h = 15t - 5t². What is the maximum height reached?", 11.25),
        ("A water tank is 2/3 full. When 20 liters of water are removed, it becomes 1/2 full. What is "
         "the capacity of the tank in liters?", 120),
        ("An investment grows at 8% compound interest per year. How many years will it take for the "
         "investment to triple? Round to the nearest year. (Hint: Use the formula A = P(1+r)^t and "
         "solve for t where A/P = 3)", 15),
    ],
}

PROBLEM_WEIGHTS = (
    ('operation', 0.5),
    ('pattern', 0.3),
    ('word', 0.2),
)


def round_half_up(value, digits=0):
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def apply_operation(value, operation, operand):
    if operation == '+':
        return value + operand
    if operation == '-':
        return value - operand
    if operation == '*':
        return value * operand
    if operation == '/':
        return round_half_up(value / operand, 2)
    if operation == '%':
        # Remainder keeps the sign of the dividend.
        return math.fmod(value, operand)
    raise ValueError(f'Unknown operation {operation!r}')


def _divisor_of(number, rng):
    divisors = [d for d in range(2, min(20, number) + 1) if number % d == 0]
    return rng.choice(divisors) if divisors else None


def generate_operation_problem(difficulty, rng=None):
    rng = rng or random
    rules = OPERATION_RULES[difficulty]
    operations = rules['operations']

    numbers = []
    for i in range(rules['operands']):
        number = rng.randint(rules['min'], rules['max'])
        # Mostly pick a divisor of the previous operand so divisions come out whole.
        if i > 0 and '/' in operations and rng.random() <= 0.7:
            number = _divisor_of(numbers[i - 1], rng) or number
        numbers.append(number)

    expression = str(numbers[0])
    value = numbers[0]
    for number in numbers[1:]:
        operation = rng.choice(operations)
        expression += f' {operation} {number}'
        value = apply_operation(value, operation, number)

    if isinstance(value, float):
        value = round_half_up(value, 2)
        if value.is_integer():
            value = int(value)
    return MathProblem(f'Calculate from left to right: {expression}', value, difficulty)


def _custom_sequence(difficulty, length, rng):
    base = rng.randint(1, 5)

    def term(i):
        n = base + i
        if difficulty == EASY:
            return n ** 2
        if difficulty == MEDIUM:
            return n ** 2 + i
        return n * (n + 1)

    return [term(i) for i in range(length)], term(length)


def generate_pattern_problem(difficulty, rng=None):
    rng = rng or random
    length = SEQUENCE_LENGTHS[difficulty]
    pattern = rng.choice(['arithmetic', 'geometric', 'fibonacci', 'custom'])

    if pattern == 'arithmetic':
        start = rng.randint(1, 10)
        step = rng.randint(1, 5)
        sequence = [start + i * step for i in range(length)]
        next_number = start + length * step
    elif pattern == 'geometric':
        first = rng.randint(1, 5)
        ratio = rng.randint(2, 4)
        sequence = [first * ratio ** i for i in range(length)]
        next_number = first * ratio ** length
    elif pattern == 'fibonacci':
        sequence = [rng.randint(1, 5), rng.randint(1, 10)]
        while len(sequence) < length:
            sequence.append(sequence[-1] + sequence[-2])
        next_number = sequence[-1] + sequence[-2]
    else:
        sequence, next_number = _custom_sequence(difficulty, length, rng)

    question = f"Find the next number in the sequence: {', '.join(str(n) for n in sequence)}, ?"
    return MathProblem(question, next_number, difficulty)


def generate_word_problem(difficulty, rng=None):
    rng = rng or random
    question, answer = rng.choice(WORD_PROBLEMS[difficulty])
    return MathProblem(question, answer, difficulty)


GENERATORS = {
    'operation': generate_operation_problem,
    'pattern': generate_pattern_problem,
    'word': generate_word_problem,
}


def generate_math_problem(difficulty=MEDIUM, rng=None):
    if difficulty not in DIFFICULTIES:
        raise ValueError(f'Unknown difficulty {difficulty!r}')
    rng = rng or random

    roll = rng.random()
    cumulative = 0.0
    for kind, weight in PROBLEM_WEIGHTS:
        cumulative += weight
        if roll <= cumulative:
            return GENERATORS[kind](difficulty, rng)
    return generate_operation_problem(difficulty, rng)


def difficulty_for_credits(credits):
    if credits <= 2:
        return EASY
    if credits <= 10:
        return MEDIUM
    return HARD


CREDIT_REWARDS = {EASY: 1, MEDIUM: 2, HARD: 3}
