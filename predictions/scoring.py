"""Points awarded for a score prediction once the match has finished."""

EXACT_SCORE_POINTS = 3
GOAL_DIFFERENCE_POINTS = 2
CORRECT_RESULT_POINTS = 1

RESULT_LABELS = {
    EXACT_SCORE_POINTS: 'exact',
    GOAL_DIFFERENCE_POINTS: 'difference',
    CORRECT_RESULT_POINTS: 'result',
    0: 'wrong',
}


def _sign(value):
    return (value > 0) - (value < 0)


def calculate_points(predicted_home, predicted_away, actual_home, actual_away):
    if predicted_home == actual_home and predicted_away == actual_away:
        return EXACT_SCORE_POINTS

    predicted_diff = predicted_home - predicted_away
    actual_diff = actual_home - actual_away
    if predicted_diff == actual_diff:
        return GOAL_DIFFERENCE_POINTS

    if _sign(predicted_diff) == _sign(actual_diff):
        return CORRECT_RESULT_POINTS
    return 0


def result_label(points):
    """'exact', 'difference', 'result' or 'wrong'; None while unscored."""
    if points is None:
        return None
    return RESULT_LABELS.get(points, 'wrong')
