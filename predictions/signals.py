from django.db.models.signals import post_save
from django.dispatch import receiver
from matches.models import Match
from .models import Prediction
from .scoring import calculate_points

@receiver(post_save, sender=Match)
def update_predictions_after_match(sender, instance, **kwargs):
    predictions = Prediction.objects.filter(match=instance)

    # Not finished (or reopened by an admin): nothing is scored yet
    if not instance.is_finished:
        predictions.exclude(points__isnull=True).update(points=None)
        return

    for pred in predictions:
        points = calculate_points(
            pred.predicted_home_score, pred.predicted_away_score,
            instance.home_score, instance.away_score,
        )
        if pred.points != points:
            pred.points = points
            pred.save(update_fields=['points'])
