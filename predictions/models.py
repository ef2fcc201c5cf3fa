from django.db import models
from django.contrib.auth.models import User

from .scoring import result_label


class Prediction(models.Model):
    user = models.ForeignKey(User, related_name='predictions', on_delete=models.CASCADE)
    match = models.ForeignKey('matches.Match', related_name='predictions', on_delete=models.CASCADE)
    predicted_home_score = models.PositiveIntegerField()
    predicted_away_score = models.PositiveIntegerField()
    points = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('user', 'match')
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.username}'s prediction for {self.match}"

    @property
    def result(self):
        return result_label(self.points)

    def to_dict(self):
        return {
            'id': self.pk,
            'match_id': self.match_id,
            'predicted_home_score': self.predicted_home_score,
            'predicted_away_score': self.predicted_away_score,
            'points': self.points,
            'result': self.result,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }
