from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Match(models.Model):
    SCHEDULED = 'SCHEDULED'
    LIVE = 'LIVE'
    FINISHED = 'FINISHED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = (
        (SCHEDULED, 'Scheduled'),
        (LIVE, 'Live'),
        (FINISHED, 'Finished'),
        (CANCELLED, 'Cancelled'),
    )

    ACTIVE_STATUSES = (SCHEDULED, LIVE)

    home_team = models.ForeignKey('teams.Team', related_name='home_matches', on_delete=models.CASCADE)
    away_team = models.ForeignKey('teams.Team', related_name='away_matches', on_delete=models.CASCADE)
    kickoff_time = models.DateTimeField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=SCHEDULED, db_index=True)
    home_score = models.PositiveIntegerField(null=True, blank=True)
    away_score = models.PositiveIntegerField(null=True, blank=True)
    league = models.CharField(max_length=100, blank=True, default='')
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)
    result_summary = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['kickoff_time']
        verbose_name_plural = 'matches'

    def __str__(self):
        return f"{self.home_team} vs {self.away_team} ({self.league or 'Friendly'})"

    def clean(self):
        if self.home_team_id and self.home_team_id == self.away_team_id:
            raise ValidationError('Home and away team must be different.')
        if self.status == self.FINISHED and (self.home_score is None or self.away_score is None):
            raise ValidationError('A finished match needs both scores.')

    @property
    def is_finished(self):
        return self.status == self.FINISHED and self.home_score is not None and self.away_score is not None

    def is_open_for_predictions(self, now=None):
        now = now or timezone.now()
        return self.status == self.SCHEDULED and self.kickoff_time >= now

    def to_dict(self, now=None):
        now = now or timezone.now()
        return {
            'id': self.pk,
            'home_team': self.home_team.to_dict(),
            'away_team': self.away_team.to_dict(),
            'kickoff_time': self.kickoff_time.isoformat(),
            'seconds_to_kickoff': max(0, int((self.kickoff_time - now).total_seconds())),
            'status': self.status,
            'league': self.league,
            'home_score': self.home_score,
            'away_score': self.away_score,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
            'result_summary': self.result_summary,
            'is_open_for_predictions': self.is_open_for_predictions(now),
        }
