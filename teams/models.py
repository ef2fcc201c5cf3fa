from django.db import models


class Team(models.Model):
    name = models.CharField(max_length=255, unique=True)
    logo = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'logo': self.logo if self.logo else None,
        }
