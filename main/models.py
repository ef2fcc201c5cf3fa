from django.db import models
from django.db.models import F
from django.contrib.auth.models import User

from scoreline.conf import get_setting


def default_credits():
    return get_setting('INITIAL_CREDITS')


class Profile(models.Model):
    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='profile')
    credits = models.PositiveIntegerField(default=default_credits)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f'{self.user.username} Profile'

    def add_credits(self, amount):
        """Atomically add ``amount`` credits and refresh the instance."""
        Profile.objects.filter(pk=self.pk).update(credits=F('credits') + amount)
        self.refresh_from_db(fields=['credits'])
        return self.credits


def is_admin_user(user):
    if not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    try:
        return user.profile.is_admin
    except Profile.DoesNotExist:
        return False
