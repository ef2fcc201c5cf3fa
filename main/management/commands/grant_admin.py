from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q

from main.models import Profile


class Command(BaseCommand):
    help = 'Grants (or with --revoke removes) admin access for a user given by email or username.'

    def add_arguments(self, parser):
        parser.add_argument('identifier', help='Email address or username of the user.')
        parser.add_argument('--revoke', action='store_true', help='Remove admin access instead.')

    def handle(self, *args, **options):
        identifier = options['identifier']
        users = User.objects.filter(Q(username=identifier) | Q(email__iexact=identifier))
        if not users.exists():
            raise CommandError(f'No user found for "{identifier}".')
        if users.count() > 1:
            raise CommandError(f'"{identifier}" matches more than one user; use the username.')

        user = users.get()
        profile, _ = Profile.objects.get_or_create(user=user)
        profile.is_admin = not options['revoke']
        profile.save(update_fields=['is_admin'])

        action = 'Revoked admin access from' if options['revoke'] else 'Granted admin access to'
        self.stdout.write(self.style.SUCCESS(f'{action} {user.username}.'))
