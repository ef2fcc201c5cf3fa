from django.core.management.base import BaseCommand
from matches.lifecycle import generate_random_matches, top_up_matches
from teams.models import Team

SAMPLE_TEAMS = [
    ('Manchester United', '/teams/man_utd.png'),
    ('Arsenal', '/teams/arsenal.png'),
    ('Chelsea', '/teams/chelsea.png'),
    ('Liverpool', '/teams/liverpool.png'),
    ('Manchester City', '/teams/man_city.png'),
    ('Tottenham Hotspur', '/teams/tottenham.png'),
    ('Newcastle United', '/teams/newcastle.png'),
    ('Aston Villa', '/teams/aston_villa.png'),
]


class Command(BaseCommand):
    help = 'Seeds sample teams and random matches for demos and local development.'

    def add_arguments(self, parser):
        parser.add_argument('--teams', action='store_true', help='Create the sample teams first.')
        parser.add_argument(
            '--count', type=int, default=None,
            help='Generate exactly this many matches instead of topping up the active pool.',
        )

    def handle(self, *args, **options):
        if options['teams']:
            created = 0
            for name, logo in SAMPLE_TEAMS:
                _, was_created = Team.objects.get_or_create(name=name, defaults={'logo': logo})
                created += int(was_created)
            self.stdout.write(self.style.SUCCESS(f'Added {created} sample teams.'))

        if options['count'] is not None:
            matches = generate_random_matches(options['count'])
        else:
            matches = top_up_matches()

        if not matches:
            self.stdout.write(self.style.WARNING('No new matches needed.'))
            return
        self.stdout.write(self.style.SUCCESS(f'Successfully seeded {len(matches)} new matches.'))
