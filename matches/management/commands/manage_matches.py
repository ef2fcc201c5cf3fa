import sys
import time
import traceback
from django.core.management.base import BaseCommand
from matches.lifecycle import manage_matches


class Command(BaseCommand):
    help = 'Starts due matches, finishes live ones and keeps the pool of upcoming matches filled.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--loop', type=int, default=0, metavar='SECONDS',
            help='Keep running, polling every SECONDS seconds.',
        )

    def handle(self, *args, **options):
        interval = options['loop']
        while True:
            self.run_once()
            if interval <= 0:
                return
            time.sleep(interval)

    def run_once(self):
        try:
            result = manage_matches()
        except Exception as e:
            self.stderr.write(self.style.ERROR(f'Error managing matches: {e}'))
            traceback.print_exc(file=sys.stderr)
            return

        self.stdout.write(self.style.SUCCESS(
            f'Started {result.started}, finished {result.finished}, generated {result.generated} matches '
            f'({result.scheduled} scheduled, {result.live} live).'
        ))
