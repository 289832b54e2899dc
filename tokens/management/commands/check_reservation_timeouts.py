from django.core.management.base import BaseCommand

from tokens.queue_utils import check_reservation_timeouts


class Command(BaseCommand):
    help = "Cancel waiting reservations that are past the grace period (run from cron)"

    def handle(self, *args, **options):
        timeout_count = check_reservation_timeouts()
        self.stdout.write(self.style.SUCCESS(f"Processed {timeout_count} timeout(s)"))
