from django.core.management.base import BaseCommand

from tokens.queue_utils import auto_assign_tables


class Command(BaseCommand):
    help = "Seat waiting tokens at free tables, front of the queue first"

    def handle(self, *args, **options):
        assigned_count = auto_assign_tables()
        self.stdout.write(self.style.SUCCESS(f"Auto-assigned {assigned_count} token(s)"))
