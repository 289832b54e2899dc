from django.core.management.base import BaseCommand

from accounts.models import User
from tables.models import Table

# (table_number, capacity, is_joinable)
DEFAULT_ROSTER = [
    (1, 2, True),
    (2, 2, True),
    (3, 4, True),
    (4, 4, True),
    (5, 4, False),
    (6, 6, True),
    (7, 6, False),
    (8, 8, False),
]


class Command(BaseCommand):
    help = "Seed the database with a default table roster (and optionally an admin user)"

    def add_arguments(self, parser):
        parser.add_argument("--admin-username", help="Create an ADMIN user with this username")
        parser.add_argument("--admin-password", default="admin123")

    def handle(self, *args, **options):
        created = 0
        for table_number, capacity, is_joinable in DEFAULT_ROSTER:
            _, was_created = Table.objects.get_or_create(
                table_number=table_number,
                defaults={"capacity": capacity, "is_joinable": is_joinable},
            )
            if was_created:
                created += 1
                self.stdout.write(f"Created Table {table_number} (capacity {capacity})")

        username = options.get("admin_username")
        if username and not User.objects.filter(username=username).exists():
            User.objects.create_user(
                username=username,
                password=options["admin_password"],
                role="ADMIN",
            )
            self.stdout.write(f"Created admin user {username}")

        self.stdout.write(self.style.SUCCESS(f"Seeded {created} table(s)"))
