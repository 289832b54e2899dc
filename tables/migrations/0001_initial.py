import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Table",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("table_number", models.PositiveIntegerField(unique=True)),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "status",
                    models.CharField(
                        choices=[("free", "Free"), ("occupied", "Occupied"), ("reserved", "Reserved"), ("shared", "Shared")],
                        db_index=True,
                        default="free",
                        max_length=15,
                    ),
                ),
                ("is_joinable", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["table_number"],
                "indexes": [models.Index(fields=["status", "capacity"], name="table_status_capacity_idx")],
            },
        ),
    ]
