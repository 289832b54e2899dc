import datetime
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tables", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="QueueSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("grace_period_minutes", models.PositiveIntegerField(default=15)),
                (
                    "avg_seat_time_minutes",
                    models.PositiveIntegerField(default=45, validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("opening_time", models.TimeField(default=datetime.time(9, 0))),
                ("closing_time", models.TimeField(default=datetime.time(22, 0))),
                ("auto_refresh", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "queue settings",
                "verbose_name_plural": "queue settings",
            },
        ),
        migrations.CreateModel(
            name="Token",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("token_number", models.CharField(max_length=20, unique=True)),
                ("customer_name", models.CharField(max_length=150)),
                ("phone_number", models.CharField(max_length=20)),
                ("party_size", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "type",
                    models.CharField(
                        choices=[("walkin", "Walk-in"), ("reservation", "Reservation")],
                        default="walkin",
                        max_length=15,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("waiting", "Waiting"),
                            ("seated", "Seated"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="waiting",
                        max_length=15,
                    ),
                ),
                ("reservation_time", models.DateTimeField(blank=True, null=True)),
                ("arrival_time", models.DateTimeField(default=django.utils.timezone.now)),
                ("seated_time", models.DateTimeField(blank=True, null=True)),
                ("estimated_wait_time", models.PositiveIntegerField(default=0)),
                ("queue_position", models.PositiveIntegerField(db_index=True, default=0)),
                ("share_consent", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "assigned_table",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_tokens",
                        to="tables.table",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["status", "queue_position"], name="token_status_position_idx"),
                    models.Index(fields=["status", "type"], name="token_status_type_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OverrideLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("manual_assign", "Manual assign"),
                            ("manual_reorder", "Manual reorder"),
                            ("cancel_token", "Cancel token"),
                            ("complete_token", "Complete token"),
                            ("auto_timeout", "Auto timeout"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("performed_by", models.CharField(max_length=150)),
                ("reason", models.CharField(max_length=255)),
                ("metadata", models.JSONField(blank=True, null=True)),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "table",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="override_logs",
                        to="tables.table",
                    ),
                ),
                (
                    "token",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="override_logs",
                        to="tokens.token",
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["action", "-timestamp"], name="overridelog_action_time_idx"),
                ],
            },
        ),
    ]
