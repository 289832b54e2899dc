import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Analytics",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(db_index=True)),
                ("hour", models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(23)])),
                ("token_count", models.PositiveIntegerField(default=0)),
                ("share_consent_count", models.PositiveIntegerField(default=0)),
                ("avg_wait_time", models.FloatField(default=0)),
                ("peak_hour", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-date", "-hour"],
                "constraints": [
                    models.UniqueConstraint(fields=("date", "hour"), name="analytics_unique_date_hour"),
                ],
            },
        ),
    ]
