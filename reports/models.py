from django.core.validators import MaxValueValidator
from django.db import models


class Analytics(models.Model):
    """Token counts and waits for one hour of one day."""

    date = models.DateField(db_index=True)
    hour = models.PositiveSmallIntegerField(validators=[MaxValueValidator(23)])

    token_count = models.PositiveIntegerField(default=0)
    share_consent_count = models.PositiveIntegerField(default=0)

    # minutes, over completed tokens
    avg_wait_time = models.FloatField(default=0)

    peak_hour = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-hour"]
        constraints = [
            models.UniqueConstraint(fields=["date", "hour"], name="analytics_unique_date_hour"),
        ]

    def __str__(self):
        return f"{self.date} {self.hour:02d}:00 ({self.token_count})"
