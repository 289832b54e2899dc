import logging
from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from tokens.models import Token

from .models import Analytics

logger = logging.getLogger(__name__)


def update_analytics(now=None):
    """
    Refresh the analytics row for the current hour, then re-flag every hour
    of today: an hour is peak when its token count is above today's
    average.
    """
    now = timezone.localtime(now or timezone.now())
    today = now.date()
    hour_start = now.replace(minute=0, second=0, microsecond=0)
    hour_end = hour_start + timedelta(hours=1)

    hour_tokens = Token.objects.filter(created_at__gte=hour_start, created_at__lt=hour_end)

    counts = hour_tokens.aggregate(
        token_count=Count("id"),
        share_consent_count=Count("id", filter=Q(share_consent=True)),
    )

    waits = [
        (token.seated_time - token.arrival_time).total_seconds() / 60
        for token in hour_tokens.filter(status="completed", seated_time__isnull=False)
        .only("arrival_time", "seated_time")
    ]
    avg_wait_time = sum(waits) / len(waits) if waits else 0

    Analytics.objects.update_or_create(
        date=today,
        hour=now.hour,
        defaults={
            "token_count": counts["token_count"],
            "share_consent_count": counts["share_consent_count"],
            "avg_wait_time": avg_wait_time,
        },
    )

    today_rows = list(Analytics.objects.filter(date=today))
    avg_tokens = sum(row.token_count for row in today_rows) / len(today_rows)

    for row in today_rows:
        peak_hour = row.token_count > avg_tokens
        if row.peak_hour != peak_hour:
            row.peak_hour = peak_hour
            row.save(update_fields=["peak_hour", "updated_at"])

    logger.debug(
        "Analytics for %s %02d:00 -> %s token(s)",
        today,
        now.hour,
        counts["token_count"],
    )
