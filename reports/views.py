from django.db.models import Count, Q
from django.utils.dateparse import parse_date
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrStaff, IsAdminRole
from tables.models import Table
from tokens.models import Token

from .models import Analytics


def _as_date(value):
    if not value:
        return None
    return parse_date(value)


class AnalyticsReportView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        start = _as_date(request.GET.get("start_date"))
        end = _as_date(request.GET.get("end_date"))

        qs = Analytics.objects.all()
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)

        rows = list(qs.order_by("-date", "-hour"))

        total_tokens = sum(row.token_count for row in rows)
        avg_wait_time = sum(row.avg_wait_time for row in rows) / len(rows) if rows else 0
        share_consent_total = sum(row.share_consent_count for row in rows)
        share_consent_rate = (
            round(share_consent_total / total_tokens * 100, 1) if total_tokens else 0
        )

        return Response(
            {
                "analytics": [
                    {
                        "date": str(row.date),
                        "hour": row.hour,
                        "token_count": row.token_count,
                        "share_consent_count": row.share_consent_count,
                        "avg_wait_time": row.avg_wait_time,
                        "peak_hour": row.peak_hour,
                    }
                    for row in rows
                ],
                "summary": {
                    "total_tokens": total_tokens,
                    "avg_wait_time": round(avg_wait_time),
                    "peak_hours_count": sum(1 for row in rows if row.peak_hour),
                    "share_consent_total": share_consent_total,
                    "share_consent_rate": share_consent_rate,
                },
            }
        )


class DashboardSummaryView(APIView):
    permission_classes = [IsAdminOrStaff]

    def get(self, request):
        token_counts = Token.objects.aggregate(
            waiting=Count("id", filter=Q(status="waiting")),
            seated=Count("id", filter=Q(status="seated")),
            completed=Count("id", filter=Q(status="completed")),
        )
        table_counts = Table.objects.aggregate(
            free=Count("id", filter=Q(status="free")),
            occupied=Count("id", filter=Q(status__in=Table.HELD_STATUSES)),
            total=Count("id"),
        )

        occupancy_rate = (
            round(table_counts["occupied"] / table_counts["total"] * 100, 1)
            if table_counts["total"] else 0
        )

        metrics = [
            {"metric": "Waiting Tokens", "value": token_counts["waiting"]},
            {"metric": "Seated Tokens", "value": token_counts["seated"]},
            {"metric": "Completed Tokens", "value": token_counts["completed"]},
            {"metric": "Free Tables", "value": table_counts["free"]},
            {"metric": "Occupied Tables", "value": table_counts["occupied"]},
            {"metric": "Occupancy Rate", "value": occupancy_rate},
        ]

        return Response(metrics)
