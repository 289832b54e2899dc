from datetime import timedelta

from django.urls import reverse
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from accounts.models import User
from reports.analytics import update_analytics
from reports.models import Analytics
from tables.models import Table
from tokens.queue_utils import assign_table_to_token, create_token


class UpdateAnalyticsTest(TestCase):

    def test_peak_hours_above_daily_average(self):
        now = timezone.localtime().replace(hour=11, minute=30)
        today = now.date()
        Analytics.objects.create(date=today, hour=9, token_count=1)
        Analytics.objects.create(date=today, hour=10, token_count=5)

        update_analytics(now=now)

        rows = {row.hour: row for row in Analytics.objects.filter(date=today)}
        self.assertEqual(rows[11].token_count, 0)
        self.assertTrue(rows[10].peak_hour)
        self.assertFalse(rows[9].peak_hour)
        self.assertFalse(rows[11].peak_hour)

    def test_other_days_untouched(self):
        now = timezone.localtime().replace(hour=11)
        yesterday = now.date() - timedelta(days=1)
        Analytics.objects.create(date=yesterday, hour=9, token_count=50, peak_hour=True)

        update_analytics(now=now)

        self.assertTrue(Analytics.objects.get(date=yesterday).peak_hour)


class ReportViewTest(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(username="host", password="secret123", role="STAFF")
        self.admin = User.objects.create_user(username="manager", password="secret123", role="ADMIN")

    def test_analytics_report_summary(self):
        today = timezone.localdate()
        Analytics.objects.create(date=today, hour=12, token_count=4, share_consent_count=1, avg_wait_time=10, peak_hour=True)
        Analytics.objects.create(date=today, hour=13, token_count=6, share_consent_count=4, avg_wait_time=20)
        Analytics.objects.create(date=today - timedelta(days=10), hour=12, token_count=99)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(
            reverse("analytics-report"),
            {"start_date": str(today - timedelta(days=1)), "end_date": str(today)},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["analytics"]), 2)
        summary = response.data["summary"]
        self.assertEqual(summary["total_tokens"], 10)
        self.assertEqual(summary["avg_wait_time"], 15)
        self.assertEqual(summary["peak_hours_count"], 1)
        self.assertEqual(summary["share_consent_total"], 5)
        self.assertEqual(summary["share_consent_rate"], 50.0)

    def test_analytics_report_admin_only(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.get(reverse("analytics-report"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_dashboard(self):
        first = Table.objects.create(table_number=1, capacity=2)
        Table.objects.create(table_number=2, capacity=2)
        seated = create_token(customer_name="A", phone_number="1", party_size=2)
        create_token(customer_name="B", phone_number="2", party_size=2)
        assign_table_to_token(seated.pk, [first.pk], "exact")
        self.client.force_authenticate(user=self.staff)

        response = self.client.get(reverse("dashboard-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        metrics = {row["metric"]: row["value"] for row in response.data}
        self.assertEqual(metrics["Waiting Tokens"], 1)
        self.assertEqual(metrics["Seated Tokens"], 1)
        self.assertEqual(metrics["Free Tables"], 1)
        self.assertEqual(metrics["Occupancy Rate"], 50.0)
