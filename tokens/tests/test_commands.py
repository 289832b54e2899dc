from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from tables.models import Table
from tokens.models import OverrideLog, Token
from tokens.queue_utils import create_token


class SweepCommandTest(TestCase):

    def issue(self, name, **kwargs):
        return create_token(customer_name=name, phone_number="9876543210", party_size=2, **kwargs)

    def test_auto_assign_tables(self):
        Table.objects.create(table_number=1, capacity=2)
        self.issue("A")
        self.issue("B")
        out = StringIO()

        call_command("auto_assign_tables", stdout=out)

        self.assertIn("Auto-assigned 1 token(s)", out.getvalue())
        self.assertEqual(Token.objects.filter(status="seated").count(), 1)

    def test_auto_assign_tables_nothing_to_do(self):
        out = StringIO()
        call_command("auto_assign_tables", stdout=out)
        self.assertIn("Auto-assigned 0 token(s)", out.getvalue())

    def test_check_reservation_timeouts(self):
        now = timezone.now()
        self.issue("Late", token_type="reservation", reservation_time=now - timedelta(minutes=30))
        self.issue("Early", token_type="reservation", reservation_time=now + timedelta(minutes=30))
        out = StringIO()

        call_command("check_reservation_timeouts", stdout=out)

        self.assertIn("Processed 1 timeout(s)", out.getvalue())
        self.assertEqual(OverrideLog.objects.filter(action="auto_timeout").count(), 1)
