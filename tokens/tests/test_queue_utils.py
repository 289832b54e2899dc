from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from reports.models import Analytics
from tables.models import Table
from tokens.exceptions import (
    InvalidTokenData,
    InvalidTokenState,
    QueueError,
    TableNotFound,
    TableUnavailable,
    TokenNotFound,
)
from tokens.models import OverrideLog, QueueSettings, Token
from tokens.queue_utils import (
    assign_table_to_token,
    auto_assign_tables,
    calculate_estimated_wait_time,
    cancel_token,
    check_reservation_timeouts,
    complete_token,
    create_token,
    find_best_table_match,
    generate_token_number,
    recalculate_queue_positions,
    reorder_token,
)


def make_token(name="Guest", party_size=2, **kwargs):
    return create_token(
        customer_name=name,
        phone_number="9876543210",
        party_size=party_size,
        **kwargs
    )


class TokenNumberingTest(TestCase):

    def test_first_token_number(self):
        self.assertEqual(generate_token_number(), "T001")

    def test_numbers_increase(self):
        numbers = [make_token(f"Guest {i}").token_number for i in range(3)]
        self.assertEqual(numbers, ["T001", "T002", "T003"])

    def test_numbers_not_reused_after_completion(self):
        make_token("A")
        second = make_token("B")
        complete_token(second.pk)

        third = make_token("C")

        self.assertEqual(third.token_number, "T003")
        self.assertEqual(Token.objects.filter(token_number="T002").count(), 1)


class CreateTokenTest(TestCase):

    def test_new_token_is_waiting_at_back_of_queue(self):
        make_token("A")
        token = make_token("B", party_size=4)

        self.assertEqual(token.status, "waiting")
        self.assertEqual(token.queue_position, 2)
        self.assertEqual(token.estimated_wait_time, 90)
        self.assertIsNone(token.assigned_table)

    def test_reservation_requires_time(self):
        with self.assertRaises(InvalidTokenData):
            make_token(token_type="reservation")

    def test_walkin_rejects_reservation_time(self):
        with self.assertRaises(InvalidTokenData):
            make_token(reservation_time=timezone.now())

    def test_missing_fields_rejected(self):
        with self.assertRaises(InvalidTokenData):
            create_token(customer_name="", phone_number="1", party_size=2)

    def test_party_size_below_one_rejected(self):
        with self.assertRaises(InvalidTokenData):
            make_token(party_size=-1)

    def test_issuing_updates_hourly_analytics(self):
        make_token("A", share_consent=True)
        make_token("B")

        row = Analytics.objects.get()
        self.assertEqual(row.token_count, 2)
        self.assertEqual(row.share_consent_count, 1)


class QueuePositionTest(TestCase):

    def test_wait_formula(self):
        self.assertEqual(calculate_estimated_wait_time(3), 135)

        queue_settings = QueueSettings.load()
        queue_settings.avg_seat_time_minutes = 10
        queue_settings.save()

        self.assertEqual(calculate_estimated_wait_time(3), 30)

    def test_recalculate_closes_gaps(self):
        tokens = [make_token(f"Guest {i}") for i in range(4)]
        Token.objects.filter(pk=tokens[1].pk).update(status="cancelled")
        Token.objects.filter(pk=tokens[3].pk).update(queue_position=9)

        recalculate_queue_positions()

        waiting = list(
            Token.objects.filter(status="waiting").order_by("queue_position")
        )
        self.assertEqual([t.pk for t in waiting], [tokens[0].pk, tokens[2].pk, tokens[3].pk])
        self.assertEqual([t.queue_position for t in waiting], [1, 2, 3])
        self.assertEqual([t.estimated_wait_time for t in waiting], [45, 90, 135])

    def test_cancel_renumbers_queue(self):
        first, second, third = (make_token(name) for name in "ABC")

        cancel_token(second.pk, performed_by="host")

        third.refresh_from_db()
        self.assertEqual(third.queue_position, 2)
        self.assertEqual(third.estimated_wait_time, 90)

        log = OverrideLog.objects.get(action="cancel_token")
        self.assertEqual(log.performed_by, "host")
        self.assertEqual(log.token_id, second.pk)

    def test_reorder_moves_token_and_shifts_others(self):
        first, second, third = (make_token(name) for name in "ABC")

        moved = reorder_token(third.pk, 1, performed_by="manager", reason="VIP")

        self.assertEqual(moved.queue_position, 1)
        order = list(
            Token.objects.filter(status="waiting")
            .order_by("queue_position")
            .values_list("token_number", flat=True)
        )
        self.assertEqual(order, ["T003", "T001", "T002"])

        log = OverrideLog.objects.get(action="manual_reorder")
        self.assertEqual(log.metadata, {"from": 3, "to": 1})
        self.assertEqual(log.reason, "VIP")

    def test_reorder_seated_token_rejected(self):
        Table.objects.create(table_number=1, capacity=2)
        token = make_token()
        auto_assign_tables()

        with self.assertRaises(InvalidTokenState):
            reorder_token(token.pk, 1, performed_by="manager")


class TableMatchTest(TestCase):

    def test_exact_match_preferred(self):
        Table.objects.create(table_number=1, capacity=6)
        four = Table.objects.create(table_number=2, capacity=4)

        match = find_best_table_match(4)

        self.assertEqual(match.type, "exact")
        self.assertEqual(match.tables, [four])

    def test_two_and_four_top(self):
        Table.objects.create(table_number=1, capacity=2)
        four = Table.objects.create(table_number=2, capacity=4)

        exact = find_best_table_match(4)
        single = find_best_table_match(3)

        self.assertEqual((exact.type, exact.tables), ("exact", [four]))
        self.assertEqual((single.type, single.tables), ("single", [four]))

    def test_smallest_single_table(self):
        Table.objects.create(table_number=1, capacity=8)
        four = Table.objects.create(table_number=2, capacity=4)
        Table.objects.create(table_number=3, capacity=2)

        match = find_best_table_match(3)

        self.assertEqual(match.type, "single")
        self.assertEqual(match.tables, [four])

    def test_joined_pair(self):
        first = Table.objects.create(table_number=1, capacity=2)
        second = Table.objects.create(table_number=2, capacity=2)

        match = find_best_table_match(4)

        self.assertEqual(match.type, "joined")
        self.assertEqual(match.tables, [first, second])

    def test_non_joinable_tables_not_joined(self):
        Table.objects.create(table_number=1, capacity=2, is_joinable=False)
        Table.objects.create(table_number=2, capacity=2)

        self.assertIsNone(find_best_table_match(4))

    def test_never_joins_three_tables(self):
        for number in (1, 2, 3):
            Table.objects.create(table_number=number, capacity=2)

        self.assertIsNone(find_best_table_match(6))

    def test_shared_requires_consent(self):
        table = Table.objects.create(table_number=1, capacity=6)
        seated = make_token("Seated", party_size=2)
        assign_table_to_token(seated.pk, [table.pk], "shared")

        self.assertIsNone(find_best_table_match(3))

        match = find_best_table_match(3, share_consent=True)
        self.assertEqual(match.type, "shared")
        self.assertEqual(match.tables, [table])

    def test_shared_table_without_room(self):
        table = Table.objects.create(table_number=1, capacity=4)
        seated = make_token("Seated", party_size=3)
        assign_table_to_token(seated.pk, [table.pk], "shared")

        self.assertIsNone(find_best_table_match(2, share_consent=True))

    def test_occupied_tables_ignored(self):
        table = Table.objects.create(table_number=1, capacity=4)
        token = make_token(party_size=4)
        assign_table_to_token(token.pk, [table.pk], "exact")

        self.assertIsNone(find_best_table_match(2))


class AssignTableTest(TestCase):

    def setUp(self):
        self.table = Table.objects.create(table_number=1, capacity=4)
        self.token = make_token(party_size=4)

    def test_assign_seats_token_and_holds_table(self):
        token = assign_table_to_token(self.token.pk, [self.table.pk], "exact", performed_by="host")

        self.table.refresh_from_db()
        self.assertEqual(token.status, "seated")
        self.assertIsNotNone(token.seated_time)
        self.assertEqual(token.assigned_table, self.table)
        self.assertEqual(self.table.status, "occupied")
        self.assertEqual(self.table.current_token_id, token.pk)

        log = OverrideLog.objects.get(action="manual_assign")
        self.assertEqual(log.metadata["assignment_type"], "exact")
        self.assertEqual(log.table_id, self.table.pk)

    def test_automatic_assign_is_not_logged(self):
        assign_table_to_token(self.token.pk, [self.table.pk], "exact")
        self.assertFalse(OverrideLog.objects.exists())

    def test_shared_assignment_marks_table_shared(self):
        assign_table_to_token(self.token.pk, [self.table.pk], "shared")
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, "shared")

    def test_completed_token_rejected(self):
        complete_token(self.token.pk)

        with self.assertRaises(InvalidTokenState):
            assign_table_to_token(self.token.pk, [self.table.pk], "exact")

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, "free")
        self.assertIsNone(self.table.current_token_id)

    def test_cancelled_token_rejected(self):
        cancel_token(self.token.pk, performed_by="host")

        with self.assertRaises(InvalidTokenState):
            assign_table_to_token(self.token.pk, [self.table.pk], "exact")

    def test_unknown_table_rejected(self):
        other = Table.objects.create(table_number=2, capacity=2)
        other_id = other.pk
        other.delete()

        with self.assertRaises(TableNotFound):
            assign_table_to_token(self.token.pk, [self.table.pk, other_id], "joined")

        self.token.refresh_from_db()
        self.assertEqual(self.token.status, "waiting")

    def test_unknown_token_rejected(self):
        with self.assertRaises(TokenNotFound):
            assign_table_to_token("00000000-0000-0000-0000-000000000000", [self.table.pk], "exact")

    def test_table_held_by_another_token_refused(self):
        assign_table_to_token(self.token.pk, [self.table.pk], "exact")
        other = make_token("Other", party_size=2)

        with self.assertRaises(TableUnavailable):
            assign_table_to_token(other.pk, [self.table.pk], "single", performed_by="host")

        self.table.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.table.current_token_id, self.token.pk)
        self.assertEqual(other.status, "waiting")
        self.assertIsNone(other.assigned_table_id)

    def test_shared_assignment_joins_shared_table(self):
        big = Table.objects.create(table_number=2, capacity=8)
        assign_table_to_token(self.token.pk, [big.pk], "shared")
        other = make_token("Other", party_size=2, share_consent=True)

        token = assign_table_to_token(other.pk, [big.pk], "shared")

        self.assertEqual(token.status, "seated")
        self.assertEqual(token.assigned_table_id, big.pk)

    def test_shared_assignment_cannot_take_occupied_table(self):
        assign_table_to_token(self.token.pk, [self.table.pk], "exact")
        other = make_token("Other", party_size=1, share_consent=True)

        with self.assertRaises(TableUnavailable):
            assign_table_to_token(other.pk, [self.table.pk], "shared")

    def test_invalid_assignment_type(self):
        with self.assertRaises(QueueError):
            assign_table_to_token(self.token.pk, [self.table.pk], "banquet")

    def test_assignment_leaves_queue_contiguous(self):
        later = make_token("Later")

        assign_table_to_token(self.token.pk, [self.table.pk], "exact")

        later.refresh_from_db()
        self.assertEqual(later.queue_position, 1)
        self.assertEqual(later.estimated_wait_time, 45)


class CompleteTokenTest(TestCase):

    def test_complete_frees_primary_table_only(self):
        first = Table.objects.create(table_number=1, capacity=2)
        second = Table.objects.create(table_number=2, capacity=2)
        token = make_token(party_size=4)
        assign_table_to_token(token.pk, [first.pk, second.pk], "joined")

        complete_token(token.pk, performed_by="host")

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.status, "free")
        self.assertIsNone(first.current_token_id)
        self.assertEqual(second.status, "occupied")
        self.assertEqual(Table.objects.filter(status="free").count(), 1)

        self.assertTrue(OverrideLog.objects.filter(action="complete_token").exists())

    def test_complete_twice_rejected(self):
        token = make_token()
        complete_token(token.pk)

        with self.assertRaises(InvalidTokenState):
            complete_token(token.pk)

    def test_cancel_seated_token_releases_table(self):
        table = Table.objects.create(table_number=1, capacity=2)
        token = make_token()
        assign_table_to_token(token.pk, [table.pk], "exact")

        cancel_token(token.pk, performed_by="host", reason="Left early")

        table.refresh_from_db()
        self.assertEqual(table.status, "free")
        self.assertIsNone(table.current_token_id)


class SweepTest(TestCase):

    def test_auto_assign_seats_front_of_queue(self):
        Table.objects.create(table_number=1, capacity=2)
        Table.objects.create(table_number=2, capacity=2)
        tokens = [make_token(f"Guest {i}") for i in range(3)]

        assigned = auto_assign_tables()

        self.assertEqual(assigned, 2)
        for token in tokens[:2]:
            token.refresh_from_db()
            self.assertEqual(token.status, "seated")

        last = Token.objects.get(pk=tokens[2].pk)
        self.assertEqual(last.status, "waiting")
        self.assertEqual(last.queue_position, 1)
        self.assertEqual(last.estimated_wait_time, 45)
        self.assertFalse(Table.objects.filter(status="free").exists())

    def test_auto_assign_with_no_tables(self):
        make_token()
        self.assertEqual(auto_assign_tables(), 0)

    def test_reservation_timeouts_respect_grace_period(self):
        now = timezone.now()
        late = make_token("Late", token_type="reservation", reservation_time=now - timedelta(minutes=20))
        recent = make_token("Recent", token_type="reservation", reservation_time=now - timedelta(minutes=5))
        walkin = make_token("Walk-in")

        self.assertEqual(check_reservation_timeouts(), 1)

        late.refresh_from_db()
        recent.refresh_from_db()
        walkin.refresh_from_db()
        self.assertEqual(late.status, "cancelled")
        self.assertEqual(recent.status, "waiting")
        self.assertEqual(recent.queue_position, 1)
        self.assertEqual(walkin.queue_position, 2)

        log = OverrideLog.objects.get(action="auto_timeout")
        self.assertEqual(log.performed_by, "system")
        self.assertEqual(log.reason, "Reservation timeout after 15 minutes grace period")

    def test_zero_grace_period(self):
        queue_settings = QueueSettings.load()
        queue_settings.grace_period_minutes = 0
        queue_settings.save()

        make_token("Late", token_type="reservation", reservation_time=timezone.now() - timedelta(minutes=1))

        self.assertEqual(check_reservation_timeouts(), 1)
