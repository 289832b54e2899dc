"""
Queue allocation engine.

Token numbering, queue positions, wait estimates, table matching,
assignment, the auto-assign and reservation-timeout sweeps, and completion.

Every operation that writes runs inside ``transaction.atomic()`` and takes
the queue lock (``lock_queue``) first, so allocations are serialized per
database and a failure leaves both tokens and tables untouched.
"""

import logging
import uuid
from collections import namedtuple
from datetime import timedelta

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from reports.analytics import update_analytics
from tables.models import Table

from .exceptions import (
    DuplicateTokenNumber,
    InvalidTokenData,
    InvalidTokenState,
    QueueError,
    TableNotFound,
    TableUnavailable,
    TokenNotFound,
)
from .models import OverrideLog, QueueSettings, Token

logger = logging.getLogger(__name__)

ASSIGNMENT_TYPES = ("exact", "single", "joined", "shared")

TableMatch = namedtuple("TableMatch", ["tables", "type"])


# =====================================
# SETTINGS / LOCKING
# =====================================

def get_queue_settings():
    return QueueSettings.load()


def lock_queue():
    """
    Lock the settings row for the rest of the current transaction and
    return it. Must be called inside ``transaction.atomic()``.
    """
    queue_settings = get_queue_settings()
    return QueueSettings.objects.select_for_update().get(pk=queue_settings.pk)


def _get_token_for_update(token_id):
    try:
        return Token.objects.select_for_update().get(pk=token_id)
    except (Token.DoesNotExist, DjangoValidationError, ValueError):
        raise TokenNotFound()


def _normalize_table_ids(table_ids):
    normalized = []
    for table_id in table_ids:
        try:
            value = str(uuid.UUID(str(table_id)))
        except ValueError:
            raise TableNotFound(f"Table not found: {table_id}")
        if value not in normalized:
            normalized.append(value)
    return normalized


# =====================================
# NUMBERING / POSITIONS
# =====================================

def generate_token_number():
    """
    ``T`` + zero-padded counter, one above the most recently created
    token's number. ``T001`` for an empty store. Numbers are never reused.
    """
    with transaction.atomic():
        last_token = (
            Token.objects
            .select_for_update()
            .only("token_number")
            .order_by("-created_at", "-token_number")
            .first()
        )

        if not last_token:
            return "T001"

        try:
            next_number = int(last_token.token_number[1:]) + 1
        except (TypeError, ValueError):
            next_number = Token.objects.count() + 1

    return f"T{next_number:03d}"


def get_next_queue_position():
    with transaction.atomic():
        last_waiting = (
            Token.objects
            .select_for_update()
            .filter(status="waiting")
            .only("queue_position")
            .order_by("-queue_position")
            .first()
        )

    return last_waiting.queue_position + 1 if last_waiting else 1


def calculate_estimated_wait_time(queue_position, queue_settings=None):
    """Minutes: position times the average seat time."""
    queue_settings = queue_settings or get_queue_settings()
    return queue_position * queue_settings.avg_seat_time_minutes


def recalculate_queue_positions():
    """
    Renumber waiting tokens 1..N by (queue_position, created_at) and refresh
    their estimated wait.
    """
    with transaction.atomic():
        queue_settings = lock_queue()

        waiting_tokens = (
            Token.objects
            .select_for_update()
            .filter(status="waiting")
            .order_by("queue_position", "created_at")
        )

        for position, token in enumerate(waiting_tokens, start=1):
            wait = calculate_estimated_wait_time(position, queue_settings)
            if token.queue_position == position and token.estimated_wait_time == wait:
                continue

            token.queue_position = position
            token.estimated_wait_time = wait
            token.save(update_fields=["queue_position", "estimated_wait_time", "updated_at"])


# =====================================
# TOKEN LIFECYCLE
# =====================================

def create_token(
    customer_name,
    phone_number,
    party_size,
    token_type="walkin",
    reservation_time=None,
    share_consent=False,
):
    if not customer_name or not phone_number or not party_size:
        raise InvalidTokenData("Customer name, phone number, and party size are required")

    if party_size < 1:
        raise InvalidTokenData("Party size must be at least 1")

    if token_type not in dict(Token.TYPE_CHOICES):
        raise InvalidTokenData(f"Invalid token type: {token_type}")

    if token_type == "reservation" and not reservation_time:
        raise InvalidTokenData("Reservation time is required for reservations")

    if token_type != "reservation" and reservation_time:
        raise InvalidTokenData("Only reservations carry a reservation time")

    try:
        with transaction.atomic():
            queue_settings = lock_queue()

            token_number = generate_token_number()
            queue_position = get_next_queue_position()

            token = Token.objects.create(
                token_number=token_number,
                customer_name=customer_name,
                phone_number=phone_number,
                party_size=party_size,
                type=token_type,
                reservation_time=reservation_time,
                arrival_time=timezone.now(),
                queue_position=queue_position,
                estimated_wait_time=calculate_estimated_wait_time(queue_position, queue_settings),
                share_consent=share_consent,
                status="waiting",
            )
    except IntegrityError as exc:
        logger.warning("Token number collision while issuing a token: %s", exc)
        raise DuplicateTokenNumber() from exc

    update_analytics()

    logger.info(
        "Issued token %s for party of %s at position %s",
        token.token_number,
        token.party_size,
        token.queue_position,
    )
    return token


def cancel_token(token_id, performed_by, reason=None):
    with transaction.atomic():
        lock_queue()
        token = _get_token_for_update(token_id)

        if token.is_terminal:
            raise InvalidTokenState(f"Token {token.token_number} is already {token.status}")

        was_seated = token.status == "seated"
        token.status = "cancelled"
        token.save(update_fields=["status", "updated_at"])

        table = None
        if was_seated and token.assigned_table_id:
            table = (
                Table.objects
                .select_for_update()
                .filter(pk=token.assigned_table_id, current_token=token)
                .first()
            )
            if table:
                table.release()

        recalculate_queue_positions()

        OverrideLog.objects.create(
            action="cancel_token",
            performed_by=performed_by or "system",
            token=token,
            table=table,
            reason=reason or "Token cancelled",
        )

    logger.info("Token %s cancelled by %s", token.token_number, performed_by or "system")
    return token


def reorder_token(token_id, new_position, performed_by, reason=None):
    """
    Move a waiting token to ``new_position``, shifting the tokens between
    its old and new place by one, then renumber the queue.
    """
    if new_position < 1:
        raise InvalidTokenData("Queue position must be at least 1")

    with transaction.atomic():
        lock_queue()
        token = _get_token_for_update(token_id)

        if token.status != "waiting":
            raise InvalidTokenState("Only waiting tokens can be reordered")

        old_position = token.queue_position
        if new_position == old_position:
            return token

        others = Token.objects.filter(status="waiting").exclude(pk=token.pk)
        if new_position < old_position:
            others.filter(
                queue_position__gte=new_position,
                queue_position__lt=old_position,
            ).update(queue_position=F("queue_position") + 1)
        else:
            others.filter(
                queue_position__gt=old_position,
                queue_position__lte=new_position,
            ).update(queue_position=F("queue_position") - 1)

        token.queue_position = new_position
        token.save(update_fields=["queue_position", "updated_at"])

        recalculate_queue_positions()

        OverrideLog.objects.create(
            action="manual_reorder",
            performed_by=performed_by,
            token=token,
            reason=reason or "Manual queue reorder",
            metadata={"from": old_position, "to": new_position},
        )

    token.refresh_from_db()
    logger.info(
        "Token %s moved from position %s to %s by %s",
        token.token_number,
        old_position,
        token.queue_position,
        performed_by,
    )
    return token


# =====================================
# TABLE MATCHING / ASSIGNMENT
# =====================================

def find_best_table_match(party_size, share_consent=False):
    """
    Pick seating for a party, in priority order:

    1. exact  - first free table with capacity == party_size
    2. single - smallest free table with capacity >= party_size
    3. joined - first pair of free joinable tables whose combined
                capacity fits (pairs only, never three or more tables)
    4. shared - with consent, first shared table whose remaining capacity
                (capacity minus the seated party) fits

    Returns a ``TableMatch`` or ``None``. Reads the current roster on every
    call; results go stale once any table changes.
    """
    free_tables = list(
        Table.objects
        .filter(status="free")
        .order_by("capacity", "table_number")
    )

    for table in free_tables:
        if table.capacity == party_size:
            return TableMatch([table], "exact")

    for table in free_tables:
        if table.capacity >= party_size:
            return TableMatch([table], "single")

    joinable_tables = [table for table in free_tables if table.is_joinable]
    for i, first in enumerate(joinable_tables):
        for second in joinable_tables[i + 1:]:
            if first.capacity + second.capacity >= party_size:
                return TableMatch([first, second], "joined")

    if share_consent:
        shared_tables = (
            Table.objects
            .filter(status="shared", current_token__isnull=False)
            .select_related("current_token")
            .order_by("table_number")
        )
        for table in shared_tables:
            if table.capacity - table.current_token.party_size >= party_size:
                return TableMatch([table], "shared")

    return None


def assign_table_to_token(token_id, table_ids, assignment_type, performed_by=None):
    """
    Seat a token at one or more tables. The first table in ``table_ids`` is
    the one recorded on the token. With ``performed_by`` the assignment is
    logged as a manual override. Tables held by another token are refused
    unless both the table and the assignment are shared.
    """
    if assignment_type not in ASSIGNMENT_TYPES:
        raise QueueError(f"Invalid assignment type: {assignment_type}")

    table_ids = _normalize_table_ids(table_ids)
    if not table_ids:
        raise TableNotFound("Table IDs are required")

    with transaction.atomic():
        lock_queue()
        token = _get_token_for_update(token_id)

        tables_by_id = {
            str(table.pk): table
            for table in Table.objects.select_for_update().filter(pk__in=table_ids)
        }
        missing = [table_id for table_id in table_ids if table_id not in tables_by_id]
        if missing:
            raise TableNotFound(f"Tables not found: {', '.join(missing)}")

        tables = [tables_by_id[table_id] for table_id in table_ids]
        primary_table = tables[0]

        if token.is_terminal:
            logger.warning(
                "Rejected assignment of %s token %s", token.status, token.token_number
            )
            raise InvalidTokenState(f"Token {token.token_number} is already {token.status}")

        if token.status == "seated" and token.assigned_table_id != primary_table.pk:
            raise InvalidTokenState(
                f"Token {token.token_number} is already seated at another table"
            )

        # only a shared assignment may join a table another party holds
        for table in tables:
            if table.current_token_id in (None, token.pk):
                continue
            if assignment_type == "shared" and table.status == "shared":
                continue
            raise TableUnavailable(
                f"Table {table.table_number} is held by token {table.current_token.token_number}"
            )

        if token.status != "seated":
            token.seated_time = timezone.now()
        token.status = "seated"
        token.assigned_table = primary_table
        token.save(update_fields=["status", "seated_time", "assigned_table", "updated_at"])

        table_status = "shared" if assignment_type == "shared" else "occupied"
        for table in tables:
            table.status = table_status
            table.current_token = token
            table.save(update_fields=["status", "current_token", "updated_at"])

        recalculate_queue_positions()

        if performed_by:
            OverrideLog.objects.create(
                action="manual_assign",
                performed_by=performed_by,
                token=token,
                table=primary_table,
                reason=f"Manually assigned {assignment_type} table(s)",
                metadata={"table_ids": table_ids, "assignment_type": assignment_type},
            )

    logger.info(
        "Token %s seated at table(s) %s (%s)",
        token.token_number,
        ", ".join(str(table.table_number) for table in tables),
        assignment_type,
    )
    return token


def complete_token(token_id, performed_by=None):
    """
    Mark a token completed and free its primary table. The table is freed
    even when it is shared with another party.
    """
    with transaction.atomic():
        lock_queue()
        token = _get_token_for_update(token_id)

        if token.is_terminal:
            raise InvalidTokenState(f"Token {token.token_number} is already {token.status}")

        was_waiting = token.status == "waiting"
        token.status = "completed"
        token.save(update_fields=["status", "updated_at"])

        table = None
        if token.assigned_table_id:
            table = Table.objects.select_for_update().filter(pk=token.assigned_table_id).first()
            if table:
                table.release()

        if was_waiting:
            recalculate_queue_positions()

        if performed_by:
            OverrideLog.objects.create(
                action="complete_token",
                performed_by=performed_by,
                token=token,
                table=table,
                reason="Token completed",
            )

    logger.info(
        "Token %s completed%s",
        token.token_number,
        f", table {table.table_number} freed" if table else "",
    )
    return token


# =====================================
# SWEEPS
# =====================================

def auto_assign_tables():
    """
    Walk the waiting queue front to back and seat every token that has a
    match. Returns the number of tokens seated.
    """
    assigned_count = 0

    with transaction.atomic():
        lock_queue()

        waiting_tokens = list(
            Token.objects
            .filter(status="waiting")
            .order_by("queue_position", "created_at")
        )

        for token in waiting_tokens:
            # re-read per token, tables seated earlier in the sweep are no longer free
            match = find_best_table_match(token.party_size, token.share_consent)
            if match is None:
                continue

            assign_table_to_token(
                token.pk,
                [table.pk for table in match.tables],
                match.type,
            )
            assigned_count += 1

    logger.info(
        "Auto-assign sweep seated %s of %s waiting token(s)",
        assigned_count,
        len(waiting_tokens),
    )
    return assigned_count


def check_reservation_timeouts():
    """
    Cancel waiting reservations whose reservation time is older than the
    grace period. Returns the number cancelled.
    """
    with transaction.atomic():
        queue_settings = lock_queue()
        grace_period = queue_settings.grace_period_minutes
        cutoff = timezone.now() - timedelta(minutes=grace_period)

        late_tokens = list(
            Token.objects
            .select_for_update()
            .filter(
                type="reservation",
                status="waiting",
                reservation_time__lt=cutoff,
            )
        )

        for token in late_tokens:
            token.status = "cancelled"
            token.save(update_fields=["status", "updated_at"])

            OverrideLog.objects.create(
                action="auto_timeout",
                performed_by="system",
                token=token,
                reason=f"Reservation timeout after {grace_period} minutes grace period",
            )
            logger.info("Reservation %s timed out", token.token_number)

        if late_tokens:
            recalculate_queue_positions()

    return len(late_tokens)
