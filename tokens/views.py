import logging

from django.db import transaction
from django.utils.dateparse import parse_datetime, parse_date
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrStaff, IsAdminRole
from tables.models import Table
from tables.serializers import TableSerializer

from .exceptions import InvalidTokenState, QueueError
from .models import OverrideLog, QueueSettings, Token
from .notifications import send_table_ready_whatsapp
from .queue_utils import (
    assign_table_to_token,
    auto_assign_tables,
    cancel_token,
    check_reservation_timeouts,
    complete_token,
    create_token,
    find_best_table_match,
    lock_queue,
    recalculate_queue_positions,
    reorder_token,
)
from .serializers import (
    AssignTableSerializer,
    OverrideLogSerializer,
    PublicTokenSerializer,
    QueueSettingsSerializer,
    TokenCreateSerializer,
    TokenSerializer,
    TokenUpdateSerializer,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


def error_response(message, status_code, extra=None):
    payload = {"error": message, "detail": message}
    if extra:
        payload.update(extra)
    return Response(payload, status=status_code)


def queue_error_response(exc):
    return error_response(str(exc.detail), exc.status_code)


def paginate(request, queryset):
    """
    Supported query params:
    - page (1-based, default 1)
    - limit (default 50, max 200)
    """
    try:
        page = max(1, int(request.GET.get("page", 1)))
        limit = max(1, min(int(request.GET.get("limit", 50)), MAX_PAGE_SIZE))
    except (TypeError, ValueError):
        page, limit = 1, 50

    total = queryset.count()
    offset = (page - 1) * limit
    items = queryset[offset:offset + limit]

    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit,
    }


def _get_token(pk):
    try:
        return Token.objects.select_related("assigned_table").get(pk=pk)
    except Token.DoesNotExist:
        return None


# =====================================
# TOKENS
# =====================================

class TokenListCreateView(APIView):
    permission_classes = [IsAdminOrStaff]

    def get(self, request):
        qs = Token.objects.select_related("assigned_table").order_by("queue_position", "-created_at")

        status_param = (request.GET.get("status") or "").strip()
        type_param = (request.GET.get("type") or "").strip()
        if status_param:
            qs = qs.filter(status__in=[s.strip() for s in status_param.split(",") if s.strip()])
        if type_param:
            qs = qs.filter(type=type_param)

        tokens, pagination = paginate(request, qs)

        return Response({
            "tokens": TokenSerializer(tokens, many=True).data,
            "pagination": pagination,
        })

    def post(self, request):
        serializer = TokenCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            token = create_token(
                customer_name=data["customer_name"],
                phone_number=data["phone_number"],
                party_size=data["party_size"],
                token_type=data["type"],
                reservation_time=data.get("reservation_time"),
                share_consent=data["share_consent"],
            )
        except QueueError as exc:
            return queue_error_response(exc)

        return Response(
            {"success": True, "token": TokenSerializer(token).data},
            status=status.HTTP_201_CREATED
        )


class TokenDetailView(APIView):
    permission_classes = [IsAdminOrStaff]

    def get(self, request, pk):
        token = _get_token(pk)
        if not token:
            return error_response("Token not found", 404)

        return Response({"token": TokenSerializer(token).data})

    def patch(self, request, pk):
        token = _get_token(pk)
        if not token:
            return error_response("Token not found", 404)

        serializer = TokenUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        changed = [field for field in TokenUpdateSerializer.CUSTOMER_FIELDS if field in data]
        new_position = data.get("queue_position")

        try:
            with transaction.atomic():
                lock_queue()
                token = Token.objects.select_for_update().get(pk=token.pk)

                if changed and token.is_terminal:
                    raise InvalidTokenState(f"Token is already {token.status}")

                # seated parties keep the size and sharing they were matched with
                if token.status != "waiting" and any(
                    field in data for field in TokenUpdateSerializer.SEATING_FIELDS
                ):
                    raise InvalidTokenState("Party size and sharing can only change while waiting")

                moving = new_position is not None and new_position != token.queue_position
                if moving and token.status != "waiting":
                    raise InvalidTokenState("Only waiting tokens can be reordered")

                if changed:
                    for field in changed:
                        setattr(token, field, data[field])
                    token.save(update_fields=changed + ["updated_at"])

                if moving:
                    token = reorder_token(
                        token.pk,
                        new_position,
                        performed_by=request.user.username,
                        reason=data.get("reason") or None,
                    )
        except QueueError as exc:
            return queue_error_response(exc)

        token = _get_token(token.pk)
        return Response({"success": True, "token": TokenSerializer(token).data})

    def delete(self, request, pk):
        try:
            cancel_token(pk, performed_by=request.user.username, reason=request.data.get("reason"))
        except QueueError as exc:
            return queue_error_response(exc)

        return Response({"success": True})


class TokenAssignView(APIView):
    permission_classes = [IsAdminOrStaff]

    def post(self, request, pk):
        serializer = AssignTableSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Table IDs are required", 400, {"errors": serializer.errors})

        try:
            token = assign_table_to_token(
                pk,
                serializer.validated_data["table_ids"],
                serializer.validated_data["assignment_type"],
                performed_by=request.user.username,
            )
        except QueueError as exc:
            return queue_error_response(exc)

        return Response({"success": True, "token": TokenSerializer(token).data})


class TokenCompleteView(APIView):
    permission_classes = [IsAdminOrStaff]

    def post(self, request, pk):
        try:
            token = complete_token(pk, performed_by=request.user.username)
        except QueueError as exc:
            return queue_error_response(exc)

        return Response({"success": True, "token": TokenSerializer(token).data})


class TokenNotifyView(APIView):
    permission_classes = [IsAdminOrStaff]

    def post(self, request, pk):
        token = _get_token(pk)
        if not token:
            return error_response("Token not found", 404)

        if token.status != "seated":
            return error_response("Only seated tokens can be notified", 400)

        if not send_table_ready_whatsapp(token):
            return error_response("Failed to send WhatsApp message", 502)

        return Response({"success": True, "message": "WhatsApp sent"})


class TableMatchView(APIView):
    permission_classes = [IsAdminOrStaff]

    def get(self, request):
        try:
            party_size = int(request.GET.get("party_size", ""))
        except ValueError:
            return error_response("party_size is required", 400)

        if party_size < 1:
            return error_response("Party size must be at least 1", 400)

        share_consent = (request.GET.get("share_consent") or "").lower() in ("1", "true", "yes")

        match = find_best_table_match(party_size, share_consent)
        if match is None:
            return Response({"match": None})

        return Response({
            "match": {
                "type": match.type,
                "tables": TableSerializer(match.tables, many=True).data,
            }
        })


# =====================================
# QUEUE SWEEPS
# =====================================

class AutoAssignView(APIView):
    permission_classes = [IsAdminOrStaff]

    def post(self, request):
        assigned_count = auto_assign_tables()
        return Response({
            "success": True,
            "assigned_count": assigned_count,
            "message": f"Auto-assigned {assigned_count} token(s)",
        })


class CheckTimeoutsView(APIView):
    permission_classes = [IsAdminOrStaff]

    def post(self, request):
        timeout_count = check_reservation_timeouts()
        return Response({
            "success": True,
            "timeout_count": timeout_count,
            "message": f"Processed {timeout_count} timeout(s)",
        })


class PublicQueueView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        waiting = Token.objects.filter(status="waiting").order_by("queue_position", "created_at")

        return Response({
            "tokens": PublicTokenSerializer(waiting, many=True).data,
            "free_tables": Table.objects.filter(status="free").count(),
            "auto_refresh": QueueSettings.load().auto_refresh,
        })


# =====================================
# SETTINGS
# =====================================

class QueueSettingsView(APIView):

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAdminRole()]

    def get(self, request):
        return Response({"settings": QueueSettingsSerializer(QueueSettings.load()).data})

    def patch(self, request):
        queue_settings = QueueSettings.load()
        old_seat_time = queue_settings.avg_seat_time_minutes

        serializer = QueueSettingsSerializer(queue_settings, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        if queue_settings.avg_seat_time_minutes != old_seat_time:
            recalculate_queue_positions()

        logger.info("Queue settings updated by %s: %s", request.user.username, serializer.validated_data)

        return Response({"success": True, "settings": serializer.data})


# =====================================
# OVERRIDE LOG
# =====================================

class OverrideLogListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        qs = OverrideLog.objects.select_related("token", "table").order_by("-timestamp")

        action = (request.GET.get("action") or "").strip()
        if action:
            qs = qs.filter(action=action)

        start = _as_datetime_or_date(request.GET.get("start_date"))
        end = _as_datetime_or_date(request.GET.get("end_date"))
        if start:
            qs = qs.filter(**{"timestamp__date__gte" if _is_date(start) else "timestamp__gte": start})
        if end:
            qs = qs.filter(**{"timestamp__date__lte" if _is_date(end) else "timestamp__lte": end})

        logs, pagination = paginate(request, qs)

        return Response({
            "logs": OverrideLogSerializer(logs, many=True).data,
            "pagination": pagination,
        })


def _as_datetime_or_date(value):
    if not value:
        return None
    return parse_datetime(value) or parse_date(value)


def _is_date(value):
    return not hasattr(value, "hour")
