from rest_framework import serializers

from .models import OverrideLog, QueueSettings, Token
from .queue_utils import ASSIGNMENT_TYPES


class TokenSerializer(serializers.ModelSerializer):
    assigned_table_number = serializers.IntegerField(
        source="assigned_table.table_number",
        read_only=True
    )

    class Meta:
        model = Token
        fields = [
            "id",
            "token_number",
            "customer_name",
            "phone_number",
            "party_size",
            "type",
            "status",
            "reservation_time",
            "arrival_time",
            "seated_time",
            "estimated_wait_time",
            "queue_position",
            "assigned_table",
            "assigned_table_number",
            "share_consent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TokenCreateSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=150)
    phone_number = serializers.CharField(max_length=20)
    party_size = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(choices=Token.TYPE_CHOICES, default="walkin")
    reservation_time = serializers.DateTimeField(required=False, allow_null=True)
    share_consent = serializers.BooleanField(default=False)

    def validate(self, attrs):
        if attrs["type"] == "reservation" and not attrs.get("reservation_time"):
            raise serializers.ValidationError(
                {"reservation_time": "Reservation time is required for reservations"}
            )

        if attrs["type"] != "reservation" and attrs.get("reservation_time"):
            raise serializers.ValidationError(
                {"reservation_time": "Only reservations carry a reservation time"}
            )
        return attrs


class TokenUpdateSerializer(serializers.Serializer):
    """Editable customer fields plus an optional queue move."""
    customer_name = serializers.CharField(max_length=150, required=False)
    phone_number = serializers.CharField(max_length=20, required=False)
    party_size = serializers.IntegerField(min_value=1, required=False)
    share_consent = serializers.BooleanField(required=False)
    queue_position = serializers.IntegerField(min_value=1, required=False)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)

    CUSTOMER_FIELDS = ("customer_name", "phone_number", "party_size", "share_consent")
    SEATING_FIELDS = ("party_size", "share_consent")


class AssignTableSerializer(serializers.Serializer):
    table_ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False
    )
    assignment_type = serializers.ChoiceField(choices=ASSIGNMENT_TYPES, default="single")


class QueueSettingsSerializer(serializers.ModelSerializer):
    avg_seat_time_minutes = serializers.IntegerField(min_value=1, required=False)
    grace_period_minutes = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = QueueSettings
        fields = [
            "grace_period_minutes",
            "avg_seat_time_minutes",
            "opening_time",
            "closing_time",
            "auto_refresh",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]


class OverrideLogSerializer(serializers.ModelSerializer):
    token_number = serializers.CharField(source="token.token_number", read_only=True)
    table_number = serializers.IntegerField(source="table.table_number", read_only=True)

    class Meta:
        model = OverrideLog
        fields = [
            "id",
            "action",
            "performed_by",
            "token",
            "token_number",
            "table",
            "table_number",
            "reason",
            "metadata",
            "timestamp",
        ]
        read_only_fields = fields


class PublicTokenSerializer(serializers.ModelSerializer):

    class Meta:
        model = Token
        fields = [
            "token_number",
            "party_size",
            "type",
            "queue_position",
            "estimated_wait_time",
        ]
        read_only_fields = fields
