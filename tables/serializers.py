from rest_framework import serializers
from .models import Table


class TableSerializer(serializers.ModelSerializer):
    capacity = serializers.IntegerField(min_value=1)
    token_number = serializers.SerializerMethodField()
    current_party_size = serializers.SerializerMethodField()

    class Meta:
        model = Table
        fields = [
            "id",
            "table_number",
            "capacity",
            "status",
            "is_joinable",
            "current_token",
            "token_number",
            "current_party_size",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "current_token",
            "created_at",
            "updated_at",
        ]

    def get_token_number(self, obj):
        if obj.status not in Table.HELD_STATUSES or not obj.current_token:
            return None
        return obj.current_token.token_number

    def get_current_party_size(self, obj):
        if obj.status not in Table.HELD_STATUSES or not obj.current_token:
            return None
        return obj.current_token.party_size


class TableUpdateSerializer(serializers.ModelSerializer):
    """
    Staff may mark a table free or reserved; capacity and joinability
    are admin-only (checked in the view).
    """
    MANUAL_STATUSES = ("free", "reserved")

    capacity = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=MANUAL_STATUSES, required=False)

    class Meta:
        model = Table
        fields = [
            "capacity",
            "status",
            "is_joinable",
        ]

    def validate_status(self, value):
        if self.instance and self.instance.current_token_id and value != self.instance.status:
            raise serializers.ValidationError(
                "Table is held by a token; complete or cancel the token first."
            )
        return value
