from django.contrib import admin
from .models import OverrideLog, QueueSettings, Token


@admin.register(Token)
class TokenAdmin(admin.ModelAdmin):
    list_display = (
        "token_number",
        "customer_name",
        "party_size",
        "type",
        "status",
        "queue_position",
        "assigned_table",
        "created_at",
    )
    list_filter = ("status", "type", "share_consent")
    search_fields = ("token_number", "customer_name", "phone_number")
    ordering = ("queue_position", "-created_at")


@admin.register(QueueSettings)
class QueueSettingsAdmin(admin.ModelAdmin):
    list_display = ("grace_period_minutes", "avg_seat_time_minutes", "opening_time", "closing_time")

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(OverrideLog)
class OverrideLogAdmin(admin.ModelAdmin):
    list_display = ("action", "performed_by", "token", "table", "timestamp")
    list_filter = ("action",)
    readonly_fields = ("action", "performed_by", "token", "table", "reason", "metadata", "timestamp")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
