from django.contrib import admin
from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("table_number", "capacity", "status", "is_joinable", "current_token")
    list_filter = ("status", "is_joinable")
