import uuid
from django.core.validators import MinValueValidator
from django.db import models


class Table(models.Model):
    STATUS_CHOICES = (
        ("free", "Free"),
        ("occupied", "Occupied"),
        ("reserved", "Reserved"),
        ("shared", "Shared"),
    )

    # statuses that must carry a current token
    HELD_STATUSES = ("occupied", "shared")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table_number = models.PositiveIntegerField(unique=True)
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default="free", db_index=True)

    current_token = models.ForeignKey(
        "tokens.Token",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="current_tables"
    )

    is_joinable = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["table_number"]
        indexes = [
            models.Index(fields=["status", "capacity"], name="table_status_capacity_idx"),
        ]

    def release(self):
        self.status = "free"
        self.current_token = None
        self.save(update_fields=["status", "current_token", "updated_at"])

    def __str__(self):
        return f"Table {self.table_number} ({self.capacity})"
