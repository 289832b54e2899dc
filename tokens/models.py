import datetime
import uuid
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Token(models.Model):

    TYPE_CHOICES = (
        ("walkin", "Walk-in"),
        ("reservation", "Reservation"),
    )

    STATUS_CHOICES = (
        ("waiting", "Waiting"),
        ("seated", "Seated"),
        ("cancelled", "Cancelled"),
        ("completed", "Completed"),
    )

    TERMINAL_STATUSES = ("completed", "cancelled")

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # T001, T002 ...
    token_number = models.CharField(max_length=20, unique=True)

    customer_name = models.CharField(max_length=150)
    phone_number = models.CharField(max_length=20)

    party_size = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    type = models.CharField(
        max_length=15,
        choices=TYPE_CHOICES,
        default="walkin"
    )

    status = models.CharField(
        max_length=15,
        choices=STATUS_CHOICES,
        default="waiting",
        db_index=True
    )

    reservation_time = models.DateTimeField(null=True, blank=True)
    arrival_time = models.DateTimeField(default=timezone.now)
    seated_time = models.DateTimeField(null=True, blank=True)

    # minutes
    estimated_wait_time = models.PositiveIntegerField(default=0)
    queue_position = models.PositiveIntegerField(default=0, db_index=True)

    assigned_table = models.ForeignKey(
        "tables.Table",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tokens"
    )

    share_consent = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["status", "queue_position"], name="token_status_position_idx"),
            models.Index(fields=["status", "type"], name="token_status_type_idx"),
        ]

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def clean(self):
        if self.type == "reservation" and not self.reservation_time:
            raise ValidationError("Reservation time is required for reservations")

        if self.type != "reservation" and self.reservation_time:
            raise ValidationError("Only reservations carry a reservation time")

    def __str__(self):
        return f"{self.token_number} - {self.customer_name} ({self.party_size})"


class QueueSettings(models.Model):
    """
    Single row of queue configuration. Use ``QueueSettings.load()``;
    the row is created with defaults on first read.
    """

    grace_period_minutes = models.PositiveIntegerField(
        default=settings.QUEUE_DEFAULT_GRACE_PERIOD_MINUTES
    )
    avg_seat_time_minutes = models.PositiveIntegerField(
        default=settings.QUEUE_DEFAULT_AVG_SEAT_TIME_MINUTES,
        validators=[MinValueValidator(1)]
    )

    # informational only, not enforced
    opening_time = models.TimeField(default=datetime.time(9, 0))
    closing_time = models.TimeField(default=datetime.time(22, 0))

    auto_refresh = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "queue settings"
        verbose_name_plural = "queue settings"

    SINGLETON_PK = 1

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Queue settings cannot be deleted")

    def __str__(self):
        return "Queue settings"


class OverrideLog(models.Model):

    ACTION_CHOICES = (
        ("manual_assign", "Manual assign"),
        ("manual_reorder", "Manual reorder"),
        ("cancel_token", "Cancel token"),
        ("complete_token", "Complete token"),
        ("auto_timeout", "Auto timeout"),
    )

    action = models.CharField(max_length=20, choices=ACTION_CHOICES, db_index=True)
    performed_by = models.CharField(max_length=150)

    token = models.ForeignKey(
        Token,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="override_logs"
    )

    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="override_logs"
    )

    reason = models.CharField(max_length=255)
    metadata = models.JSONField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["action", "-timestamp"], name="overridelog_action_time_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Override log entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Override log entries cannot be deleted")

    def __str__(self):
        return f"{self.action} by {self.performed_by}"
