import uuid
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_CHOICES = (
        ("DEVELOPER", "Developer"),
        ("ADMIN", "Admin"),
        ("STAFF", "Staff"),
    )

    ADMIN_ROLES = ("ADMIN", "DEVELOPER")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default="STAFF")
    phone = models.CharField(max_length=20, blank=True, null=True)

    @property
    def is_admin_role(self):
        return self.role in self.ADMIN_ROLES

    def __str__(self):
        return f"{self.username} - {self.role}"
