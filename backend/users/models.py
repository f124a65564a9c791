from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    STAFF = "staff", "Staff"
    ADMIN = "admin", "Admin"


class User(AbstractUser):
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.STAFF,
    )
    terminal_id = models.CharField(max_length=50, blank=True, default="")

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def staff_id(self) -> str:
        return str(self.pk)

    @property
    def is_admin_role(self) -> bool:
        return self.is_superuser or self.role == UserRole.ADMIN
