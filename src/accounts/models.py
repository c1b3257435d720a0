"""Custom User model linked to RBAC roles.

Note: Django's built-in groups/permissions (PermissionsMixin) are not used;
a user's effective permissions come exclusively from the Role/Permission
tables in ``access_control``.
"""

from typing import ClassVar

from django.contrib.auth.base_user import AbstractBaseUser
from django.db import models

from .managers import UserManager


class User(AbstractBaseUser):
    """Custom user identified by email and holding a set of roles."""

    email = models.EmailField(unique=True)
    roles = models.ManyToManyField("access_control.Role", related_name="users", blank=True)
    is_active = models.BooleanField(default=True)
    is_superuser = models.BooleanField(default=False)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    objects = UserManager()

    class Meta:
        """Default ordering shows newest users first."""
        ordering = ["-date_joined"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email


__all__ = ["User"]
