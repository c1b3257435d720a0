"""RBAC models: Role and Permission."""

from django.db import models


class Permission(models.Model):
    """Namespaced permission key (e.g., 'article.view_own')."""

    key = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.key


class Role(models.Model):
    """Named collection of permissions assigned to users."""

    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    permissions = models.ManyToManyField(Permission, related_name="roles", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


__all__ = ["Role", "Permission"]
