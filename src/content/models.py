"""Abstract base model shared by all content resources."""

from django.conf import settings
from django.db import models


class ContentEntity(models.Model):
    """Authored, moderated, optionally published content."""

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="authored_%(app_label)s_%(class)s_set",
    )
    moderator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="moderated_%(app_label)s_%(class)s_set",
    )
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]


__all__ = ["ContentEntity"]
