"""Article and Comment content resources."""

from django.db import models

from content.models import ContentEntity


class Article(ContentEntity):
    """Published writing owned by its author."""

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    body = models.TextField(blank=True)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


class Comment(ContentEntity):
    """Comment on an article, owned by its author and by the article's author."""

    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name="comments")
    body = models.TextField()

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.body[:50]


__all__ = ["Article", "Comment"]
