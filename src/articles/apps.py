"""App configuration for the articles content resources."""

from django.apps import AppConfig


class ArticlesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "articles"

    def ready(self) -> None:
        """Bind article models to their resource descriptors."""
        from content.registry import register

        from .models import Article, Comment
        from .resources import ARTICLE, COMMENT

        register(Article, ARTICLE)
        register(Comment, COMMENT)
