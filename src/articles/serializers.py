"""Serializers validating submitted article and comment fields."""

from rest_framework import serializers

from .models import Article, Comment


class ArticleSerializer(serializers.ModelSerializer):
    class Meta:
        """Expose editable article fields; ownership and timestamps are read-only.

        The slug's uniqueness is enforced by the database so duplicates
        surface as conflicts rather than validation errors.
        """

        model = Article
        fields = ["id", "title", "slug", "body", "is_published", "author", "moderator", "created_at", "updated_at"]
        read_only_fields = ["id", "author", "moderator", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"validators": []}}


class CommentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Comment
        fields = ["id", "article", "body", "is_published", "author", "moderator", "created_at", "updated_at"]
        read_only_fields = ["id", "author", "moderator", "created_at", "updated_at"]


__all__ = ["ArticleSerializer", "CommentSerializer"]
