"""Content services for articles and comments."""

from content.services import ContentCrudService

from .models import Article, Comment
from .resources import ARTICLE, COMMENT
from .serializers import ArticleSerializer, CommentSerializer


def article_service() -> ContentCrudService:
    return ContentCrudService(Article, ARTICLE, serializer_class=ArticleSerializer)


def comment_service() -> ContentCrudService:
    return ContentCrudService(Comment, COMMENT, serializer_class=CommentSerializer)


__all__ = ["article_service", "comment_service"]
