"""Resource descriptors of the articles app."""

from content.descriptors import ResourceDescriptor

ARTICLE = ResourceDescriptor(name="article", owner_fields=("author_id",))
COMMENT = ResourceDescriptor(name="comment", owner_fields=("author_id", "article.author_id"))

__all__ = ["ARTICLE", "COMMENT"]
