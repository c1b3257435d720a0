"""Permission-scoped CRUD operations over one content resource type."""

import logging
from typing import Any, Mapping

from django.conf import settings
from django.db import IntegrityError

from .descriptors import ResourceDescriptor
from .exceptions import Conflict, NotFound, UnprocessableEntity
from .guards import EntityGuard
from .predicates import PredicateCompiler
from .query import QueryAssembler, QuerySpec
from .registry import get_descriptor
from .scope import ScopeEvaluator
from .store import ContentStore, is_unique_violation

logger = logging.getLogger(__name__)

# Fields owned by the service; submitted values for them are ignored.
PROTECTED_FIELDS = frozenset({"id", "pk", "author", "author_id", "moderator", "moderator_id"})


class ContentCrudService:
    """List, count, read, create, update and delete content entities.

    The service runs every list/count request through the scope evaluator,
    the predicate compiler and the query assembler before touching the
    store, and checks entity-level permissions for single-entity
    operations. Validation goes through ``serializer_class`` (a DRF model
    serializer) when one is given.
    """

    def __init__(
        self,
        model,
        descriptor: ResourceDescriptor | None = None,
        *,
        serializer_class=None,
        store: ContentStore | None = None,
        evaluator: ScopeEvaluator | None = None,
        compiler: PredicateCompiler | None = None,
        assembler: QueryAssembler | None = None,
    ):
        self.model = model
        self.descriptor = descriptor or get_descriptor(model)
        self.serializer_class = serializer_class
        self.store = store or ContentStore(model)
        self.evaluator = evaluator or ScopeEvaluator()
        self.compiler = compiler or PredicateCompiler()
        self.assembler = assembler or QueryAssembler()
        self.guard = EntityGuard(self.descriptor, self.evaluator)

    @staticmethod
    def _has_superuser_bypass(user) -> bool:
        """Return True if superuser bypass is enabled and the user is a superuser."""
        return (
            user is not None
            and getattr(user, "is_authenticated", False)
            and getattr(settings, "ALLOW_SUPERUSER_BYPASS", False)
            and getattr(user, "is_superuser", False)
        )

    def build_query(self, user, query: Mapping[str, Any] | None = None) -> QuerySpec:
        scope = self.evaluator.evaluate(user, self.descriptor)
        predicate = self.compiler.compile(scope, self.descriptor.owner_fields, getattr(user, "pk", None))
        return self.assembler.assemble(predicate, query, skip_permission=self._has_superuser_bypass(user))

    def list(self, user, query: Mapping[str, Any] | None = None) -> list:
        return self.store.fetch(self.build_query(user, query))

    def count(self, user, query: Mapping[str, Any] | None = None) -> int:
        return self.store.count(self.build_query(user, query))

    def _get_or_404(self, pk):
        entity = self.store.get(pk)
        if entity is None:
            raise NotFound()
        return entity

    def retrieve(self, user, pk):
        entity = self._get_or_404(pk)
        if not self._has_superuser_bypass(user):
            self.guard.authorize_view(user, entity)
        return entity

    def _validate(self, data: Mapping[str, Any], instance=None) -> dict[str, Any]:
        if self.serializer_class is not None:
            serializer = self.serializer_class(instance, data=dict(data), partial=instance is not None)
            if not serializer.is_valid():
                raise UnprocessableEntity(serializer.errors)
            values = dict(serializer.validated_data)
        else:
            known = {f.name for f in self.model._meta.concrete_fields}
            known |= {f.attname for f in self.model._meta.concrete_fields}
            unknown = sorted(set(data) - known)
            if unknown:
                raise UnprocessableEntity({name: ["Unknown field."] for name in unknown})
            values = dict(data)
        return {name: value for name, value in values.items() if name not in PROTECTED_FIELDS}

    def create(self, user, data: Mapping[str, Any]):
        if not self._has_superuser_bypass(user):
            self.guard.authorize_add(user)
        entity = self.model(**self._validate(data))
        if getattr(user, "is_authenticated", False):
            entity.author_id = user.pk
            entity.moderator_id = user.pk
        else:
            entity.author_id = None
            entity.moderator_id = None

        try:
            return self.store.save(entity)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise Conflict() from exc
            logger.exception("Failed to create %s", self.descriptor.name)
            raise UnprocessableEntity() from exc
        except Exception as exc:
            logger.exception("Failed to create %s", self.descriptor.name)
            raise UnprocessableEntity() from exc

    def update(self, user, pk, data: Mapping[str, Any]):
        """Merge ``data`` into the entity and save it.

        ``id`` and ``author_id`` are kept from the stored entity and the
        acting user becomes the moderator. A failed save is logged and
        ``None`` is returned unless ``CONTENT_RAISE_ON_UPDATE_FAILURE`` is on.
        """
        current = self._get_or_404(pk)
        if not self._has_superuser_bypass(user):
            self.guard.authorize_edit(user, current)
        changes = self._validate(data, instance=current)

        current_pk, author_id = current.pk, current.author_id
        for name, value in changes.items():
            setattr(current, name, value)
        current.pk = current_pk
        current.author_id = author_id
        current.moderator_id = getattr(user, "pk", None)

        try:
            return self.store.save(current)
        except Exception as exc:
            logger.exception("Failed to update %s %s", self.descriptor.name, current_pk)
            if getattr(settings, "CONTENT_RAISE_ON_UPDATE_FAILURE", False):
                raise UnprocessableEntity() from exc
            return None

    def delete(self, user, pk):
        entity = self._get_or_404(pk)
        if not self._has_superuser_bypass(user):
            self.guard.authorize_remove(user, entity)
        try:
            return self.store.remove(entity)
        except Exception as exc:
            logger.exception("Failed to delete %s %s", self.descriptor.name, pk)
            raise UnprocessableEntity() from exc


__all__ = ["ContentCrudService", "PROTECTED_FIELDS"]
