"""Django ORM persistence for content entities."""

from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db import IntegrityError, transaction
from django.db.models import BooleanField, Q

from .exceptions import UnprocessableEntity
from .predicates import Condition, Logic, Operator, Predicate
from .query import QuerySpec, SortDirection

# SQLSTATE for unique_violation.
_UNIQUE_VIOLATION = "23505"


_BOOLEAN_STRINGS = {
    "true": True,
    "t": True,
    "1": True,
    "yes": True,
    "false": False,
    "f": False,
    "0": False,
    "no": False,
}


def to_q(predicate: Predicate, null_matches_nothing: bool = True) -> Q:
    """Translate a predicate tree into a Django ``Q`` object.

    Dot paths become ``__`` lookups. With ``null_matches_nothing`` (the
    access predicate case) equality against ``None`` matches nothing, like
    ``field = NULL`` in SQL; otherwise it becomes an ``IS NULL`` lookup.
    """
    if isinstance(predicate, Condition):
        lookup = predicate.field.replace(".", "__")
        if predicate.operator is Operator.IN:
            return Q(**{f"{lookup}__in": list(predicate.value)})
        if predicate.value is None and null_matches_nothing:
            return Q(pk__in=[])
        return Q(**{lookup: predicate.value})

    children = [to_q(child, null_matches_nothing) for child in predicate.children]
    if not children:
        return Q()
    combined = children[0]
    for child in children[1:]:
        combined = combined | child if predicate.logic is Logic.OR else combined & child
    return combined


def is_unique_violation(exc: IntegrityError) -> bool:
    """Best-effort detection of duplicate-key errors across database drivers."""
    cause = exc.__cause__
    for attr in ("sqlstate", "pgcode"):
        if getattr(cause, attr, None) == _UNIQUE_VIOLATION:
            return True
    message = str(exc).lower()
    return "unique" in message or "duplicate" in message


class ContentStore:
    """Execute :class:`QuerySpec` objects and persist entities of one model."""

    def __init__(self, model):
        self.model = model

    def _check_field(self, name: str):
        """Caller-supplied names must be concrete local fields."""
        if "__" in name or "." in name:
            raise UnprocessableEntity(f"Unknown field '{name}'.")
        try:
            field = self.model._meta.get_field(name)
        except FieldDoesNotExist:
            raise UnprocessableEntity(f"Unknown field '{name}'.") from None
        if not getattr(field, "concrete", False) or field.many_to_many:
            raise UnprocessableEntity(f"Unknown field '{name}'.")
        return field

    @staticmethod
    def _coerce(field, value):
        """Convert a raw caller value (often a query-string text) for ``field``."""
        if value is None:
            return None
        if isinstance(field, BooleanField) and isinstance(value, str):
            try:
                return _BOOLEAN_STRINGS[value.strip().lower()]
            except KeyError:
                raise ValidationError(f"'{value}' is not a boolean.") from None
        return field.to_python(value)

    def _filter_condition(self, condition: Condition) -> Q:
        field = self._check_field(condition.field)
        try:
            if condition.operator is Operator.IN:
                value = tuple(self._coerce(field, item) for item in condition.value)
            else:
                value = self._coerce(field, condition.value)
        except (TypeError, ValueError, ValidationError):
            raise UnprocessableEntity(f"Invalid value for '{condition.field}'.") from None
        return to_q(Condition(condition.field, condition.operator, value), null_matches_nothing=False)

    def queryset(self, spec: QuerySpec):
        qs = self.model._default_manager.all()
        if spec.joins:
            qs = qs.select_related(*(join.replace(".", "__") for join in spec.joins))
        qs = qs.filter(to_q(spec.predicate))
        for condition in spec.filters:
            qs = qs.filter(self._filter_condition(condition))
        if spec.sort is not None:
            self._check_field(spec.sort.field)
            prefix = "-" if spec.sort.direction is SortDirection.DESC else ""
            qs = qs.order_by(f"{prefix}{spec.sort.field}")
        return qs

    def fetch(self, spec: QuerySpec) -> list:
        return list(self.queryset(spec)[spec.offset : spec.offset + spec.limit])

    def count(self, spec: QuerySpec) -> int:
        # Pagination does not apply to totals.
        return self.queryset(spec).count()

    def get(self, pk):
        try:
            return self.model._default_manager.get(pk=pk)
        except (self.model.DoesNotExist, TypeError, ValueError, ValidationError):
            return None

    def save(self, entity):
        with transaction.atomic():
            entity.save()
        return entity

    def remove(self, entity):
        """Delete ``entity`` and return it with its primary key still set."""
        pk = entity.pk
        with transaction.atomic():
            entity.delete()
        entity.pk = pk
        return entity


__all__ = ["to_q", "is_unique_violation", "ContentStore"]
