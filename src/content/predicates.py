"""Boolean filter trees and the access-scope to predicate compiler.

A predicate is either a :class:`Condition` leaf or a :class:`Group` combining
children with AND/OR. Trees are immutable and store-agnostic; the Django
store translates them into ``Q`` objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Sequence, Union

from django.core.exceptions import ImproperlyConfigured

from .scope import AccessScope


class Operator(str, Enum):
    EQ = "eq"
    IN = "in"


class Logic(str, Enum):
    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Condition:
    """``field <operator> value``; ``field`` may be a dot path through relations."""

    field: str
    operator: Operator
    value: Any


@dataclass(frozen=True)
class Group:
    logic: Logic
    children: tuple["Predicate", ...] = ()


Predicate = Union[Condition, Group]

# An empty AND group restricts nothing.
MATCH_ALL = Group(Logic.AND)

PUBLISHED_FIELD = "is_published"


class _Denied:
    """Marker returned when a scope grants no view permission at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DENIED"


DENIED = _Denied()


def iter_conditions(predicate: Predicate) -> Iterator[Condition]:
    """Yield every leaf of a predicate tree, depth first."""
    if isinstance(predicate, Condition):
        yield predicate
        return
    for child in predicate.children:
        yield from iter_conditions(child)


def joins_for_paths(paths: Iterable[str]) -> tuple[str, ...]:
    """Return the relation joins needed to reach every dot path.

    ``"a.b.c"`` needs ``"a"`` and ``"a.b"``. Joins are keyed by their
    accumulated path, so paths sharing a prefix reuse the same join; order is
    first-seen.
    """
    joins: dict[str, None] = {}
    for path in paths:
        accumulated = ""
        for segment in path.split(".")[:-1]:
            accumulated = f"{accumulated}.{segment}" if accumulated else segment
            joins.setdefault(accumulated, None)
    return tuple(joins)


def required_joins(predicate: Predicate) -> tuple[str, ...]:
    return joins_for_paths(condition.field for condition in iter_conditions(predicate))


class PredicateCompiler:
    """Turn an :class:`AccessScope` into the extra filter of list queries.

    Branches:

    ======== ================ ========= =======================================
    view_all view_unpublished view_own  predicate
    ======== ================ ========= =======================================
    no       any              no        ``DENIED``
    yes      yes              any       ``MATCH_ALL``
    yes      no               yes       ``(owner terms OR'd) OR is_published``
    yes      no               no        ``is_published``
    no       any              yes       ``(owner terms OR'd)``
    ======== ================ ========= =======================================
    """

    def compile(
        self,
        scope: AccessScope,
        owner_fields: Sequence[str],
        user_id: Any,
    ) -> Predicate | _Denied:
        if not (scope.view_all or scope.view_own):
            return DENIED

        restrict_published = scope.view_all and not scope.view_unpublished
        restrict_owner = not scope.view_all or (restrict_published and scope.view_own)

        published = Condition(PUBLISHED_FIELD, Operator.EQ, True)
        if not restrict_owner:
            return published if restrict_published else MATCH_ALL

        if not owner_fields:
            raise ImproperlyConfigured(
                "Owner-scoped permissions require at least one owner field."
            )
        owned = Group(
            Logic.OR,
            tuple(Condition(field, Operator.EQ, user_id) for field in owner_fields),
        )
        if restrict_published:
            return Group(Logic.OR, (owned, published))
        return owned


__all__ = [
    "Operator",
    "Logic",
    "Condition",
    "Group",
    "Predicate",
    "MATCH_ALL",
    "DENIED",
    "PUBLISHED_FIELD",
    "iter_conditions",
    "joins_for_paths",
    "required_joins",
    "PredicateCompiler",
]
