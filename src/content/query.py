"""Assembly of list/count query specifications.

The assembler merges the compiled access predicate with caller-supplied
filters, sort and pagination. It never touches the caller's mapping and
never executes anything; :class:`content.store.ContentStore` does.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from django.conf import settings

from .exceptions import Unauthorized, UnprocessableEntity
from .predicates import (
    DENIED,
    MATCH_ALL,
    Condition,
    Group,
    Logic,
    Operator,
    Predicate,
    required_joins,
)

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset({"limit", "page", "orderBy", "order", "offset"})

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class Sort:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class QuerySpec:
    """Ready-to-execute, store-agnostic description of what to fetch."""

    predicate: Predicate = MATCH_ALL
    filters: tuple[Condition, ...] = ()
    sort: Sort | None = None
    limit: int = 25
    offset: int = 0
    joins: tuple[str, ...] = ()

    @property
    def where(self) -> Group:
        """The access predicate ANDed with every caller filter."""
        return Group(Logic.AND, (self.predicate, *self.filters))


def _normalize(query) -> dict[str, Any]:
    """Copy a plain mapping or a Django ``QueryDict`` into a dict.

    Repeated ``QueryDict`` keys become lists; single values stay scalars.
    """
    if query is None:
        return {}
    if hasattr(query, "lists"):
        return {key: values if len(values) > 1 else values[0] for key, values in query.lists()}
    return dict(query)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class QueryAssembler:
    """Build a :class:`QuerySpec` from a predicate and caller parameters."""

    def __init__(self, max_limit: int | None = None, default_limit: int | None = None):
        self.max_limit = max_limit if max_limit is not None else getattr(settings, "CONTENT_MAX_LIMIT", 100)
        self.default_limit = (
            default_limit if default_limit is not None else getattr(settings, "CONTENT_DEFAULT_LIMIT", 25)
        )

    def assemble(
        self,
        predicate,
        query: Mapping[str, Any] | None = None,
        skip_permission: bool = False,
    ) -> QuerySpec:
        if predicate is DENIED:
            if not skip_permission:
                raise Unauthorized()
            predicate = MATCH_ALL

        params = _normalize(query)
        limit, offset = self._paginate(params)
        return QuerySpec(
            predicate=predicate,
            filters=self._filters(params),
            sort=self._sort(params),
            limit=limit,
            offset=offset,
            joins=required_joins(predicate),
        )

    def _paginate(self, params: dict[str, Any]) -> tuple[int, int]:
        if not _is_blank(params.get("limit")):
            limit = self._parse_int("limit", params["limit"], minimum=1)
            if limit > self.max_limit:
                logger.warning("Limit was overridden due to more than max limit (%s)", self.max_limit)
                limit = self.max_limit
            page = params.get("page")
            page = 0 if _is_blank(page) else self._parse_int("page", page, minimum=0)
        else:
            limit = self.default_limit
            page = 0

        offset = params.get("offset")
        if _is_blank(offset):
            return limit, limit * page
        return limit, self._parse_int("offset", offset, minimum=0)

    @staticmethod
    def _parse_int(name: str, value: Any, minimum: int) -> int:
        if isinstance(value, _SEQUENCE_TYPES) or isinstance(value, bool):
            raise UnprocessableEntity(f"'{name}' must be an integer.")
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            raise UnprocessableEntity(f"'{name}' must be an integer.") from None
        if parsed < minimum:
            raise UnprocessableEntity(f"'{name}' must be at least {minimum}.")
        return parsed

    @staticmethod
    def _sort(params: dict[str, Any]) -> Sort | None:
        field, order = params.get("orderBy"), params.get("order")
        if not field or not order:
            return None
        try:
            direction = SortDirection(str(order).upper())
        except ValueError:
            raise UnprocessableEntity("'order' must be 'asc' or 'desc'.") from None
        return Sort(field=str(field), direction=direction)

    @staticmethod
    def _filters(params: dict[str, Any]) -> tuple[Condition, ...]:
        filters = []
        for key, value in params.items():
            if key in RESERVED_KEYS:
                continue
            if isinstance(value, _SEQUENCE_TYPES):
                filters.append(Condition(key, Operator.IN, tuple(value)))
            else:
                filters.append(Condition(key, Operator.EQ, value))
        return tuple(filters)


__all__ = ["RESERVED_KEYS", "SortDirection", "Sort", "QuerySpec", "QueryAssembler"]
