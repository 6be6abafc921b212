"""Search filter translation and column resolution for list queries.

A ``SearchFilter`` names a column id, an operator, a raw string value and the
declared value type. ``build_condition`` turns the last three into a
``Condition`` (or None when the pair is not legal or the value does not
parse); ``resolve_filter`` maps the column id through an entity's
``ColumnRef`` table and applies the condition to a concrete SQLAlchemy
column, walking relationships with ``has()`` for nested ids. A filter whose
declared type is not the one the column holds (``column_value_type``) is
never applied.

Problems with a filter are dropped with a warning on ``app.query`` unless
strict filtering is enabled, in which case ``InvalidSearchFilter`` is raised.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from datetime import date, datetime, timezone
from typing import Any, Mapping, Sequence

from sqlalchemy import and_, asc, desc
from sqlalchemy.orm import Query, aliased

from app.core.config import settings
from app.core.errors import InvalidSearchFilter
from app.db.wall_clock import local_day_bounds, local_midnight
from app.schemas.query import SearchFilter

logger = logging.getLogger("app.query")


@dataclass(frozen=True)
class Condition:
    op: str
    value: Any
    upper: Any = None

    def to_clause(self, column):
        if self.op == "eq":
            return column == self.value
        if self.op == "icontains":
            return column.icontains(self.value, autoescape=True)
        if self.op == "istartswith":
            return column.istartswith(self.value, autoescape=True)
        if self.op == "iendswith":
            return column.iendswith(self.value, autoescape=True)
        if self.op == "gt":
            return column > self.value
        if self.op == "gte":
            return column >= self.value
        if self.op == "lt":
            return column < self.value
        if self.op == "lte":
            return column <= self.value
        if self.op == "range":
            return and_(column >= self.value, column < self.upper)
        raise ValueError(f"unknown condition op {self.op!r}")


@dataclass(frozen=True)
class ColumnRef:
    """A filterable/sortable field, optionally reached through relationships."""

    field: str
    relation: tuple[str, ...] = ()


_STRING_OPS = {"equals": "eq", "contains": "icontains", "startsWith": "istartswith", "endsWith": "iendswith"}
_NUMBER_OPS = {"equals": "eq", "gt": "gt", "gte": "gte", "lt": "lt", "lte": "lte"}


def string_condition(operator: str, raw_value: str) -> Condition | None:
    op = _STRING_OPS.get(operator)
    if op is None:
        return None
    return Condition(op, raw_value)


def _parse_number(raw_value: str) -> float | None:
    text = str(raw_value or "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def number_condition(operator: str, raw_value: str) -> Condition | None:
    op = _NUMBER_OPS.get(operator)
    if op is None:
        return None
    number = _parse_number(raw_value)
    if number is None:
        return None
    return Condition(op, number)


def parse_date_value(raw_value: str) -> date | datetime | None:
    """ISO date (a wall-clock calendar day) or ISO datetime (naive means UTC)."""
    text = str(raw_value or "").strip()
    if not text:
        return None
    try:
        if len(text) == 10 and "T" not in text and " " not in text:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def date_condition(operator: str, raw_value: str) -> Condition | None:
    if operator not in {"equals", "before", "after"}:
        return None
    parsed = parse_date_value(raw_value)
    if parsed is None:
        return None
    if operator == "equals":
        if isinstance(parsed, datetime):
            return Condition("eq", parsed)
        start, end = local_day_bounds(parsed)
        return Condition("range", start, end)
    instant = parsed if isinstance(parsed, datetime) else local_midnight(parsed)
    return Condition("lt" if operator == "before" else "gt", instant)


def boolean_condition(operator: str, raw_value: str) -> Condition | None:
    if operator != "equals":
        return None
    text = str(raw_value or "").strip().lower()
    if text == "true":
        return Condition("eq", True)
    if text == "false":
        return Condition("eq", False)
    return None


_TRANSLATORS = {
    "string": string_condition,
    "number": number_condition,
    "date": date_condition,
    "boolean": boolean_condition,
}


def build_condition(operator: str, raw_value: str, value_type: str) -> Condition | None:
    translator = _TRANSLATORS.get(value_type)
    if translator is None:
        return None
    return translator(operator, raw_value)


def _strict(strict: bool | None) -> bool:
    return settings.STRICT_SEARCH_FILTERS if strict is None else strict


def _drop(strict: bool | None, message: str):
    if _strict(strict):
        raise InvalidSearchFilter(message)
    logger.warning("dropping search filter: %s", message)
    return None


def _relationship_target(entity, name: str):
    return getattr(entity, name).property.mapper.class_


def column_value_type(column) -> str | None:
    """The filter type a column accepts, or None when it takes no filters."""
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return None
    if issubclass(python_type, bool):
        return "boolean"
    if issubclass(python_type, (int, float, Decimal)):
        return "number"
    if issubclass(python_type, date):
        return "date"
    if issubclass(python_type, str):
        return "string"
    return None


def resolve_filter(
    model,
    columns: Mapping[str, ColumnRef],
    search_filter: SearchFilter,
    *,
    strict: bool | None = None,
):
    ref = columns.get(search_filter.column)
    if ref is None:
        return _drop(strict, f'unsupported column "{search_filter.column}" on {model.__name__}')

    owners = [model]
    for name in ref.relation:
        owners.append(_relationship_target(owners[-1], name))
    column = getattr(owners[-1], ref.field)
    accepted = column_value_type(column)
    if accepted != search_filter.type:
        return _drop(
            strict,
            f'column "{search_filter.column}" takes {accepted or "no"} filters, not {search_filter.type}',
        )

    condition = build_condition(search_filter.operator, search_filter.value, search_filter.type)
    if condition is None:
        return _drop(
            strict,
            f'cannot apply {search_filter.type} operator "{search_filter.operator}" '
            f'with value "{search_filter.value}" to column "{search_filter.column}"',
        )

    clause = condition.to_clause(column)
    for owner, name in zip(reversed(owners[:-1]), reversed(ref.relation)):
        clause = getattr(owner, name).has(clause)
    return clause


def resolve_filters(model, columns: Mapping[str, ColumnRef], search_filters: Sequence[SearchFilter], *, strict: bool | None = None) -> list:
    clauses = []
    for search_filter in search_filters:
        clause = resolve_filter(model, columns, search_filter, strict=strict)
        if clause is not None:
            clauses.append(clause)
    return clauses


SortTerm = tuple[ColumnRef, str]


def resolve_sort(
    query: Query,
    model,
    sort_columns: Mapping[str, ColumnRef],
    sort_by: str | None,
    sort_order: str | None,
    default: Sequence[SortTerm],
) -> Query:
    terms: Sequence[SortTerm] = default
    if sort_by:
        ref = sort_columns.get(sort_by)
        if ref is None:
            logger.warning('unsupported sort column "%s" on %s, using default order', sort_by, model.__name__)
        else:
            terms = [(ref, sort_order or "asc")]

    joined: dict[tuple[str, ...], Any] = {}
    order = []
    for ref, direction in terms:
        entity = model
        for depth, name in enumerate(ref.relation, start=1):
            path = ref.relation[:depth]
            if path not in joined:
                target = aliased(_relationship_target(entity, name))
                query = query.outerjoin(getattr(entity, name).of_type(target))
                joined[path] = target
            entity = joined[path]
        column = getattr(entity, ref.field)
        order.append(desc(column) if direction == "desc" else asc(column))
    # Primary key last keeps pages stable when the sort keys tie.
    order.append(asc(model.id))
    return query.order_by(*order)
