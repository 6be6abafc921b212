"""Shared list-query assembly for entity repositories."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.db.wall_clock import utcnow
from app.schemas.query import ListQuery, Pagination
from app.services.filtering import ColumnRef, SortTerm, resolve_filters, resolve_sort


@dataclass(frozen=True)
class Listing:
    model: Any
    filter_columns: Mapping[str, ColumnRef]
    default_sort: Sequence[SortTerm]
    sort_columns: Mapping[str, ColumnRef] | None = None
    visibility: Sequence[Any] = ()
    options: Sequence[Any] = ()

    @property
    def sortable(self) -> Mapping[str, ColumnRef]:
        return self.filter_columns if self.sort_columns is None else self.sort_columns


@dataclass
class PageResult:
    rows: list
    pagination: Pagination


def fetch_page(
    db: Session,
    listing: Listing,
    params: ListQuery,
    scopes: Sequence = (),
    *,
    strict: bool | None = None,
) -> PageResult:
    model = listing.model
    conditions = list(listing.visibility)
    conditions.extend(scopes)
    conditions.extend(resolve_filters(model, listing.filter_columns, params.search_filters, strict=strict))

    base = db.query(model)
    if conditions:
        base = base.filter(and_(*conditions))

    # Count and page are two independent reads; no transaction spans them.
    total = base.order_by(None).count()

    page_query = resolve_sort(base, model, listing.sortable, params.sort_by, params.sort_order, listing.default_sort)
    if listing.options:
        page_query = page_query.options(*listing.options)
    rows = page_query.offset(params.skip).limit(params.limit).all()
    return PageResult(rows=rows, pagination=Pagination.build(params.page, params.limit, total))


def get_live(db: Session, model, entity_id):
    """Row by id, or None when missing or soft-deleted."""
    query = db.query(model).filter(model.id == entity_id)
    if hasattr(model, "deleted_at"):
        query = query.filter(model.deleted_at.is_(None))
    return query.first()


def add_row(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def apply_changes(db: Session, obj, changes: Mapping[str, Any]):
    for key, value in changes.items():
        setattr(obj, key, value)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def soft_delete(db: Session, obj):
    obj.deleted_at = utcnow()
    db.add(obj)
    db.commit()
    return obj


def exists(db: Session, model, *conditions, exclude_id=None, live_only: bool = True) -> bool:
    query = db.query(model.id).filter(*conditions)
    if live_only and hasattr(model, "deleted_at"):
        query = query.filter(model.deleted_at.is_(None))
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first() is not None
