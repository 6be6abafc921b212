from __future__ import annotations

import uuid
from typing import Any, Callable

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.repositories.base import PageResult, get_live


def iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def uuid_or_400(raw: Any, field_name: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(str(raw or "").strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f'Invalid "{field_name}"')


def actor_uuid(user: dict) -> uuid.UUID:
    try:
        return uuid.UUID(str(user.get("userId") or ""))
    except ValueError:
        raise HTTPException(status_code=401, detail="Unauthorized")


def live_or_404(db: Session, model, raw_id: Any, label: str):
    row = get_live(db, model, uuid_or_400(raw_id))
    if row is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


def page_payload(result: PageResult, serialize: Callable[[Any], dict]) -> dict:
    return {
        "success": True,
        "rows": [serialize(row) for row in result.rows],
        "pagination": result.pagination.model_dump(by_alias=True),
    }


def changes_of(payload, nullable: tuple[str, ...] = ()) -> dict[str, Any]:
    """Fields the client sent; nulls are dropped unless the column is nullable."""
    return {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in nullable
    }
