from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageFailure

logger = logging.getLogger("app.storage")


@contextmanager
def storage_errors(db: Session, message: str):
    """Turn storage exceptions into ``StorageFailure(message)`` after rolling back."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s: %s", message, exc.__class__.__name__)
        db.rollback()
        raise StorageFailure(message) from exc
