"""Exceptions raised by the user and post stores.

All store failures derive from :class:`StoreError`. Constraint violations and
missing records are caller errors and are never retried. Anything else the
database reports is wrapped in :class:`StorageError` after the transaction has
been rolled back.
"""

from __future__ import annotations

import logging
from typing import NoReturn

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for all store errors."""


class NotFound(StoreError, LookupError):
    """No live record matches the requested key."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key!r} not found")


class UniqueConstraintViolation(StoreError):
    """A unique column already holds the given value."""

    def __init__(self, field: str, value: object = None):
        self.field = field
        self.value = value
        if value is None:
            message = f"{field} already exists"
        else:
            message = f"{field} {value!r} already exists"
        super().__init__(message)


class ForeignKeyViolation(StoreError):
    """A post references a user that does not exist."""

    def __init__(self, author_id: object = None):
        self.author_id = author_id
        super().__init__(f"author {author_id!r} does not exist")


class PermissionDenied(StoreError):
    """A post was modified on behalf of a user who does not own it."""

    def __init__(self, post_id: int, author_id: int):
        self.post_id = post_id
        self.author_id = author_id
        super().__init__(f"post {post_id} is not owned by user {author_id}")


class StorageError(StoreError):
    """The database failed while executing an operation."""


def classify_integrity_error(exc: IntegrityError) -> StoreError:
    """Map a driver integrity error onto the store taxonomy."""
    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        for field in ("username", "email"):
            if field in message:
                return UniqueConstraintViolation(field)
        return UniqueConstraintViolation("record")
    if "foreign key" in message:
        return ForeignKeyViolation()
    return StorageError("integrity check failed")


def handle_store_error(session: Session, exc: Exception) -> NoReturn:
    """Rollback the transaction and re-raise ``exc`` as a store error."""
    session.rollback()
    if isinstance(exc, (StoreError, ValueError)):
        logger.info("store operation rejected: %s", exc)
        raise exc
    logger.exception("store operation failed", exc_info=exc)
    if isinstance(exc, IntegrityError):
        raise classify_integrity_error(exc) from exc
    if isinstance(exc, SQLAlchemyError):
        raise StorageError("Database error") from exc
    raise exc
