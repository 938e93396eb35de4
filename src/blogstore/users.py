"""User store: insert, lookup and cascading delete of users."""

import logging
from datetime import datetime

from prometheus_client import Counter
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .database import SessionLocal, utcnow
from .errors import NotFound, UniqueConstraintViolation, handle_store_error
from .integrity import cascade_delete_user
from .models import User
from .posts import POST_DELETE_COUNTER
from .schemas import UserCreate


logger = logging.getLogger(__name__)

USER_CREATE_COUNTER = Counter("blog_users_created_total", "Total users created")
USER_DELETE_COUNTER = Counter("blog_users_deleted_total", "Total users deleted")


def _check_unique(session: Session, username: str, email: str) -> None:
    """Raise if ``username`` or ``email`` already belongs to a user."""
    clash = (
        session.query(User)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )
    if clash is None:
        return
    if clash.username == username:
        raise UniqueConstraintViolation("username", username)
    raise UniqueConstraintViolation("email", email)


def create_user(
    username: str,
    email: str,
    password_hash: str,
    created_at: datetime | None = None,
) -> User:
    """Persist a new user and return it with ``id`` and ``created_at`` set.

    Raises
    ------
    UniqueConstraintViolation
        If the username or email is already taken.
    ValueError
        If a required field is missing or not a string, or ``created_at``
        lies in the future.
    """

    logger.info("create user username=%s", username)
    session: Session = SessionLocal()
    try:
        data = UserCreate(
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )
        _check_unique(session, data.username, data.email)

        user = User(
            username=data.username,
            email=data.email,
            password_hash=data.password_hash,
            created_at=data.created_at or utcnow(),
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        USER_CREATE_COUNTER.inc()
        logger.info("created user id=%s username=%s", user.id, user.username)
        return user
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def _get_user_by(column, value) -> User:
    session: Session = SessionLocal()
    try:
        user = session.query(User).filter(column == value).first()
        if user is None:
            raise NotFound("user", value)
        return user
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def get_user(user_id: int) -> User:
    """Return the user with the given id or raise :class:`NotFound`."""
    return _get_user_by(User.id, user_id)


def get_user_by_username(username: str) -> User:
    """Return the user with the given username or raise :class:`NotFound`."""
    return _get_user_by(User.username, username)


def get_user_by_email(email: str) -> User:
    """Return the user with the given email or raise :class:`NotFound`."""
    return _get_user_by(User.email, email)


def delete_user(user_id: int) -> int:
    """Delete a user and, in the same transaction, all of their posts.

    Either the user and every post it authored are gone when this returns,
    or nothing changed and an exception was raised. Returns the number of
    posts removed along with the user.
    """

    logger.info("delete user id=%s", user_id)
    session: Session = SessionLocal()
    try:
        user = (
            session.query(User)
            .filter(User.id == user_id)
            .with_for_update()
            .first()
        )
        if user is None:
            raise NotFound("user", user_id)

        removed = cascade_delete_user(session, user)
        session.commit()
        USER_DELETE_COUNTER.inc()
        POST_DELETE_COUNTER.labels(reason="cascade").inc(removed)
        logger.info("deleted user id=%s with %d posts", user_id, removed)
        return removed
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()
