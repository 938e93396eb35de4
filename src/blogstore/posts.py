"""Post store: insert, lookup, update, delete and listing of posts."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Tuple

from prometheus_client import Counter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from .config import settings
from .database import SessionLocal, utcnow
from .errors import ForeignKeyViolation, NotFound, PermissionDenied, handle_store_error
from .integrity import delete_author_posts, require_author
from .models import Post, User
from .schemas import PostCreate, PostUpdate


logger = logging.getLogger(__name__)

POST_CREATE_COUNTER = Counter("blog_posts_created_total", "Total posts created")
POST_DELETE_COUNTER = Counter(
    "blog_posts_deleted_total", "Total posts deleted", ["reason"]
)


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return settings.default_page_limit
    if limit <= 0:
        raise ValueError("limit must be positive")
    return min(limit, settings.max_page_limit)


def _paginate(query: Query, skip: int, limit: int | None) -> Tuple[List[Post], int]:
    """Return one newest-first page of ``query`` and the total row count."""
    if skip < 0:
        raise ValueError("skip must not be negative")
    limit = _resolve_limit(limit)
    total = query.count()
    records = (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return records, total


def _load_post(session: Session, post_id: int, author_id: int | None = None) -> Post:
    post = session.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise NotFound("post", post_id)
    if author_id is not None and post.author_id != author_id:
        raise PermissionDenied(post_id, author_id)
    return post


def create_post(
    author_id: int,
    title: str | None = None,
    content: str | None = None,
    created_at: datetime | None = None,
) -> Post:
    """Persist a new post for an existing author.

    Parameters
    ----------
    author_id: int
        Identifier of the user writing the post. Must reference a live user.
    title, content: str, optional
        Post body. Either or both may be omitted.
    created_at: datetime, optional
        Creation time; defaults to now. ``updated_at`` starts out equal to it.

    Raises
    ------
    ForeignKeyViolation
        If no user with ``author_id`` exists. Nothing is written.
    ValueError
        If ``created_at`` lies in the future.
    """

    logger.info("create post author=%s", author_id)
    session: Session = SessionLocal()
    try:
        data = PostCreate(
            author_id=author_id, title=title, content=content, created_at=created_at
        )
        require_author(session, data.author_id)

        stamp = data.created_at or utcnow()
        post = Post(
            title=data.title,
            content=data.content,
            author_id=data.author_id,
            created_at=stamp,
            updated_at=stamp,
        )
        session.add(post)
        try:
            session.commit()
        except IntegrityError as exc:
            # author removed between the check and the insert
            raise ForeignKeyViolation(data.author_id) from exc
        session.refresh(post)
        POST_CREATE_COUNTER.inc()
        logger.info("created post id=%s author=%s", post.id, author_id)
        return post
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def get_post(post_id: int) -> Post:
    """Return the post with the given id or raise :class:`NotFound`."""

    session: Session = SessionLocal()
    try:
        return _load_post(session, post_id)
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def update_post(
    post_id: int, fields: Dict[str, Any], author_id: int | None = None
) -> Post:
    """Change the ``title`` and/or ``content`` of a post.

    Only keys present in ``fields`` are written, so passing ``None`` clears a
    field. ``updated_at`` is refreshed on every call. When ``author_id`` is
    given the post must belong to that user.
    """

    session: Session = SessionLocal()
    try:
        changes = PostUpdate.model_validate(fields)
        logger.info(
            "update post id=%s fields=%s", post_id, sorted(changes.model_fields_set)
        )
        post = _load_post(session, post_id, author_id)
        for name in changes.model_fields_set:
            setattr(post, name, getattr(changes, name))
        post.updated_at = utcnow()
        session.commit()
        session.refresh(post)
        logger.info("updated post id=%s", post_id)
        return post
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def delete_post(post_id: int, author_id: int | None = None) -> None:
    """Delete a single post. The author is left untouched."""

    logger.info("delete post id=%s", post_id)
    session: Session = SessionLocal()
    try:
        post = _load_post(session, post_id, author_id)
        session.delete(post)
        session.commit()
        POST_DELETE_COUNTER.labels(reason="direct").inc()
        logger.info("deleted post id=%s", post_id)
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def delete_posts_by_author(author_id: int) -> int:
    """Delete every post written by ``author_id`` and return the count."""

    logger.info("delete posts author=%s", author_id)
    session: Session = SessionLocal()
    try:
        removed = delete_author_posts(session, author_id)
        session.commit()
        POST_DELETE_COUNTER.labels(reason="direct").inc(removed)
        logger.info("deleted %d posts author=%s", removed, author_id)
        return removed
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def list_posts(skip: int = 0, limit: int | None = None) -> Tuple[List[Post], int]:
    """Retrieve a newest-first page of all posts and the total count."""

    session: Session = SessionLocal()
    try:
        return _paginate(session.query(Post), skip, limit)
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()


def list_posts_by_author(
    author_id: int, skip: int = 0, limit: int | None = None
) -> Tuple[List[Post], int]:
    """Retrieve a newest-first page of one author's posts."""

    session: Session = SessionLocal()
    try:
        if session.query(User.id).filter(User.id == author_id).first() is None:
            raise NotFound("user", author_id)
        query = session.query(Post).filter(Post.author_id == author_id)
        return _paginate(query, skip, limit)
    except Exception as exc:
        handle_store_error(session, exc)
    finally:
        session.close()
