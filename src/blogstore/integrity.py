"""Referential integrity between users and their posts.

Both helpers run inside a session owned by the caller, so the check or cascade
commits or rolls back together with the surrounding operation:

* :func:`require_author` runs before a post insert and rejects unknown
  authors.
* :func:`cascade_delete_user` runs as part of a user delete and removes every
  dependent post before the user row itself.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .errors import ForeignKeyViolation
from .models import Post, User

logger = logging.getLogger(__name__)


def require_author(session: Session, author_id: int) -> User:
    """Return the author of a new post, holding a shared lock on its row.

    The lock keeps a concurrent :func:`cascade_delete_user` for the same user
    from committing until the insert is done. SQLite ignores it and relies on
    its database-wide write lock instead.
    """
    author = (
        session.query(User)
        .filter(User.id == author_id)
        .with_for_update(read=True)
        .first()
    )
    if author is None:
        raise ForeignKeyViolation(author_id)
    return author


def delete_author_posts(session: Session, author_id: int) -> int:
    """Delete every post written by ``author_id`` and return how many went."""
    return (
        session.query(Post)
        .filter(Post.author_id == author_id)
        .delete(synchronize_session=False)
    )


def cascade_delete_user(session: Session, user: User) -> int:
    """Remove ``user`` together with all of its posts.

    Changes are flushed but not committed. Returns the number of posts
    removed.
    """
    removed = delete_author_posts(session, user.id)
    session.delete(user)
    session.flush()
    logger.info("cascade removed %d posts for user=%s", removed, user.id)
    return removed
