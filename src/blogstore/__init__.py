"""Relational store for blog users and their posts."""

from .database import init_db
from .errors import (
    ForeignKeyViolation,
    NotFound,
    PermissionDenied,
    StorageError,
    StoreError,
    UniqueConstraintViolation,
)
from .posts import (
    create_post,
    delete_post,
    delete_posts_by_author,
    get_post,
    list_posts,
    list_posts_by_author,
    update_post,
)
from .users import (
    create_user,
    delete_user,
    get_user,
    get_user_by_email,
    get_user_by_username,
)

__all__ = [
    "init_db",
    "StoreError",
    "NotFound",
    "UniqueConstraintViolation",
    "ForeignKeyViolation",
    "PermissionDenied",
    "StorageError",
    "create_user",
    "get_user",
    "get_user_by_username",
    "get_user_by_email",
    "delete_user",
    "create_post",
    "get_post",
    "update_post",
    "delete_post",
    "delete_posts_by_author",
    "list_posts",
    "list_posts_by_author",
]
