from datetime import datetime, timedelta, timezone

import pytest

from blogstore import users
from blogstore.errors import NotFound, UniqueConstraintViolation


def test_create_user_assigns_id_and_timestamp(session_local):
    user = users.create_user("alice", "a@x.com", "hash")
    assert user.id == 1
    assert user.username == "alice"
    assert user.email == "a@x.com"
    assert user.password_hash == "hash"
    assert user.created_at is not None


def test_create_user_keeps_supplied_timestamp(session_local):
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    user = users.create_user("alice", "a@x.com", "hash", created_at=stamp)
    assert user.created_at.replace(tzinfo=None) == stamp.replace(tzinfo=None)


def test_duplicate_username_rejected(alice):
    with pytest.raises(UniqueConstraintViolation) as info:
        users.create_user("alice", "other@x.com", "hash")
    assert info.value.field == "username"
    assert users.get_user(alice.id).email == "a@x.com"


def test_duplicate_email_rejected(alice):
    with pytest.raises(UniqueConstraintViolation) as info:
        users.create_user("alice2", "a@x.com", "hash")
    assert info.value.field == "email"
    with pytest.raises(NotFound):
        users.get_user_by_username("alice2")


def test_missing_required_field_rejected(session_local):
    with pytest.raises(ValueError):
        users.create_user(None, "a@x.com", "hash")
    with pytest.raises(ValueError):
        users.create_user("alice", "a@x.com", None)


def test_lookup_by_username_and_email(alice):
    assert users.get_user_by_username("alice").id == alice.id
    assert users.get_user_by_email("a@x.com").id == alice.id


def test_get_missing_user(session_local):
    with pytest.raises(NotFound) as info:
        users.get_user(42)
    assert info.value.entity == "user"
    assert isinstance(info.value, LookupError)


def test_delete_missing_user(session_local):
    with pytest.raises(NotFound):
        users.delete_user(42)


def test_deleted_user_frees_username_and_email(alice):
    users.delete_user(alice.id)
    with pytest.raises(NotFound):
        users.get_user(alice.id)
    again = users.create_user("alice", "a@x.com", "hash")
    assert again.id != alice.id


def test_ids_are_not_reused(session_local):
    first = users.create_user("u1", "u1@x.com", "h")
    second = users.create_user("u2", "u2@x.com", "h")
    users.delete_user(second.id)
    third = users.create_user("u3", "u3@x.com", "h")
    assert first.id < second.id < third.id


def test_duplicate_caught_at_commit(alice, monkeypatch):
    monkeypatch.setattr(users, "_check_unique", lambda session, username, email: None)

    with pytest.raises(UniqueConstraintViolation) as info:
        users.create_user("alice", "other@x.com", "hash")
    assert info.value.field == "username"
    assert users.get_user(alice.id).email == "a@x.com"
    with pytest.raises(NotFound):
        users.get_user_by_email("other@x.com")


def test_created_at_converted_to_utc(session_local):
    minus_three = timezone(timedelta(hours=-3))
    user = users.create_user(
        "carol", "c@x.com", "hash", created_at=datetime(2024, 5, 1, 21, 0, tzinfo=minus_three)
    )
    assert user.created_at.replace(tzinfo=None) == datetime(2024, 5, 2, 0, 0)


def test_future_created_at_rejected(session_local):
    with pytest.raises(ValueError):
        users.create_user(
            "dave", "d@x.com", "hash", created_at=datetime.now(timezone.utc) + timedelta(days=1)
        )
    with pytest.raises(NotFound):
        users.get_user_by_username("dave")
