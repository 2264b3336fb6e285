"""Tests for the credential store shared by setup and bin/seed_admin.py."""
import pytest

from core.credentials import (
    count_active,
    create_admin_user,
    deactivate,
    get_active_user,
    mark_login,
)
from core.errors import Conflict, ValidationError
from core.security import verify_password


def test_create_stores_salted_hash(db):
    user = create_admin_user(db, "admin", "Sup3rSecret!")
    assert user.id is not None
    assert user.is_active is True
    assert user.last_login is None
    assert user.password_hash != "Sup3rSecret!"
    assert verify_password("Sup3rSecret!", user.password_hash, user.salt)


def test_each_user_gets_its_own_salt(db):
    a = create_admin_user(db, "alice", "Sup3rSecret!")
    b = create_admin_user(db, "bob", "Sup3rSecret!")
    assert a.salt != b.salt
    assert a.password_hash != b.password_hash


def test_password_length_boundary(db):
    with pytest.raises(ValidationError):
        create_admin_user(db, "admin", "x" * 7)
    assert create_admin_user(db, "admin", "x" * 8).username == "admin"


def test_duplicate_username_conflicts(db):
    create_admin_user(db, "admin", "Sup3rSecret!")
    with pytest.raises(Conflict):
        create_admin_user(db, "admin", "An0therSecret!")


def test_inactive_users_are_invisible_to_login(db):
    create_admin_user(db, "admin", "Sup3rSecret!")
    assert get_active_user(db, "admin") is not None
    assert count_active(db) == 1

    assert deactivate(db, "admin") is True
    assert get_active_user(db, "admin") is None
    assert count_active(db) == 0


def test_deactivate_unknown_user(db):
    assert deactivate(db, "ghost") is False


def test_mark_login_sets_timestamp(db):
    user = create_admin_user(db, "admin", "Sup3rSecret!")
    mark_login(db, user)
    assert get_active_user(db, "admin").last_login is not None
