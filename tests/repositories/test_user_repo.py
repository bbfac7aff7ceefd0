from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from userbase.models.user import PublicUser, User
from userbase.repositories.sqlalchemy import SQLAlchemyUserRepository


def _user(**overrides) -> User:
    defaults = dict(name="Ann", username="ann1", email="ann@example.com", password_hash="hash123")
    defaults.update(overrides)
    return User(**defaults)


class TestUserRepo:
    def test_create_and_get(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())

        assert created.id is not None
        assert created.username == "ann1"
        assert created.password_hash == "hash123"
        assert created.created_at is not None
        assert created.updated_at is not None

        fetched = user_repo.get_by_id(created.id)
        assert fetched is not None
        assert fetched.email == "ann@example.com"

    def test_get_by_id_not_found(self, user_repo: SQLAlchemyUserRepository):
        assert user_repo.get_by_id(9999) is None

    def test_ids_are_assigned_incrementally(self, user_repo: SQLAlchemyUserRepository):
        first = user_repo.create(_user())
        second = user_repo.create(_user(username="bob", email="bob@example.com"))
        assert second.id > first.id

    def test_list_all_orders_by_id_desc(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        user_repo.create(_user(username="bob", email="bob@example.com"))
        user_repo.create(_user(username="cid", email="cid@example.com"))

        users = user_repo.list_all()
        assert [u.username for u in users] == ["cid", "bob", "ann1"]

    def test_list_all_returns_public_projection(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        users = user_repo.list_all()
        assert type(users[0]) is PublicUser
        assert not hasattr(users[0], "password_hash")

    def test_list_all_empty(self, user_repo: SQLAlchemyUserRepository):
        assert user_repo.list_all() == []

    def test_find_conflict_by_email(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())
        found = user_repo.find_conflict("ann@example.com", "someone-else")
        assert found is not None
        assert found.id == created.id

    def test_find_conflict_by_username(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        found = user_repo.find_conflict("other@example.com", "ann1")
        assert found is not None
        assert found.username == "ann1"

    def test_find_conflict_none(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        assert user_repo.find_conflict("other@example.com", "other") is None

    def test_find_conflict_excludes_target(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())
        assert user_repo.find_conflict("ann@example.com", "ann1", exclude_id=created.id) is None

    def test_update(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())
        updated = user_repo.update(created.model_copy(update={"name": "Annie", "password_hash": "new_hash"}))

        assert updated.id == created.id
        assert updated.name == "Annie"
        assert updated.password_hash == "new_hash"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_update_unique_violation_rolls_back(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        bob = user_repo.create(_user(username="bob", email="bob@example.com"))

        with pytest.raises(IntegrityError):
            user_repo.update(bob.model_copy(update={"email": "ann@example.com"}))

        # Connection is still usable after the failed write.
        assert user_repo.get_by_id(bob.id).email == "bob@example.com"

    def test_create_duplicate_username_raises(self, user_repo: SQLAlchemyUserRepository):
        user_repo.create(_user())
        with pytest.raises(IntegrityError):
            user_repo.create(_user(email="different@example.com"))
        assert len(user_repo.list_all()) == 1

    def test_delete(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())
        user_repo.delete(created.id)
        assert user_repo.get_by_id(created.id) is None

    def test_create_runtime_error(self, user_repo: SQLAlchemyUserRepository):
        with patch.object(user_repo, "get_by_id", return_value=None):
            with pytest.raises(RuntimeError, match="Failed to retrieve user after create"):
                user_repo.create(_user())

    def test_update_runtime_error(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(_user())
        with patch.object(user_repo, "get_by_id", return_value=None):
            with pytest.raises(RuntimeError, match="Failed to retrieve user after update"):
                user_repo.update(created)
