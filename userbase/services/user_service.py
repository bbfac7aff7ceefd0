from __future__ import annotations

import logging
import re

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from userbase.models.envelope import ServiceResult
from userbase.models.user import User, UserCreate, UserUpdate
from userbase.repositories.base import UserRepository
from userbase.settings import settings

logger = logging.getLogger(__name__)

_MAX_ID = 2**63 - 1
_ID_RE = re.compile(r"[0-9]+")

CONFLICT_MESSAGES = {
    "email": "Email is already registered",
    "username": "Username is already taken",
}


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def parse_user_id(raw: int | str) -> int | None:
    """Coerce a path id to an int; anything that cannot name a stored row is None."""
    text = str(raw).strip()
    if not _ID_RE.fullmatch(text):
        return None
    user_id = int(text)
    if not 0 < user_id <= _MAX_ID:
        return None
    return user_id


def conflict_field(existing: User, email: str, username: str) -> str:
    if existing.email == email:
        return "email"
    if existing.username == username:
        return "username"
    return "email"


class UserService:
    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    def list_users(self) -> ServiceResult:
        try:
            users = self.repo.list_all()
        except Exception:
            logger.exception("Error listing users")
            return ServiceResult.internal_error()
        logger.debug("Listed %d users", len(users))
        return ServiceResult.ok("List Data Users", users)

    def create_user(self, payload: UserCreate) -> ServiceResult:
        try:
            existing = self.repo.find_conflict(payload.email, payload.username)
            if existing is not None:
                return self._conflict(conflict_field(existing, payload.email, payload.username))

            user = self.repo.create(
                User(
                    name=payload.name,
                    username=payload.username,
                    email=payload.email,
                    password_hash=hash_password(payload.password),
                )
            )
        except IntegrityError:
            logger.warning("Unique constraint violated creating user: username=%s", payload.username)
            return self._conflict(self._field_after_violation(payload.email, payload.username))
        except Exception:
            logger.exception("Error creating user: username=%s", payload.username)
            return ServiceResult.internal_error()

        logger.info("User created: id=%s username=%s", user.id, user.username)
        return ServiceResult.ok("User created successfully", user.to_public(), status_code=201)

    def get_user(self, user_id: int | str) -> ServiceResult:
        try:
            user = self._find(user_id)
        except Exception:
            logger.exception("Error getting user by id: %s", user_id)
            return ServiceResult.internal_error()
        if user is None:
            return self._not_found(user_id)
        return ServiceResult.ok("User Detail", user.to_public())

    def update_user(self, user_id: int | str, payload: UserUpdate) -> ServiceResult:
        try:
            user = self._find(user_id)
            if user is None:
                return self._not_found(user_id)

            existing = self.repo.find_conflict(payload.email, payload.username, exclude_id=user.id)
            if existing is not None:
                return self._conflict(conflict_field(existing, payload.email, payload.username))

            changes = {"name": payload.name, "username": payload.username, "email": payload.email}
            if payload.password:
                changes["password_hash"] = hash_password(payload.password)
            updated = self.repo.update(user.model_copy(update=changes))
        except IntegrityError:
            logger.warning("Unique constraint violated updating user: id=%s", user_id)
            return self._conflict(self._field_after_violation(payload.email, payload.username, parse_user_id(user_id)))
        except Exception:
            logger.exception("Error updating user by id: %s", user_id)
            return ServiceResult.internal_error()

        logger.info(
            "User updated: id=%s username=%s password_changed=%s",
            updated.id,
            updated.username,
            bool(payload.password),
        )
        return ServiceResult.ok("User updated successfully!", updated.to_public())

    def delete_user(self, user_id: int | str) -> ServiceResult:
        try:
            user = self._find(user_id)
            if user is None:
                return self._not_found(user_id)
            self.repo.delete(user.id)
        except Exception:
            logger.exception("Error deleting user by id: %s", user_id)
            return ServiceResult.internal_error()

        logger.info("User deleted: id=%s username=%s", user.id, user.username)
        return ServiceResult.ok("User deleted successfully!")

    def _find(self, raw_id: int | str) -> User | None:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            return None
        result = self.repo.get_by_id(user_id)
        logger.debug("get_by_id user_id=%s found=%s", user_id, result is not None)
        return result

    def _field_after_violation(self, email: str, username: str, exclude_id: int | None = None) -> str:
        try:
            existing = self.repo.find_conflict(email, username, exclude_id=exclude_id)
        except SQLAlchemyError:
            logger.exception("Error resolving conflicting field")
            return "email"
        if existing is None:
            return "email"
        return conflict_field(existing, email, username)

    @staticmethod
    def _not_found(user_id: int | str) -> ServiceResult:
        logger.warning("User not found: id=%s", user_id)
        return ServiceResult.fail(404, "User not found!")

    @staticmethod
    def _conflict(field: str) -> ServiceResult:
        logger.warning("User conflict on field: %s", field)
        return ServiceResult.fail(409, CONFLICT_MESSAGES[field], {field: "already in use"})
