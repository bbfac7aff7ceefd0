from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError

from userbase.models.user import PUBLIC_FIELDS, PublicUser, User
from userbase.repositories.base import UserRepository

_PUBLIC_COLUMNS = ", ".join(PUBLIC_FIELDS)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_public(row: RowMapping) -> PublicUser:
        return PublicUser(**{field: row[field] for field in PUBLIC_FIELDS})

    def _write(self, sql: str, params: dict):
        try:
            result = self.conn.execute(text(sql), params)
            self.conn.commit()
        except SQLAlchemyError:
            self.conn.rollback()
            raise
        return result

    def create(self, user: User) -> User:
        now = _now()
        result = self._write(
            "INSERT INTO users (name, username, email, password_hash, created_at, updated_at) "
            "VALUES (:name, :username, :email, :password_hash, :created_at, :updated_at)",
            {
                "name": user.name,
                "username": user.username,
                "email": user.email,
                "password_hash": user.password_hash,
                "created_at": now,
                "updated_at": now,
            },
        )
        created = self.get_by_id(result.lastrowid)
        if created is None:
            raise RuntimeError(f"Failed to retrieve user after create (username={user.username})")
        return created

    def get_by_id(self, user_id: int) -> User | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM users WHERE id = :id"),
                {"id": user_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_user(row)

    def find_conflict(self, email: str, username: str, exclude_id: int | None = None) -> User | None:
        sql = "SELECT * FROM users WHERE (email = :email OR username = :username)"
        params: dict = {"email": email, "username": username}
        if exclude_id is not None:
            sql += " AND id != :exclude_id"
            params["exclude_id"] = exclude_id
        row = self.conn.execute(text(sql + " ORDER BY id LIMIT 1"), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def list_all(self) -> list[PublicUser]:
        rows = self.conn.execute(text(f"SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY id DESC")).mappings().fetchall()
        return [self._row_to_public(row) for row in rows]

    def update(self, user: User) -> User:
        self._write(
            "UPDATE users SET name = :name, username = :username, email = :email, "
            "password_hash = :password_hash, updated_at = :updated_at WHERE id = :id",
            {
                "name": user.name,
                "username": user.username,
                "email": user.email,
                "password_hash": user.password_hash,
                "updated_at": _now(),
                "id": user.id,
            },
        )
        updated = self.get_by_id(user.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve user after update (id={user.id})")
        return updated

    def delete(self, user_id: int) -> None:
        self._write("DELETE FROM users WHERE id = :id", {"id": user_id})
