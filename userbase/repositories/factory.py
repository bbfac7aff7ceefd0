from userbase.repositories.base import UserRepository


def get_user_repository() -> UserRepository:
    from userbase.db import get_connection
    from userbase.repositories.sqlalchemy import SQLAlchemyUserRepository

    return SQLAlchemyUserRepository(get_connection())
