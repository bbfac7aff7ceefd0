import pytest
from sqlalchemy import Connection

from userbase.repositories.sqlalchemy import SQLAlchemyUserRepository


@pytest.fixture()
def user_repo(db_connection: Connection) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_connection)
