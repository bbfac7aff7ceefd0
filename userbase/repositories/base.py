from abc import ABC, abstractmethod

from userbase.models.user import PublicUser, User


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None: ...

    @abstractmethod
    def find_conflict(self, email: str, username: str, exclude_id: int | None = None) -> User | None:
        """Return any user, other than ``exclude_id``, holding ``email`` or ``username``."""

    @abstractmethod
    def list_all(self) -> list[PublicUser]: ...

    @abstractmethod
    def update(self, user: User) -> User: ...

    @abstractmethod
    def delete(self, user_id: int) -> None: ...
