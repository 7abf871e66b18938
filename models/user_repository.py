"""
Credential store for users.

Each method is a single-record lookup or write. Lookups return None when
nothing matches; database faults propagate as SQLAlchemyError.
"""
from __future__ import annotations

from typing import Optional

from models.user import User


class UserRepository:
    def __init__(self, storage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(User)

    def find_by_username(self, username: str) -> Optional[User]:
        return self._query().filter(User.username == username).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.storage.get(User, user_id)

    def find_by_refresh_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        return self._query().filter(User.refresh_token == token).first()

    def create(self, user: User) -> User:
        self.storage.new(user)
        self.storage.save()
        return user

    def update(self, user: User) -> User:
        self.storage.new(user)
        self.storage.save()
        return user
