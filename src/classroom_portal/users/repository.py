from __future__ import annotations

from typing import Optional, Protocol

from .model import Credential, UserProfile


class UserProfileRepository(Protocol):
    def get(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save(self, profile: UserProfile) -> None:
        raise NotImplementedError


class CredentialRepository(Protocol):
    """Storage for e-mail/password accounts used by ``PasswordAuthProvider``."""

    def get(self, uid: str) -> Optional[Credential]:
        raise NotImplementedError

    def find_by_email(self, email: str) -> Optional[Credential]:
        raise NotImplementedError

    def create(self, *, email: str, password_hash: str, created_at: str) -> str:
        raise NotImplementedError
