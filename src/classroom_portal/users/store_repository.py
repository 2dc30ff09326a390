from __future__ import annotations

from typing import Optional

from ..core import constants
from ..core.enums import Role
from ..database.store import DocumentStore, Filter
from .model import Credential, UserProfile
from .repository import CredentialRepository, UserProfileRepository


def _email_key(email: str) -> str:
    return email.strip().lower()


class StoreUserProfileRepository(UserProfileRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, uid: str) -> Optional[UserProfile]:
        data = self._store.get(constants.USERS, uid)
        if data is None:
            return None
        return UserProfile(
            uid=uid,
            email=data.get("email", ""),
            role=Role(data["role"]),
            student_id=data.get("student_id") or None,
            created_at=data.get("created_at"),
        )

    def save(self, profile: UserProfile) -> None:
        payload = {"email": profile.email, "role": profile.role.value, "created_at": profile.created_at}
        if profile.student_id:
            payload["student_id"] = profile.student_id
        self._store.set(constants.USERS, profile.uid, payload, merge=True)


class StoreCredentialRepository(CredentialRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, uid: str) -> Optional[Credential]:
        data = self._store.get(constants.CREDENTIALS, uid)
        if data is None:
            return None
        return Credential(uid=uid, email=data["email"], password_hash=data["password_hash"])

    def find_by_email(self, email: str) -> Optional[Credential]:
        docs = self._store.query(constants.CREDENTIALS, [Filter("email_key", "==", _email_key(email))], limit=1)
        if not docs:
            return None
        d = docs[0]
        return Credential(uid=d.id, email=d.data["email"], password_hash=d.data["password_hash"])

    def create(self, *, email: str, password_hash: str, created_at: str) -> str:
        return self._store.add(
            constants.CREDENTIALS,
            {
                "email": email,
                "email_key": _email_key(email),
                "password_hash": password_hash,
                "created_at": created_at,
            },
        )
