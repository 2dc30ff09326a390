from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..roster.model import Attendee


@dataclass(frozen=True)
class Principal:
    """Authenticated identity yielded by the auth provider (opaque uid + email)."""

    uid: str
    email: str


@dataclass(frozen=True)
class Credential:
    uid: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: User profile.

    ``role`` never changes after creation; ``student_id`` is set iff role is student.
    """

    uid: str
    email: str
    role: Role
    student_id: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class ResolvedIdentity:
    principal: Principal
    profile: UserProfile
    student: Optional[Attendee] = None

    @property
    def role(self) -> Role:
        return self.profile.role
