from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import timestamp
from ..common.validators import require_email, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, DuplicateEmailError, NotFoundError, StoreError
from ..roster.model import Attendee
from ..roster.repository import AttendeeRepository
from ..roster.service import RosterService
from .auth import PasswordAuthProvider
from .model import Principal, ResolvedIdentity, UserProfile
from .repository import UserProfileRepository

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Map an authenticated principal to a role and, for students, a roster entry."""

    def __init__(self, profiles: UserProfileRepository, attendees: AttendeeRepository):
        self._profiles = profiles
        self._attendees = attendees

    def resolve(self, principal: Optional[Principal]) -> Optional[ResolvedIdentity]:
        """Return the identity, or ``None`` when the session must be treated as signed out.

        A student whose roster link is broken keeps the session with ``student=None``.
        Store failures are reported as "no profile", same as a missing profile.
        """
        if principal is None:
            return None

        try:
            profile = self._profiles.get(principal.uid)
            if not profile:
                return None

            student: Optional[Attendee] = None
            if profile.role == Role.STUDENT and profile.student_id:
                student = self._attendees.get(profile.student_id)
                if not student:
                    logger.warning("profile %s links to missing attendee %s", principal.uid, profile.student_id)
        except StoreError as e:
            logger.warning("identity lookup failed for %s: %s", principal.uid, e)
            return None

        return ResolvedIdentity(principal=principal, profile=profile, student=student)


class AccountService:
    """Use case: sign up / sign in as teacher or student."""

    def __init__(
        self,
        provider: PasswordAuthProvider,
        profiles: UserProfileRepository,
        roster: RosterService,
        resolver: IdentityResolver,
    ):
        self._provider = provider
        self._profiles = profiles
        self._roster = roster
        self._resolver = resolver

    def _link_student(self, email: str) -> Attendee:
        """Find the active attendee holding ``email`` or add one named after the local part."""
        attendee = self._roster.find_by_email(email)
        if attendee:
            return attendee
        name = email.split("@")[0] or email
        return self._roster.add(name=name, email=email)

    def _resolved(self, principal: Principal) -> ResolvedIdentity:
        identity = self._resolver.resolve(principal)
        if not identity:
            raise NotFoundError("User profile not found")
        return identity

    def sign_up(self, *, email: str, password: str, role: Role) -> ResolvedIdentity:
        role = Role(role)
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if self._provider.is_registered(email):
            raise DuplicateEmailError("An account with this email already exists. Please log in.")

        if role == Role.STUDENT:
            # link first: an archived e-mail must fail before the account exists
            existing = self._roster.find_by_email(email)
            student = existing or self._link_student(email)
            try:
                principal = self._provider.sign_up(email, password)
            except DomainError:
                if existing is None:
                    self._roster.discard(student.attendee_id)
                raise
            profile = UserProfile(
                uid=principal.uid,
                email=principal.email,
                role=Role.STUDENT,
                student_id=student.attendee_id,
                created_at=timestamp(),
            )
        else:
            principal = self._provider.sign_up(email, password)
            profile = UserProfile(uid=principal.uid, email=principal.email, role=Role.TEACHER, created_at=timestamp())

        self._profiles.save(profile)
        logger.info("%s account %s signed up", role.value, principal.uid)
        return self._resolved(principal)

    def sign_in(self, *, email: str, password: str, role: Role) -> ResolvedIdentity:
        role = Role(role)
        principal = self._provider.sign_in(email, password)
        profile = self._profiles.get(principal.uid)

        if role == Role.STUDENT:
            if profile and profile.role == Role.TEACHER:
                raise AuthorizationError("This account does not have student permissions.")

            if not profile or not profile.student_id:
                student = self._link_student(principal.email)
                self._profiles.save(
                    UserProfile(
                        uid=principal.uid,
                        email=principal.email,
                        role=Role.STUDENT,
                        student_id=student.attendee_id,
                        created_at=profile.created_at if profile and profile.created_at else timestamp(),
                    )
                )
                logger.info("student profile %s relinked to attendee %s", principal.uid, student.attendee_id)
        else:
            if not profile or profile.role != Role.TEACHER:
                raise AuthorizationError("This account does not have teacher permissions.")

        return self._resolved(principal)
