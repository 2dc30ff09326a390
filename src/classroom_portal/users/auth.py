from __future__ import annotations

import logging
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import timestamp
from ..common.validators import require_email, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, DuplicateEmailError
from .model import Principal
from .repository import CredentialRepository

logger = logging.getLogger(__name__)


class PasswordAuthProvider:
    """E-mail/password authentication backed by the ``credentials`` collection."""

    def __init__(self, credentials: CredentialRepository):
        self._credentials = credentials

    def is_registered(self, email: str) -> bool:
        return self._credentials.find_by_email(email) is not None

    def sign_up(self, email: str, password: str) -> Principal:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self.is_registered(email):
            raise DuplicateEmailError("An account with this email already exists. Please log in.")

        uid = self._credentials.create(
            email=email,
            password_hash=generate_password_hash(password),
            created_at=timestamp(),
        )
        logger.info("account %s created", uid)
        return Principal(uid=uid, email=email)

    def sign_in(self, email: str, password: str) -> Principal:
        credential = self._credentials.find_by_email(email or "")
        if not credential:
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(credential.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password.")
        return Principal(uid=credential.uid, email=credential.email)

    def get_principal(self, uid: str) -> Optional[Principal]:
        credential = self._credentials.get(uid)
        if not credential:
            return None
        return Principal(uid=credential.uid, email=credential.email)


class AuthSession:
    """Client-side holder of the signed-in principal.

    ``on_change`` subscribers receive the current principal (or ``None``)
    right away and again on every sign-in, sign-up and sign-out.
    """

    def __init__(self, provider: PasswordAuthProvider):
        self._provider = provider
        self._current: Optional[Principal] = None
        self._listeners: list[Callable[[Optional[Principal]], None]] = []

    @property
    def current(self) -> Optional[Principal]:
        return self._current

    def on_change(self, callback: Callable[[Optional[Principal]], None]) -> Callable[[], None]:
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set(self, principal: Optional[Principal]) -> None:
        self._current = principal
        for callback in list(self._listeners):
            callback(principal)

    def sign_up(self, email: str, password: str) -> Principal:
        principal = self._provider.sign_up(email, password)
        self._set(principal)
        return principal

    def sign_in(self, email: str, password: str) -> Principal:
        principal = self._provider.sign_in(email, password)
        self._set(principal)
        return principal

    def sign_out(self) -> None:
        self._set(None)
