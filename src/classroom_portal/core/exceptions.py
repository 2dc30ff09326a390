class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateEmailError(ValidationError):
    """Raised when an e-mail is already held by an active or archived attendee or account."""


class NotFoundError(DomainError):
    """Raised when a profile, attendee, assignment or document does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action (wrong role)."""


class StoreError(DomainError):
    """Raised when the document store backend fails (network, driver, ...)."""
