"""Identity provider port (abstract interface).

The core only needs a user id to scope carts and orders, so the contract is
a single call: exchange an email and password for an AuthSession. Failures
surface as AuthenticationFailed carrying one of a small set of codes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from shared.errors import UpstreamFailure


class AuthErrorCode(Enum):
    INVALID_EMAIL = "invalid-email"
    ACCOUNT_DISABLED = "user-disabled"
    UNKNOWN_ACCOUNT = "user-not-found"
    INVALID_CREDENTIALS = "wrong-password"
    RATE_LIMITED = "too-many-requests"
    UNKNOWN = "unknown"


_MESSAGES = {
    AuthErrorCode.INVALID_EMAIL: "Invalid email address",
    AuthErrorCode.ACCOUNT_DISABLED: "This account has been disabled",
    AuthErrorCode.UNKNOWN_ACCOUNT: "No account found with this email",
    AuthErrorCode.INVALID_CREDENTIALS: "Incorrect password",
    AuthErrorCode.RATE_LIMITED: "Too many failed attempts. Please try again later",
}


def message_for(code: AuthErrorCode) -> str:
    """User-facing message for an authentication failure."""
    return _MESSAGES.get(code, "An error occurred. Please try again")


class AuthenticationFailed(UpstreamFailure):
    def __init__(self, code: AuthErrorCode):
        super().__init__(message_for(code), source="identity")
        self.code = code


@dataclass(frozen=True)
class AuthSession:
    """Who is signed in. Credential details never leave the provider."""

    user_id: str
    token: str


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def authenticate(self, email: str, password: str) -> AuthSession:
        """Return a session, or raise AuthenticationFailed."""
        ...
