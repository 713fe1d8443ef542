"""Configurable fake identity provider for development and testing.

Holds accounts in memory, locks an email out after repeated wrong
passwords, and can be forced to fail with a given error code.
"""

import re
from uuid import uuid4

from identity.provider.port import AuthenticationFailed, AuthErrorCode, AuthSession, IdentityProvider

MAX_FAILED_ATTEMPTS = 5

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class FakeIdentityProvider(IdentityProvider):
    """In-memory identity provider."""

    def __init__(self) -> None:
        self.accounts: dict[str, dict] = {}
        self.failed_attempts: dict[str, int] = {}
        self.forced_failure: AuthErrorCode | None = None
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_code: AuthErrorCode = AuthErrorCode.UNKNOWN) -> None:
        """Force every authentication to fail with ``failure_code``, or stop forcing."""
        self.forced_failure = None if should_succeed else failure_code

    def add_account(self, email: str, password: str, user_id: str | None = None, disabled: bool = False) -> str:
        user_id = user_id or str(uuid4())
        self.accounts[email.lower()] = {
            "user_id": user_id,
            "password": password,
            "disabled": disabled,
        }
        return user_id

    def authenticate(self, email: str, password: str) -> AuthSession:
        self.calls.append({"method": "authenticate", "email": email})

        if self.forced_failure is not None:
            raise AuthenticationFailed(self.forced_failure)
        if not _EMAIL_PATTERN.match(email or ""):
            raise AuthenticationFailed(AuthErrorCode.INVALID_EMAIL)

        key = email.lower()
        if self.failed_attempts.get(key, 0) >= MAX_FAILED_ATTEMPTS:
            raise AuthenticationFailed(AuthErrorCode.RATE_LIMITED)

        account = self.accounts.get(key)
        if account is None:
            raise AuthenticationFailed(AuthErrorCode.UNKNOWN_ACCOUNT)
        if account["disabled"]:
            raise AuthenticationFailed(AuthErrorCode.ACCOUNT_DISABLED)
        if account["password"] != password:
            self.failed_attempts[key] = self.failed_attempts.get(key, 0) + 1
            raise AuthenticationFailed(AuthErrorCode.INVALID_CREDENTIALS)

        self.failed_attempts.pop(key, None)
        return AuthSession(user_id=account["user_id"], token=f"fake-token-{uuid4().hex}")
