"""
Auth Session — who is signed in, and who needs to know when that changes.

Owns the session token (held on the shared ``APIService``) and the
current ``User``. Components that cache per-user data register an
identity listener; login, registration, and logout always notify every
listener so per-user caches can be wiped before the next user's data
arrives.
"""

from __future__ import annotations

from logging import getLogger
from typing import Callable, List, Optional

from flowbuilder.api.auth_api import AuthAPI
from flowbuilder.api.client import APIService
from flowbuilder.workflow.workflow_model import User

logger = getLogger(__name__)

IdentityListener = Callable[[Optional[User]], None]


class AuthSession:
    """Identity state plus an owned identity-change channel."""

    def __init__(self, service: APIService, api: Optional[AuthAPI] = None) -> None:
        self._service = service
        self._api = api or AuthAPI(service)
        self._listeners: List[IdentityListener] = []
        self.user: Optional[User] = None
        self.loading: bool = False
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # ── Listeners ──

    def add_identity_listener(self, listener: IdentityListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_identity_listener(self, listener: IdentityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        who = self.user.email if self.user else None
        logger.info(f"Identity changed: {who!r}")
        for listener in list(self._listeners):
            listener(self.user)

    # ── Operations ──

    async def login(self, email: str, password: str) -> User:
        """Sign in and notify listeners.

        Raises:
            APIError: If the service rejects the credentials.
        """
        self.loading = True
        self.error = None
        try:
            response = await self._api.login(email, password)
        except Exception as e:
            self.loading = False
            self.error = getattr(e, "message", None) or str(e) or "Login failed"
            raise
        self._service.set_token(response.access_token)
        self.user = response.user
        self.loading = False
        self._notify()
        return response.user

    async def register(self, email: str, password: str) -> User:
        """Create an account, sign in as it, and notify listeners."""
        self.loading = True
        self.error = None
        try:
            response = await self._api.register(email, password)
        except Exception as e:
            self.loading = False
            self.error = getattr(e, "message", None) or str(e) or "Registration failed"
            raise
        self._service.set_token(response.access_token)
        self.user = response.user
        self.loading = False
        self._notify()
        return response.user

    async def verify(self) -> Optional[User]:
        """Restore a session from the held token.

        An invalid or unverifiable token is dropped, signing out any
        user held. Listeners are notified only when the resulting user
        differs from the one already held.
        """
        if not self._service.token:
            self.loading = False
            return None

        self.loading = True
        previous = self.user
        try:
            response = await self._api.verify_token()
        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            response = None

        self.loading = False
        if response is None or not response.valid or response.user is None:
            self._service.clear_token()
            if previous is not None:
                self.user = None
                self._notify()
            return None

        self.user = response.user
        if previous is None or previous.id != self.user.id:
            self._notify()
        return self.user

    def logout(self) -> None:
        """Drop the token and user, then notify listeners."""
        self._service.clear_token()
        self.user = None
        self.loading = False
        self.error = None
        self._notify()

    def clear_error(self) -> None:
        self.error = None
