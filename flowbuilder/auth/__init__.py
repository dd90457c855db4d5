"""Identity/session handling."""

from flowbuilder.auth.auth_session import AuthSession, IdentityListener

__all__ = ["AuthSession", "IdentityListener"]
