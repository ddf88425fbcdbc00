from specsheets.auth.exceptions import AuthenticationError, AuthError, AuthorizationError
from specsheets.auth.gate import AccessGate
from specsheets.auth.models import Session, User
from specsheets.auth.providers import BaseAuthProvider, PasswordAuthProvider

__all__ = [
    "AccessGate",
    "AuthError",
    "AuthenticationError",
    "AuthorizationError",
    "BaseAuthProvider",
    "PasswordAuthProvider",
    "Session",
    "User",
]
