class AuthError(Exception):
    """Base exception for access-gate errors."""


class AuthenticationError(AuthError):
    """Raised when credentials are rejected."""


class AuthorizationError(AuthError):
    """Raised when a mutation is attempted without a valid session."""
