import hmac
from abc import ABC, abstractmethod

from pydantic import SecretStr

from specsheets.auth.exceptions import AuthenticationError
from specsheets.auth.models import User


class BaseAuthProvider(ABC):
    """Contract for credential checks behind the access gate."""

    @abstractmethod
    def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials.

        Raises:
            AuthenticationError: if the credentials are rejected.
        """


class PasswordAuthProvider(BaseAuthProvider):
    """Single admin account guarded by a configured shared password.

    Stand-in for a real identity provider; any email is accepted as long as
    the password matches.
    """

    ADMIN_USER_ID = "1"

    def __init__(self, admin_email: str, admin_password: SecretStr) -> None:
        self._admin_email = admin_email
        self._admin_password = admin_password

    def authenticate(self, email: str, password: str) -> User:
        expected = self._admin_password.get_secret_value().encode()
        if not expected or not hmac.compare_digest(password.encode(), expected):
            raise AuthenticationError("Invalid login credentials")
        return User(id=self.ADMIN_USER_ID, email=email or self._admin_email)
