"""Access gate deciding who may mutate the document store."""

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import SecretStr

from specsheets.auth.exceptions import AuthorizationError
from specsheets.auth.models import Session, User
from specsheets.auth.providers import BaseAuthProvider
from specsheets.logging.logger import Log

AuthListener = Callable[[bool], None]

_ALGORITHM = "HS256"


class AccessGate:
    """Issues signed sessions for authenticated admins and verifies them.

    The gate also tracks the most recent session so that ``current_user`` and
    ``is_authenticated`` answer for the interactive admin, and notifies
    listeners whenever that state flips.
    """

    def __init__(
        self,
        provider: BaseAuthProvider,
        secret: SecretStr,
        ttl_seconds: int = 8 * 60 * 60,
    ) -> None:
        self._provider = provider
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._session: Session | None = None
        # jti -> expiry of signed-out tokens still inside their lifetime
        self._revoked: dict[str, datetime] = {}
        self._listeners: list[AuthListener] = []

    def sign_in(self, email: str, password: str) -> Session:
        """Authenticate and open a new session.

        Raises:
            AuthenticationError: if the provider rejects the credentials.
        """
        user = self._provider.authenticate(email, password)
        if self._session is not None:
            self._revoke(self._session)
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + self._ttl
        token = jwt.encode(
            {
                "sub": user.id,
                "email": user.email,
                "jti": uuid.uuid4().hex,
                "iat": issued_at,
                "exp": expires_at,
            },
            self._secret.get_secret_value(),
            algorithm=_ALGORITHM,
        )
        self._session = Session(user=user, token=token, expires_at=expires_at)
        Log.info(f"Admin {user.email} signed in")
        self._notify(True)
        return self._session

    def sign_out(self) -> None:
        """Close the current session; its token stops verifying."""
        if self._session is None:
            return
        self._revoke(self._session)
        Log.info(f"Admin {self._session.user.email} signed out")
        self._session = None
        self._notify(False)

    def current_user(self) -> User | None:
        session = self._session
        if session is None or not self.is_authenticated():
            return None
        return session.user

    def is_authenticated(self) -> bool:
        if self._session is None:
            return False
        try:
            self.verify(self._session)
        except AuthorizationError:
            return False
        return True

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def verify(self, session: Session | None) -> User:
        """Return the session's user if its token is valid and not signed out.

        Raises:
            AuthorizationError: for a missing, expired, tampered or revoked session.
        """
        if session is None:
            raise AuthorizationError("Authentication required")
        claims = self._decode(session.token, verify_exp=True)
        if claims["jti"] in self._revoked:
            raise AuthorizationError("Session has been signed out")
        return User(id=claims["sub"], email=claims["email"])

    def _revoke(self, session: Session) -> None:
        """Revoke ``session`` and forget revoked tokens that have expired anyway."""
        now = datetime.now(timezone.utc)
        self._revoked = {
            jti: expires_at for jti, expires_at in self._revoked.items() if expires_at > now
        }
        claims = self._decode(session.token, verify_exp=False)
        self._revoked[claims["jti"]] = session.expires_at

    def _decode(self, token: str, verify_exp: bool) -> dict[str, str]:
        try:
            return jwt.decode(
                token,
                self._secret.get_secret_value(),
                algorithms=[_ALGORITHM],
                options={
                    "verify_exp": verify_exp,
                    "require": ["sub", "email", "jti", "exp"],
                },
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthorizationError("Session has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthorizationError(f"Invalid session token: {exc}") from exc

    def _notify(self, authenticated: bool) -> None:
        for listener in list(self._listeners):
            listener(authenticated)
