from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    id: str
    email: str


@dataclass(frozen=True)
class Session:
    """A signed-in admin session. ``token`` is the signed credential."""

    user: User
    token: str
    expires_at: datetime
