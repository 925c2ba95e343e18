"""Per-request authentication context."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.errors import ValidationError


@dataclass(frozen=True)
class AuthContext:
    """Who is asking and with which credentials.

    ``credentials`` is a ``google.oauth2.credentials.Credentials`` instance obtained by
    the transport layer after the OAuth handshake. ``demo`` selects the fixture
    assignment set instead of the classroom service.
    """

    owner_email: str
    credentials: Optional[Any] = None
    demo: bool = False

    def __post_init__(self) -> None:
        if not (self.owner_email or "").strip():
            raise ValidationError("owner_email is required")

    @classmethod
    def from_access_token(cls, owner_email: str, access_token: str) -> "AuthContext":
        from google.oauth2.credentials import Credentials

        return cls(owner_email=owner_email, credentials=Credentials(token=access_token))


__all__ = ["AuthContext"]
