from dataclasses import dataclass
from typing import Any

from jose import JWTError, jwt


class AuthenticationError(Exception):
    """Raised when the caller identity cannot be resolved."""


@dataclass(frozen=True)
class Identity:
    """The authenticated caller."""

    user_id: str
    email: str


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify a bearer token and return its claims.

    Raises:
        AuthenticationError: if the token is malformed, expired or badly signed.
    """
    if not secret:
        raise AuthenticationError("Authentication is not configured")
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        raise AuthenticationError("Invalid token") from exc
