"""
Security utilities for relay JWT credentials
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from durmah.core.config import settings
from durmah.core.errors import AuthenticationError
from jose import ExpiredSignatureError, JWTError, jwt


@dataclass(frozen=True)
class TokenClaims:
    """Verified credential contents the relay cares about."""

    user_id: str
    expires_at: Optional[int] = None


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    secret: Optional[str] = None,
    algorithm: Optional[str] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a JWT access token for the relay handshake

    Args:
        user_id: Subject identifier, written to both `id` and `sub`
        expires_delta: Optional custom expiration time
        secret: Signing key (defaults to JWT_SECRET)
        algorithm: Signing algorithm (defaults to JWT_ALGORITHM)
        extra_claims: Additional payload fields (e.g. email)

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update(
        {
            "id": user_id,
            "sub": user_id,
            "iat": now,
            "exp": now + expires_delta,
            "type": "access",
        }
    )

    return jwt.encode(
        to_encode,
        secret or settings.JWT_SECRET,
        algorithm=algorithm or settings.JWT_ALGORITHM,
    )


class TokenVerifier:
    """
    Verifies relay credentials against a shared secret.

    The verifier is handed to the relay at construction so tests (or a
    rotated secret) can swap it without touching global state.
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("TokenVerifier requires a non-empty secret")
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: Optional[str]) -> TokenClaims:
        """
        Decode and validate a credential.

        Raises:
            AuthenticationError: token missing, malformed, expired, badly
                signed, or without a subject identifier
        """
        if not token or not isinstance(token, str):
            raise AuthenticationError("Missing token")

        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token expired") from e
        except JWTError as e:
            raise AuthenticationError("Invalid token") from e

        # `id` is what the login route signs; `sub` covers standard issuers
        user_id = payload.get("id") or payload.get("sub")
        if not user_id:
            raise AuthenticationError("Token has no subject identifier")

        return TokenClaims(user_id=str(user_id), expires_at=payload.get("exp"))


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
