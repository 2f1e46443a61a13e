"""Bearer token helpers for the trusted identity collaborator."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from crew_deck.core.settings import settings


def create_access_token(principal: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT whose subject is the principal (stable username)."""
    to_encode: dict[str, object] = {"sub": principal}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_principal(token: str) -> str | None:
    """Return the principal carried by ``token`` or None when it is unusable."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
