"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from crew_deck.core.security import decode_principal
from crew_deck.db.session import get_db

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> str:
    """Return the principal named by the bearer token.

    The identity collaborator is trusted completely, so there is no user
    table lookup; the token's ``sub`` claim is the principal.

    Raises:
        HTTPException: If the token cannot be decoded or carries no subject
    """
    principal = decode_principal(credentials.credentials)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return principal


# Type alias for current principal dependency
PrincipalDep = Annotated[str, Depends(get_current_principal)]
