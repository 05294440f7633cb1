"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from futuremedia.core.caller import ANONYMOUS, Caller
from futuremedia.core.errors import UnauthorizedError
from futuremedia.core.security import decode_access_token
from futuremedia.db.session import get_db
from futuremedia.models import User

# Missing credentials are allowed through; services decide whether they need a caller.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Caller:
    """Resolve the request identity from an optional bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if sent
        db: Database session

    Returns:
        The authenticated Caller, or the anonymous one when no token is sent

    Raises:
        UnauthorizedError: If a token is sent but is invalid or names an unknown user
    """
    if credentials is None:
        return ANONYMOUS

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise UnauthorizedError("Could not validate credentials")
    if db.get(User, user_id) is None:
        raise UnauthorizedError("User not found")
    return Caller(user_id=user_id)


# Type alias for caller dependency
CallerDep = Annotated[Caller, Depends(get_caller)]
