"""Explicit request identity handed to service functions."""
from __future__ import annotations

from dataclasses import dataclass

from futuremedia.core.errors import UnauthorizedError


@dataclass(frozen=True)
class Caller:
    """Who is making the current request.

    Built once per request by the API layer and passed down; services never
    look up the session themselves.
    """

    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require(self) -> str:
        """Return the caller's user id or raise UnauthorizedError."""
        if self.user_id is None:
            raise UnauthorizedError("User not authenticated")
        return self.user_id


ANONYMOUS = Caller()
