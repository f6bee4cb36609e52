"""
Bearer token handling.

Accounts and sign-in belong to the account service; this service only turns
an HS256 token into a user id. ``issue_token`` mints the same tokens for
tests and local tooling.
"""

import os
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt

SECRET_KEY = os.environ.get("COMICSTOP_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(hours=24)


def issue_token(
    user_id: UUID,
    *,
    ttl: timedelta = DEFAULT_TOKEN_TTL,
    now: datetime | None = None,
    secret: str = SECRET_KEY,
) -> str:
    issued_at = now if now is not None else datetime.now(UTC)
    claims = {"sub": str(user_id), "iat": issued_at, "exp": issued_at + ttl}
    token: str = jwt.encode(claims, secret, algorithm=ALGORITHM)
    return token


def user_id_from_token(token: str, secret: str = SECRET_KEY) -> UUID | None:
    """Return the ``sub`` claim as a user id; None for expired, forged or malformed tokens."""
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None

    subject = claims.get("sub")
    if not isinstance(subject, str):
        return None
    try:
        return UUID(subject)
    except ValueError:
        return None
