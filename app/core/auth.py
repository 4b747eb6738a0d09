"""Optional identity: read the user id from a bearer JWT, else fall back to the anonymous sentinel."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import Settings

security = HTTPBearer(auto_error=False)


def decode_token(token: str, secret: str, algorithm: str) -> str | None:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None
    sub = payload.get("sub")
    return str(sub) if sub else None


def resolve_user_id(token: str | None, settings: Settings) -> str:
    """Never fails: anything but a valid token with a subject resolves to the anonymous id."""
    if not token:
        return settings.anonymous_user_id
    user_id = decode_token(token, settings.jwt_secret, settings.jwt_algorithm)
    return user_id or settings.anonymous_user_id


async def get_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    token = credentials.credentials if credentials else None
    return resolve_user_id(token, request.app.state.settings)
