from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import ValidationError
from app.core.config import settings
from app.core.database import get_db
from app.schemas.token import Actor, TokenPayload

__all__ = ["get_db", "get_current_actor", "get_optional_actor", "resolve_actor"]

# auto_error=False so a missing header surfaces as 401 rather than HTTPBearer's 403
http_bearer = HTTPBearer(auto_error=False)

def resolve_actor(token: str) -> Actor:
    """Verify a token issued by the identity provider and return its actor."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        token_data = TokenPayload(**payload)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    if not token_data.sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return Actor(id=token_data.sub)

def get_current_actor(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> Actor:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    actor = resolve_actor(credentials.credentials)
    request.state.actor_id = actor.id
    return actor

def get_optional_actor(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> Optional[Actor]:
    """Public reads treat a missing or unusable token as an anonymous caller."""
    if credentials is None:
        return None
    try:
        actor = resolve_actor(credentials.credentials)
    except HTTPException:
        return None
    request.state.actor_id = actor.id
    return actor
