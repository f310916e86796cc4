"""API authentication using Supabase access tokens"""
import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from nimathi.services.container import ServiceContainer

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Session:
    """Authenticated caller for one request"""
    user_id: str
    access_token: str


def get_container(request: Request) -> ServiceContainer:
    """Service container attached to the running app"""
    return request.app.state.container


async def require_session(
    user_id: str,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    container: ServiceContainer = Depends(get_container)
) -> Session:
    """
    Verify the bearer token belongs to the user in the path

    Raises:
        HTTPException: 401 when the token is missing, rejected, or for another user
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization token required"
        )

    access_token = credentials.credentials
    auth_user = await container.auth_client.get_user(access_token)

    if auth_user is None or auth_user.id != user_id:
        logger.warning(f"Rejected token {access_token[:10]}... for user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )

    return Session(user_id=user_id, access_token=access_token)


async def optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    container: ServiceContainer = Depends(get_container)
) -> Optional[Session]:
    """Session when a valid token is present, None otherwise"""
    if credentials is None:
        return None

    try:
        auth_user = await container.auth_client.get_user(credentials.credentials)
    except Exception as e:
        logger.warning(f"Could not verify optional token, continuing anonymously: {e}")
        return None

    if auth_user is None:
        return None
    return Session(user_id=auth_user.id, access_token=credentials.credentials)
