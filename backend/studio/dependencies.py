"""
EdAiVi Studio Backend: Request Dependencies
===========================================

What:  FastAPI dependencies that resolve the authenticated caller.
How:   `HTTPBearer(auto_error=False)` extracts the token so that a missing
       header becomes our own AuthenticationError (401 JSON) instead of
       FastAPI's default 403.
Who:   Every protected route declares `user: CurrentUser`.
"""

import logging
from typing import Annotated, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studio.database import Store, get_store
from studio.exceptions import AuthenticationError
from studio.models import User
from studio.security import decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

StoreDep = Annotated[Store, Depends(get_store)]


async def resolve_token(token: str, store: Store) -> User:
    """
    Map a raw session token to its user.

    Raises:
        AuthenticationError: expired, invalid, or pointing at an unknown user
    """
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired, please log in again", context={"reason": "token_expired"})
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid authentication token", context={"reason": "token_invalid"})

    user = await store.users.find_by_id(payload["sub"])
    if user is None:
        logger.info("Token for unknown user %s rejected", payload["sub"])
        raise AuthenticationError("Invalid authentication token", context={"reason": "user_not_found"})
    return user


async def get_current_user(
    store: StoreDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(context={"reason": "missing_token"})
    return await resolve_token(credentials.credentials, store)


CurrentUser = Annotated[User, Depends(get_current_user)]

