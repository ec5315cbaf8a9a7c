from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from karibu.core.config import settings
from karibu.core.exceptions import Forbidden, Unauthenticated
from karibu.core.security import decode_access_token
from karibu.core.store import RecordStore
from karibu.dependencies.store import get_store
from karibu.models.user import User, UserRole

# 1. SETUP OAUTH2
# auto_error is off so a missing token goes through our own 401 envelope
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)

# 2. GET CURRENT USER (Base Dependency)
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    store: RecordStore = Depends(get_store),
) -> User:
    if not token:
        raise Unauthenticated("Not authorized, no token")

    email = decode_access_token(token)
    if email is None:
        raise Unauthenticated("Not authorized, token failed")

    user = await store.find_user_by_email(email)
    if user is None:
        raise Unauthenticated("Not authorized, user no longer exists")

    return user

# 3. ROLE GUARD
def require_roles(*roles: UserRole) -> Callable:
    """
    Builds a dependency that lets through only the given roles.
    The resolved user is returned so the handler can record it as `recordedBy`.
    """
    allowed = {r.value for r in roles}

    async def guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise Forbidden(f"User role '{current_user.role}' is not authorized to access this route")
        return current_user

    return guard

get_manager = require_roles(UserRole.MANAGER)
get_sales_staff = require_roles(UserRole.SALES_AGENT, UserRole.MANAGER)
