from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.errors import Forbidden, Unauthorized
from libs.common.logging import get_logger

logger = get_logger(__name__)

# auto_error=False so a missing header surfaces as 401 rather than 403.
security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> AuthUser:
    """Validate a Supabase JWT (HS256) and return the user it identifies."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},  # Supabase tokens vary in aud
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError) as exc:
        logger.info("Rejected access token: %s", exc)
        raise Unauthorized() from exc


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Resolve the authenticated caller or fail with 401.
    """
    if token is None:
        raise Unauthorized("Not authenticated")
    return decode_access_token(token.credentials)


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Ensure the caller carries the Supabase ``service_role`` claim.
    """
    if not current_user.is_admin:
        raise Forbidden("Admin privileges required")
    return current_user
