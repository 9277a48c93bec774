"""FastAPI dependencies."""
import logging
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.config import get_settings
from alumni_backend.database import get_db
from alumni_backend.models.alumni import Alumni
from alumni_backend.services.auth_service import AuthService, AuthError

logger = logging.getLogger(__name__)

settings = get_settings()


def _mask_identifier(identifier: str) -> str:
    """Mask a sensitive identifier for logging (e.g., alumni_id, token)."""
    if not identifier:
        return "<missing>"
    if len(identifier) <= 8:
        return f"{identifier[:2]}...{identifier[-2:]}"
    return f"{identifier[:4]}...{identifier[-4:]}"


async def get_current_alumni(
        request: Request,
        authorization: str | None = Header(default=None, alias="Authorization"),
        db: AsyncSession = Depends(get_db),
) -> Alumni:
    """Resolve the current authenticated alumni via JWT access token.

    Checks for access token in the following order:
    1. HTTP-only cookie
    2. Authorization header (API clients)
    """
    token = request.cookies.get(settings.access_token_cookie_name)
    token_source = "cookie"

    if not token and authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(status_code=401, detail="invalid_authorization_header")
        token_source = "header"

    if not token:
        raise HTTPException(status_code=401, detail="missing_credentials")

    try:
        payload = AuthService().decode_access_token(token)
        alumni_id = UUID(str(payload.get("sub")))
    except (ValueError, AuthError) as exc:
        detail = "token_expired" if isinstance(exc, AuthError) and str(exc) == "token_expired" else "invalid_token"
        raise HTTPException(status_code=401, detail=detail) from exc

    alumni = await db.get(Alumni, alumni_id)
    if not alumni:
        logger.warning(f"Token for unknown alumni {_mask_identifier(str(alumni_id))}")
        raise HTTPException(status_code=401, detail="invalid_token")

    logger.debug(f"Authenticated alumni via JWT {token_source}: {alumni.alumni_id}")
    return alumni


async def get_admin_alumni(
    alumni: Alumni = Depends(get_current_alumni),
) -> Alumni:
    """Verify that the current authenticated alumni is an admin.

    Raises:
        HTTPException: 403 if the alumni's email is not in ``admin_emails``
    """
    if not settings.is_admin_email(alumni.email):
        logger.warning(f"Access denied to admin endpoint for non-admin alumni: {alumni.email}")
        raise HTTPException(status_code=403, detail="admin_access_required")

    logger.debug(f"Admin access granted to: {alumni.email}")
    return alumni
