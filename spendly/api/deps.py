# spendly/api/deps.py
import logging
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.core.auth import verify_token
from spendly.core.database import get_async_session
from spendly.core.errors import TokenExpired, TokenInvalid, Unauthorized
from spendly.core.identity import CallerIdentity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

def extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise Unauthorized("No token provided, authorization denied")

    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized("No token provided, authorization denied")
    return token

async def get_caller(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
) -> CallerIdentity:
    """
    Gate for every protected route.

    Resolves the bearer token to a CallerIdentity. Expired and invalid tokens
    map to distinct codes so clients know whether to ask for a new login.
    """
    token = extract_bearer_token(request)

    try:
        user = await verify_token(token, db)
    except TokenExpired:
        logger.warning(f"Expired token on {request.method} {request.url.path}")
        raise Unauthorized("Token expired", code="TOKEN_EXPIRED")
    except TokenInvalid as e:
        logger.warning(f"Invalid token on {request.method} {request.url.path}: {str(e)}")
        raise Unauthorized("Invalid token", code="INVALID_TOKEN")

    return CallerIdentity(user_id=user.id, user=user)
