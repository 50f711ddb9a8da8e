import logging
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from datavault.config import settings
from datavault.core.errors import Unauthenticated
from datavault.database import get_db
from datavault.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expires_delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.utcnow() + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def resolve_user_id(token: str | None) -> UUID:
    """Map a bearer credential to a user id or raise Unauthenticated."""
    if not token:
        raise Unauthenticated("No token, authorization denied")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError):
        raise Unauthenticated("Token is not valid")


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    x_auth_token: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    # the web client sends the JWT in x-auth-token
    user_id = resolve_user_id(token or x_auth_token)
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.info(f"Token for unknown user {user_id} rejected")
        raise Unauthenticated("Token is not valid")
    return user
