from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import logging

from datavault.config import settings
from datavault.core.errors import RateLimited, StoreError, Unauthenticated, ValidationError
from datavault.core.limits import SimpleRateLimiter, login_key
from datavault.database import get_db
from datavault.models.user import User
from datavault.schemas.user import TokenResponse, UserCreate, UserOut
from datavault.utils.auth import create_access_token, get_current_user
from datavault.utils.identifiers import generate_wallet_address
from datavault.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])

login_limiter = SimpleRateLimiter(
    limit=settings.LOGIN_RATE_LIMIT, window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS
)


@router.post("/register", response_model=TokenResponse)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    email = user.email.lower()

    # 1. Check if email already exists
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ValidationError("User already exists")

    # 2. Create new user, generating a wallet address when none was given
    new_user = User(
        name=user.name,
        email=email,
        password_hash=hash_password(user.password),
        wallet_address=user.wallet_address or generate_wallet_address(),
    )
    db.add(new_user)

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # lost a race with a concurrent registration of the same email
        if "unique" in str(e.orig).lower():
            raise ValidationError("User already exists")
        logger.error(f"Integrity error: {e}")
        raise StoreError() from e

    logger.info(f"Registered user {new_user.id}")
    return TokenResponse(access_token=create_access_token({"sub": str(new_user.id)}))


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    email = form_data.username.lower()
    host = request.client.host if request.client else None
    if not login_limiter.allow(login_key(host, email)):
        logger.warning(f"Login rate limit hit for {email}")
        raise RateLimited()

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(form_data.password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return TokenResponse(access_token=create_access_token({"sub": str(user.id)}))


@router.get("/user", response_model=UserOut)
async def get_auth_user(current_user: User = Depends(get_current_user)):
    return current_user
