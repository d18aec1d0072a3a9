"""Auth API — registration, login, current user.

Learn: Routes for the session lifecycle:
- POST /auth/register → create an account, returns {token, user}
- POST /auth/login → email/password → {token, user}
- GET /auth/me → the caller's own user record (requires a token)

There is no refresh endpoint: tokens simply expire and the client logs in
again.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.auth.dependencies import CurrentIdentity, get_current_user, get_token_codec
from inkpost.auth.jwt import TokenCodec
from inkpost.db.engine import get_db
from inkpost.errors import NotFoundError
from inkpost.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserRead
from inkpost.services.session_issuer import SessionIssuer
from inkpost.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _issuer(
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> SessionIssuer:
    return SessionIssuer(db, codec)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, issuer: SessionIssuer = Depends(_issuer)):
    """Create a new user account and log it in."""
    user, token = await issuer.register(
        username=body.username, email=body.email, password=body.password
    )
    await issuer.db.commit()
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, issuer: SessionIssuer = Depends(_issuer)):
    """Login with email and password → session token."""
    user, token = await issuer.login(email=body.email, password=body.password)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await UserService(db).get(identity.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
