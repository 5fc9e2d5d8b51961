"""
api/routes/auth.py -- Login, registration and identity endpoints.

Routes (mounted under /auth):
  POST /auth/register -- create an account (public, 201)
  POST /auth/login    -- exchange email/password for a bearer token (public)
  GET  /auth/me       -- identity carried by the presented token

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Unknown email and wrong password share one response (INVALID_CREDENTIALS)
  so the endpoint cannot be used to enumerate accounts.
  Cache-Control: no-store on login responses.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import IntegrityError

from api.errors import AuthError, ConflictError, ValidationError
from api.models import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SuccessResponse,
    UserResponse,
)
from auth.dependencies import get_current_identity
from auth.models import Identity, User
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, hash_password
from core.config import get_settings

logger = logging.getLogger("petstore.api.auth")

router = APIRouter()


@router.post("/register", response_model=SuccessResponse[UserResponse], status_code=201)
def register(request: Request, body: Optional[RegisterRequest] = None) -> SuccessResponse[UserResponse]:
    """Create a login account. The password is stored as a bcrypt hash."""
    if body is None or not body.email or not body.password:
        raise ValidationError("MISSING_FIELDS", "Email and password are required")

    user_store: UserStore = request.app.state.user_store
    try:
        user_id = user_store.create_user(User(email=body.email, hashed_password=hash_password(body.password)))
    except IntegrityError:
        raise ConflictError("EMAIL_IN_USE", "Email is already registered") from None

    logger.info("User %d registered", user_id)
    return SuccessResponse[UserResponse](data=UserResponse.from_user(user_store.get_by_id(user_id)))


@router.post("/login", response_model=SuccessResponse[LoginResponse])
def login(
    request: Request,
    response: Response,
    body: Optional[LoginRequest] = None,
) -> SuccessResponse[LoginResponse]:
    """Authenticate with email and password; return a signed bearer token."""
    if body is None or not body.email or not body.password:
        raise ValidationError("MISSING_FIELDS", "Email and password are required")

    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.info("Failed login attempt")
        raise AuthError("INVALID_CREDENTIALS", "Invalid email or password")

    token = create_access_token(user.id, user.email)
    response.headers["Cache-Control"] = "no-store"
    return SuccessResponse[LoginResponse](
        data=LoginResponse(
            token=token,
            expires_in=get_settings().token_expire_seconds,
            user=IdentityResponse(id=user.id, email=user.email),
        )
    )


@router.get("/me", response_model=SuccessResponse[IdentityResponse])
def me(identity: Identity = Depends(get_current_identity)) -> SuccessResponse[IdentityResponse]:
    """Return the identity decoded from the bearer token."""
    return SuccessResponse[IdentityResponse](data=IdentityResponse.from_identity(identity))
