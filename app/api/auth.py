from fastapi import APIRouter, HTTPException, status, Request, Response

from app.config import settings
from app.core.dependencies import CurrentUser, DatabaseSession
from app.core.logging import SecurityLogger
from app.core.middleware import limiter
from app.services.auth_service import AuthService
from app.schemas.auth import UserRegister, UserLogin, TokenResponse, UserPrivate
from app.schemas.common import ErrorResponse

router = APIRouter(tags=["authentication"])


@router.post(
    "/register",
    response_model=UserPrivate,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "model": ErrorResponse,
            "description": "Email or username already exists",
        },
        422: {"model": ErrorResponse, "description": "Validation error"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    user_data: UserRegister,
    db: DatabaseSession,
) -> UserPrivate:
    auth_service = AuthService(db)

    try:
        user = await auth_service.register_user(user_data)
    except HTTPException as e:
        SecurityLogger.log_registration(
            request,
            email=user_data.email,
            success=False,
            failure_reason=str(e.detail),
        )
        raise

    SecurityLogger.log_registration(
        request, email=user.email, user_id=user.id, success=True
    )

    return UserPrivate.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Account inactive"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    login_data: UserLogin,
    db: DatabaseSession,
) -> TokenResponse:
    auth_service = AuthService(db)

    user = await auth_service.authenticate_user(login_data.email, login_data.password)

    if not user:
        SecurityLogger.log_login_attempt(
            request,
            email=login_data.email,
            success=False,
            failure_reason="invalid_credentials",
        )

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not user.is_active:
        SecurityLogger.log_login_attempt(
            request,
            email=login_data.email,
            success=False,
            user_id=user.id,
            failure_reason="account_inactive",
        )

        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated"
        )

    SecurityLogger.log_login_attempt(
        request, email=user.email, success=True, user_id=user.id
    )

    tokens = auth_service.create_tokens(user)

    response.set_cookie(
        key="access_token",
        value=tokens.access_token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=tokens.expires_in,
        path="/",
    )

    return tokens


@router.get("/me", response_model=UserPrivate)
async def read_current_account(current_user: CurrentUser) -> UserPrivate:
    return UserPrivate.model_validate(current_user)
