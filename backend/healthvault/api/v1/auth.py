"""Account lifecycle endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from healthvault.core.dependencies import get_account_service, get_current_user
from healthvault.models import User
from healthvault.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    ResendCodeRequest,
    VerificationRequiredResponse,
    VerifyCodeRequest,
)
from healthvault.schemas.common import ErrorResponse, MessageResponse
from healthvault.services.account_service import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """
    Register a new account.

    The account starts unverified; a 6-digit code is emailed to the address
    and must be submitted to ``/auth/verify-otp``.
    """
    return accounts.register(body)


@router.post(
    "/verify-otp",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
)
def verify_otp(
    body: VerifyCodeRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Submit a one-time code. Email verification also assigns the Health ID."""
    return accounts.verify_code(body.user_id, body.code, body.purpose)


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp(
    body: ResendCodeRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Send a new code for the given purpose (email verification by default)."""
    accounts.resend_code(body.user_id, body.purpose)
    return MessageResponse(message="OTP sent successfully")


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": VerificationRequiredResponse},
    },
)
def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """
    Log in with email and password.

    Unverified accounts get 403 with ``needsVerification`` and the user id,
    and a fresh code is emailed; no token is issued.
    """
    result = accounts.login(body.email, body.password)
    if isinstance(result, VerificationRequiredResponse):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=result.model_dump(by_alias=True, mode="json"),
        )
    return result


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    current_user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get_profile(current_user.id)


@router.patch("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.update_profile(current_user.id, body)
