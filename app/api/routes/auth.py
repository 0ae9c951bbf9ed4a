"""HTTP route handlers for registration, login and email verification."""

from fastapi import APIRouter, Depends, status

from app.api import deps
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.schemas.common import Message
from app.schemas.otp import OTPRequest, OTPVerify
from app.services.account import AccountService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: RegisterRequest,
    account_service: AccountService = Depends(deps.get_account_service),
) -> AuthResponse:
    """Create a new user record and dispatch an OTP email for verification."""

    result = await account_service.register(payload.name, payload.email, payload.password)
    return AuthResponse(
        message="User created successfully",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    account_service: AccountService = Depends(deps.get_account_service),
) -> AuthResponse:
    """Authenticate with email and password and return a bearer token."""

    result = await account_service.login(payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post("/send-verification-code", response_model=Message)
async def send_verification_code(
    payload: OTPRequest,
    account_service: AccountService = Depends(deps.get_account_service),
) -> Message:
    """Issue a fresh OTP to the given email address."""

    return Message(message=await account_service.request_code(payload.email))


@router.post("/verify-email", response_model=Message)
async def verify_email(
    payload: OTPVerify,
    account_service: AccountService = Depends(deps.get_account_service),
) -> Message:
    """Confirm an email address using the submitted OTP code."""

    return Message(message=await account_service.verify_email(payload.email, payload.otp))
