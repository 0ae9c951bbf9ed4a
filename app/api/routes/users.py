"""HTTP route handlers for password reset and user lookup."""

from fastapi import APIRouter, Depends

from app.api import deps
from app.db.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.common import Message
from app.schemas.otp import OTPRequest, OTPVerify
from app.schemas.user import PasswordResetRequest, UserDetailResponse, UserListResponse
from app.services.account import AccountService

router = APIRouter(prefix="/user", tags=["user"])


@router.post("/request-password-reset", response_model=Message)
async def request_password_reset(
    payload: OTPRequest,
    account_service: AccountService = Depends(deps.get_account_service),
) -> Message:
    """Email a password-reset code to a registered user."""

    return Message(message=await account_service.request_code(payload.email))


@router.post("/verify-password-reset", response_model=Message)
async def verify_password_reset(
    payload: OTPVerify,
    account_service: AccountService = Depends(deps.get_account_service),
) -> Message:
    return Message(message=await account_service.verify_password_reset(payload.email, payload.otp))


@router.patch("/password-reset", response_model=Message)
async def reset_password(
    payload: PasswordResetRequest,
    account_service: AccountService = Depends(deps.get_account_service),
) -> Message:
    """Store a new password for the account."""

    return Message(message=await account_service.reset_password(payload.email, payload.password))


@router.get("", response_model=UserListResponse)
async def list_users(
    _: User = Depends(deps.get_current_user),
    account_service: AccountService = Depends(deps.get_account_service),
) -> UserListResponse:
    users = [UserResponse.model_validate(user) for user in await account_service.list_users()]
    return UserListResponse(users=users, count=len(users))


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: int,
    _: User = Depends(deps.get_current_user),
    account_service: AccountService = Depends(deps.get_account_service),
) -> UserDetailResponse:
    user = await account_service.get_user(user_id)
    return UserDetailResponse(user=UserResponse.model_validate(user))
