# app/routers/auth_router.py
import logging
import secrets
from fastapi import APIRouter, Depends, Response

from ..core.config import settings
from ..dependencies import get_auth_service, get_current_account
from ..exceptions import APIException, create_success_response
from ..application.ports.account_repo import AccountDto
from ..application.services.auth_service import AuthService
from ..application.services.results import (
    ChangePasswordStatus,
    ForgotStatus,
    LoginStatus,
    OtpStatus,
    RegisterStatus,
)
from ..schemas import (
    ApiResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    VerifyOtpRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

OTP_EXPIRED_MESSAGE = "Your OTP expired. Try again."
OTP_INVALID_MESSAGE = "Invalid or expired OTP"


def generate_temporary_password() -> str:
    return str(100000 + secrets.randbelow(900000))


def _cookie_options() -> dict:
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none"}
    return {"httponly": True, "secure": False, "samesite": "lax"}


def _raise_for_otp_status(status: OtpStatus) -> None:
    if status is OtpStatus.EXPIRED:
        raise APIException(status_code=400, detail=OTP_EXPIRED_MESSAGE)
    if status is not OtpStatus.OK:
        raise APIException(status_code=400, detail=OTP_INVALID_MESSAGE)


@router.post("/signup", status_code=201, responses={400: {"model": ApiResponse}, 409: {"model": ApiResponse}})
def signup(payload: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.register_account(payload.to_profile(), generate_temporary_password())
    if result.status is RegisterStatus.DUPLICATE_EMAIL:
        raise APIException(status_code=409, detail="Email already registered")
    return create_success_response("User registered successfully", 201, data=result.account.public_dict())


@router.post("/signin", responses={401: {"model": ApiResponse}, 404: {"model": ApiResponse}})
def signin(payload: SigninRequest, response: Response, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(payload.email, payload.password)
    if result.status is LoginStatus.NOT_FOUND:
        raise APIException(status_code=404, detail="User not found")
    if result.status is LoginStatus.INVALID_PASSWORD:
        raise APIException(status_code=401, detail="Invalid password")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **_cookie_options(),
    )
    return create_success_response("User logged in successfully", data=result.account.public_dict(), token=result.token)


@router.post("/signout")
def signout(response: Response):
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, **_cookie_options())
    return create_success_response("User logged out successfully")


@router.post("/forgot-password", responses={404: {"model": ApiResponse}})
def forgot_password(payload: ForgotPasswordRequest, auth: AuthService = Depends(get_auth_service)):
    if auth.forgot_password(payload.email) is ForgotStatus.NOT_FOUND:
        raise APIException(status_code=404, detail="User not found")
    return create_success_response("OTP sent to email")


@router.post("/verify-otp", responses={400: {"model": ApiResponse}})
def verify_otp(payload: VerifyOtpRequest, auth: AuthService = Depends(get_auth_service)):
    _raise_for_otp_status(auth.verify_otp(payload.email, payload.otp))
    return create_success_response("OTP verified")


@router.post("/reset-password", responses={400: {"model": ApiResponse}})
def reset_password(payload: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)):
    _raise_for_otp_status(auth.reset_password(payload.email, payload.otp, payload.new_password))
    return create_success_response("Password reset successful")


@router.post("/change-password", responses={400: {"model": ApiResponse}, 401: {"model": ApiResponse}})
def change_password(
    payload: ChangePasswordRequest,
    account: AccountDto = Depends(get_current_account),
    auth: AuthService = Depends(get_auth_service),
):
    status = auth.change_password(account.id, payload.current_password, payload.new_password)
    if status is ChangePasswordStatus.NOT_FOUND:
        raise APIException(status_code=404, detail="User not found")
    if status is ChangePasswordStatus.INVALID_PASSWORD:
        raise APIException(status_code=400, detail="Current password is incorrect")
    return create_success_response("Password changed successfully")
