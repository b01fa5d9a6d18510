# app/routers/users_router.py
from fastapi import APIRouter, Depends

from ..dependencies import get_current_account, get_profile_service
from ..exceptions import APIException, create_success_response
from ..application.ports.account_repo import AccountDto
from ..application.services.profile_service import ProfileService
from ..schemas import ApiResponse, UpdateProfilePhotoRequest, UpdateProfileRequest

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", responses={401: {"model": ApiResponse}})
def get_my_profile(account: AccountDto = Depends(get_current_account)):
    return create_success_response("Profile fetched successfully", data=account.public_dict())


@router.patch("/profile", responses={400: {"model": ApiResponse}, 404: {"model": ApiResponse}})
def update_profile(
    payload: UpdateProfileRequest,
    account: AccountDto = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    updated = profiles.update_profile(account.id, payload.to_updates())
    if not updated:
        raise APIException(status_code=404, detail="User not found")
    return create_success_response("Profile updated successfully", data=updated.public_dict())


@router.patch("/profile-photo", responses={404: {"model": ApiResponse}})
def update_profile_photo(
    payload: UpdateProfilePhotoRequest,
    account: AccountDto = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    updated = profiles.update_photo(account.id, payload.profile_photo)
    if not updated:
        raise APIException(status_code=404, detail="User not found")
    return create_success_response("Profile photo updated successfully", data=updated.public_dict())
