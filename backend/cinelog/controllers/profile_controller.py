from fastapi import APIRouter, Depends

from cinelog.domain.models import Profile
from cinelog.domain.dto import ProfileResponse, ProfileUpdate, ProfileStatsResponse
from cinelog.auth.dependencies import get_current_user
from cinelog.service.dependencies import get_profile_service
from cinelog.service.profile_service import ProfileService


router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    responses={404: {"description": "Not found"}}
)


@router.get("/me", response_model=ProfileResponse)
def read_profile_me(current_user: Profile = Depends(get_current_user)):
    return ProfileResponse.model_validate(current_user)


@router.patch("/me", response_model=ProfileResponse)
def update_profile_me(
    payload: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    fields = payload.model_dump(exclude_unset=True)
    profile = profile_service.update_profile(current_user.user_id, current_user.user_id, **fields)
    return ProfileResponse.model_validate(profile)


@router.get("/me/stats", response_model=ProfileStatsResponse)
def read_profile_stats(
    current_user: Profile = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    return ProfileStatsResponse.model_validate(profile_service.stats(current_user.user_id))


@router.get("/{user_id}", response_model=ProfileResponse)
def read_profile(
    user_id: str,
    profile_service: ProfileService = Depends(get_profile_service)
):
    return ProfileResponse.model_validate(profile_service.get_profile(user_id))
