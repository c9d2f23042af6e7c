from typing import List
from fastapi import APIRouter, Depends, Response, status

from cinelog.domain.models import Profile
from cinelog.domain.dto import WatchlistAdd, WatchlistEntryResponse, WatchlistStatus
from cinelog.auth.dependencies import get_current_user
from cinelog.service.dependencies import get_watchlist_service
from cinelog.service.watchlist_service import WatchlistService


router = APIRouter(
    prefix="/watchlist",
    tags=["Watchlist"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=List[WatchlistEntryResponse])
def get_watchlist(
    current_user: Profile = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    return [WatchlistEntryResponse.model_validate(e) for e in watchlist_service.list(current_user.user_id)]


@router.get("/movie-ids", response_model=List[str])
def get_watchlist_movie_ids(
    current_user: Profile = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    return watchlist_service.movie_ids(current_user.user_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=WatchlistEntryResponse)
def add_to_watchlist(
    payload: WatchlistAdd,
    current_user: Profile = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    entry = watchlist_service.add(current_user.user_id, payload.movie_id)
    return WatchlistEntryResponse.model_validate(entry)


@router.get("/{movie_id}", response_model=WatchlistStatus)
def watchlist_status(
    movie_id: str,
    current_user: Profile = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    return WatchlistStatus(
        movie_id=movie_id,
        in_watchlist=watchlist_service.contains(current_user.user_id, movie_id)
    )


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_watchlist(
    movie_id: str,
    current_user: Profile = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    # removing a movie that is not on the list is a no-op
    watchlist_service.remove(current_user.user_id, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
