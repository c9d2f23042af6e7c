from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from cinelog.domain.models import Profile
from cinelog.domain.dto import ReviewCreate, ReviewUpdate, ReviewResponse
from cinelog.auth.dependencies import get_current_user
from cinelog.service.dependencies import get_review_service
from cinelog.service.review_service import ReviewService


router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={404: {"description": "Not found"}}
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReviewResponse)
def submit_review(
    review_data: ReviewCreate,
    current_user: Profile = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = review_service.submit_review(
        current_user.user_id,
        review_data.movie_id,
        review_data.rating,
        review_data.review_text
    )
    return ReviewResponse.model_validate(review)


@router.get("/recent", response_model=List[ReviewResponse])
def recent_reviews(
    limit: int = Query(5, ge=1, le=50),
    review_service: ReviewService = Depends(get_review_service)
):
    return [ReviewResponse.model_validate(r) for r in review_service.get_recent_reviews(limit)]


@router.get("/me", response_model=List[ReviewResponse])
def my_reviews(
    current_user: Profile = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    return [ReviewResponse.model_validate(r) for r in review_service.get_user_reviews(current_user.user_id)]


@router.get("/me/{movie_id}", response_model=Optional[ReviewResponse])
def my_review_for_movie(
    movie_id: str,
    current_user: Profile = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = review_service.get_user_review_for_movie(current_user.user_id, movie_id)
    return ReviewResponse.model_validate(review) if review else None


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: str,
    review_service: ReviewService = Depends(get_review_service)
):
    return ReviewResponse.model_validate(review_service.get_review(review_id))


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: str,
    review_data: ReviewUpdate,
    current_user: Profile = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = review_service.update_review(
        review_id,
        current_user.user_id,
        review_data.rating,
        review_data.review_text
    )
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str,
    current_user: Profile = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review_service.delete_review(review_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
