from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from cinelog.domain.dto import MovieResponse, ReviewResponse
from cinelog.service.dependencies import get_movie_service, get_review_service
from cinelog.service.movie_service import MovieService
from cinelog.service.review_service import ReviewService


router = APIRouter(
    prefix="/movies",
    tags=["Movies"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=List[MovieResponse])
def browse_movies(
    search: Optional[str] = None,
    genre: Optional[str] = None,
    year: Optional[int] = None,
    sort_by: str = Query("title", pattern="^(title|year|rating|reviews)$"),
    movie_service: MovieService = Depends(get_movie_service)
):
    movies = movie_service.browse(search=search, genre=genre, year=year, sort_by=sort_by)
    return [MovieResponse.model_validate(movie) for movie in movies]


@router.get("/featured", response_model=List[MovieResponse])
def featured_movies(
    limit: int = Query(6, ge=1, le=50),
    movie_service: MovieService = Depends(get_movie_service)
):
    return [MovieResponse.model_validate(movie) for movie in movie_service.featured(limit)]


@router.get("/top-rated", response_model=List[MovieResponse])
def top_rated_movies(
    limit: int = Query(4, ge=1, le=50),
    movie_service: MovieService = Depends(get_movie_service)
):
    return [MovieResponse.model_validate(movie) for movie in movie_service.top_rated(limit)]


@router.get("/genres", response_model=List[str])
def list_genres(movie_service: MovieService = Depends(get_movie_service)):
    return movie_service.genres()


@router.get("/{movie_id}", response_model=MovieResponse)
def get_movie(
    movie_id: str,
    movie_service: MovieService = Depends(get_movie_service)
):
    return MovieResponse.model_validate(movie_service.get_movie(movie_id))


@router.get("/{movie_id}/reviews", response_model=List[ReviewResponse])
def get_movie_reviews(
    movie_id: str,
    review_service: ReviewService = Depends(get_review_service)
):
    reviews = review_service.get_movie_reviews(movie_id)
    return [ReviewResponse.model_validate(review) for review in reviews]
