from fastapi import Depends
from sqlalchemy.orm import Session

from cinelog.db.database import get_db
from cinelog.repositories import (
    SQLAlchemyMovieRepo,
    SQLAlchemyReviewRepo,
    SQLAlchemyWatchlistRepo,
    SQLAlchemyProfileRepo
)
from cinelog.service.movie_service import MovieService
from cinelog.service.review_service import ReviewService
from cinelog.service.watchlist_service import WatchlistService
from cinelog.service.profile_service import ProfileService
from cinelog.service.search_service import SearchService

def get_movie_service(db: Session = Depends(get_db)) -> MovieService:
    return MovieService(SQLAlchemyMovieRepo(db))

def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(
        session=db,
        review_repo=SQLAlchemyReviewRepo(db),
        movie_repo=SQLAlchemyMovieRepo(db)
    )

def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    return WatchlistService(
        session=db,
        watchlist_repo=SQLAlchemyWatchlistRepo(db),
        movie_repo=SQLAlchemyMovieRepo(db)
    )

def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(
        session=db,
        profile_repo=SQLAlchemyProfileRepo(db),
        review_repo=SQLAlchemyReviewRepo(db),
        watchlist_repo=SQLAlchemyWatchlistRepo(db)
    )

def get_search_service() -> SearchService:
    return SearchService()
