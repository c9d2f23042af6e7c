from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from cinelog.db.database import is_unique_violation

from cinelog.db.models import ReviewORM
from cinelog.domain.models import Review, Profile
from cinelog.repositories.interface.review_repository import ReviewRepository
from cinelog.repositories.implementation.sql_alchemy_movie_repo import SQLAlchemyMovieRepo
from cinelog.exceptions.repository import (
    EntityNotFoundException,
    DuplicateEntityException,
    RepositoryOperationException,
    InvalidEntityDataException
)


class SQLAlchemyReviewRepo(ReviewRepository):
    def __init__(self, session: Session):
        self.session = session
        self._movies = SQLAlchemyMovieRepo(session)

    def _to_domain(self, review_orm: ReviewORM, with_author: bool = False, with_movie: bool = False) -> Review:
        try:
            review = Review(
                id=review_orm.id,
                user_id=review_orm.user_id,
                movie_id=review_orm.movie_id,
                rating=review_orm.rating,
                review_text=review_orm.review_text,
                created_at=review_orm.created_at,
                updated_at=review_orm.updated_at
            )
            if with_author and review_orm.author is not None:
                review.author = Profile(
                    id=review_orm.author.id,
                    user_id=review_orm.author.user_id,
                    username=review_orm.author.username,
                    display_name=review_orm.author.display_name,
                    avatar_url=review_orm.author.avatar_url
                )
            if with_movie and review_orm.movie is not None:
                review.movie = self._movies._to_domain(review_orm.movie)
            return review
        except Exception as e:
            raise InvalidEntityDataException(f"Failed to convert review data: {str(e)}")

    def _to_orm(self, review: Review) -> ReviewORM:
        return ReviewORM(
            id=review.id,
            user_id=review.user_id,
            movie_id=review.movie_id,
            rating=review.rating,
            review_text=review.review_text
        )

    def get_by_id(self, review_id: str, refresh: bool = False) -> Optional[Review]:
        try:
            review_orm = self.session.get(ReviewORM, review_id, populate_existing=refresh)
            return self._to_domain(review_orm) if review_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get review by ID: {str(e)}")

    def get_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> Optional[Review]:
        try:
            review_orm = self.session.query(ReviewORM).filter(
                ReviewORM.user_id == user_id,
                ReviewORM.movie_id == movie_id
            ).first()
            return self._to_domain(review_orm) if review_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get review by user and movie: {str(e)}")

    def get_movie_reviews(self, movie_id: str) -> List[Review]:
        try:
            reviews_orm = (
                self.session.query(ReviewORM)
                .options(joinedload(ReviewORM.author))
                .filter(ReviewORM.movie_id == movie_id)
                .order_by(ReviewORM.created_at.desc())
                .all()
            )
            return [self._to_domain(r, with_author=True) for r in reviews_orm]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get movie reviews: {str(e)}")

    def get_user_reviews(self, user_id: str) -> List[Review]:
        try:
            reviews_orm = (
                self.session.query(ReviewORM)
                .options(joinedload(ReviewORM.movie))
                .filter(ReviewORM.user_id == user_id)
                .order_by(ReviewORM.created_at.desc())
                .all()
            )
            return [self._to_domain(r, with_movie=True) for r in reviews_orm]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get user reviews: {str(e)}")

    def get_recent_reviews(self, limit: int) -> List[Review]:
        try:
            reviews_orm = (
                self.session.query(ReviewORM)
                .options(joinedload(ReviewORM.author), joinedload(ReviewORM.movie))
                .order_by(ReviewORM.created_at.desc())
                .limit(limit)
                .all()
            )
            return [self._to_domain(r, with_author=True, with_movie=True) for r in reviews_orm]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get recent reviews: {str(e)}")

    def get_rating_totals(self, movie_id: str) -> Tuple[int, int]:
        """Return (review count, sum of ratings) for a movie as seen by the current transaction."""
        try:
            count, total = self.session.query(
                func.count(ReviewORM.id),
                func.coalesce(func.sum(ReviewORM.rating), 0)
            ).filter(ReviewORM.movie_id == movie_id).one()
            return int(count), int(total)
        except Exception as e:
            raise RepositoryOperationException(f"Failed to compute rating totals: {str(e)}")

    def add_review(self, review: Review) -> Review:
        try:
            review_orm = self._to_orm(review)
            self.session.add(review_orm)
            self.session.flush()
            return self._to_domain(review_orm)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise RepositoryOperationException(f"Failed to add review: {str(e)}")
            raise DuplicateEntityException(
                f"Review for user {review.user_id} and movie {review.movie_id} already exists"
            )
        except Exception as e:
            raise RepositoryOperationException(f"Failed to add review: {str(e)}")

    def update_review(self, review: Review) -> Review:
        try:
            review_orm = self.session.get(ReviewORM, review.id)
            if not review_orm:
                raise EntityNotFoundException(f"Review {review.id} not found")

            # movie_id and user_id are fixed once the review exists
            review_orm.rating = review.rating
            review_orm.review_text = review.review_text
            self.session.flush()
            return self._to_domain(review_orm)
        except EntityNotFoundException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to update review: {str(e)}")

    def delete_by_id(self, review_id: str) -> bool:
        try:
            review_orm = self.session.get(ReviewORM, review_id)
            if review_orm:
                self.session.delete(review_orm)
                self.session.flush()
                return True
            return False
        except Exception as e:
            raise RepositoryOperationException(f"Failed to delete review: {str(e)}")
