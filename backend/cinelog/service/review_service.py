import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from cinelog.config import MIN_RATING, MAX_RATING, RECENT_REVIEWS_LIMIT
from cinelog.db.database import transaction
from cinelog.domain.models import Review, Profile
from cinelog.repositories import ReviewRepository, MovieRepository
from cinelog.service.rating_aggregator import RatingAggregator
from cinelog.exceptions.repository import (
    EntityNotFoundException,
    DuplicateEntityException,
    RepositoryOperationException
)
from cinelog.exceptions.service import (
    ServiceException,
    InvalidInputException,
    DuplicateEntryException,
    ForbiddenException,
    NotFoundException
)

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR_NAME = "Unknown User"


def validate_rating(rating) -> int:
    # bool is an int subclass; True must not pass as a 1-star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidInputException(f"Rating must be an integer, got {type(rating).__name__}")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise InvalidInputException(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def normalize_review_text(review_text: Optional[str]) -> Optional[str]:
    if review_text is None:
        return None
    if not isinstance(review_text, str):
        raise InvalidInputException("Review text must be a string")
    review_text = review_text.strip()
    return review_text or None


def _with_author_fallback(reviews: List[Review]) -> List[Review]:
    for review in reviews:
        if review.author is None:
            review.author = Profile(user_id=review.user_id, username="unknown", display_name=UNKNOWN_AUTHOR_NAME)
    return reviews


class ReviewService:
    """Review mutations and reads.

    submit_review, update_review and delete_review are the only write paths to the
    reviews table. Each one runs the mutation and the movie's rating recomputation
    in a single transaction, so a failure anywhere leaves both untouched.
    """

    def __init__(
        self,
        session: Session,
        review_repo: ReviewRepository,
        movie_repo: MovieRepository,
        aggregator: Optional[RatingAggregator] = None
    ):
        self.session = session
        self.review_repo = review_repo
        self.movie_repo = movie_repo
        self.aggregator = aggregator or RatingAggregator(movie_repo, review_repo)

    def submit_review(self, user_id: str, movie_id: str, rating: int, review_text: Optional[str] = None) -> Review:
        rating = validate_rating(rating)
        review_text = normalize_review_text(review_text)

        try:
            with transaction(self.session):
                movie = self.movie_repo.get_for_update(movie_id)
                if not movie:
                    raise NotFoundException(f"Movie with ID {movie_id} not found")

                if self.review_repo.get_by_user_id_and_movie_id(user_id, movie_id):
                    raise DuplicateEntryException(
                        f"User {user_id} has already reviewed movie {movie_id}; update the existing review instead"
                    )

                review = self.review_repo.add_review(
                    Review(user_id=user_id, movie_id=movie_id, rating=rating, review_text=review_text)
                )
                self.aggregator.recompute(movie_id)
        except DuplicateEntityException as e:
            raise DuplicateEntryException(str(e)) from e
        except ServiceException:
            raise
        except RepositoryOperationException:
            raise
        except Exception as e:
            raise ServiceException(f"Unexpected error while submitting review: {str(e)}") from e

        logger.info(f"User {user_id} reviewed movie {movie_id} with rating {rating}")
        return review

    def update_review(self, review_id: str, acting_user_id: str, rating: int, review_text: Optional[str] = None) -> Review:
        rating = validate_rating(rating)
        review_text = normalize_review_text(review_text)

        try:
            with transaction(self.session):
                existing = self._get_owned_review(review_id, acting_user_id)
                self.movie_repo.get_for_update(existing.movie_id)
                # the review may have been deleted while we waited for the lock
                existing = self._get_owned_review(review_id, acting_user_id, refresh=True)

                existing.rating = rating
                existing.review_text = review_text
                review = self.review_repo.update_review(existing)
                self.aggregator.recompute(existing.movie_id)
        except EntityNotFoundException as e:
            raise NotFoundException(f"Review with ID {review_id} not found") from e
        except ServiceException:
            raise
        except RepositoryOperationException:
            raise
        except Exception as e:
            raise ServiceException(f"Unexpected error while updating review: {str(e)}") from e

        logger.info(f"User {acting_user_id} updated review {review_id} to rating {rating}")
        return review

    def delete_review(self, review_id: str, acting_user_id: str) -> None:
        try:
            with transaction(self.session):
                existing = self._get_owned_review(review_id, acting_user_id)
                self.movie_repo.get_for_update(existing.movie_id)
                existing = self._get_owned_review(review_id, acting_user_id, refresh=True)

                if not self.review_repo.delete_by_id(review_id):
                    raise NotFoundException(f"Review with ID {review_id} not found")
                # the deleted row's movie id is the only way back to the movie
                self.aggregator.recompute(existing.movie_id)
        except ServiceException:
            raise
        except RepositoryOperationException:
            raise
        except Exception as e:
            raise ServiceException(f"Unexpected error while deleting review: {str(e)}") from e

        logger.info(f"User {acting_user_id} deleted review {review_id}")

    def _get_owned_review(self, review_id: str, acting_user_id: str, refresh: bool = False) -> Review:
        review = self.review_repo.get_by_id(review_id, refresh=refresh)
        if not review:
            raise NotFoundException(f"Review with ID {review_id} not found")
        if review.user_id != acting_user_id:
            logger.warning(f"User {acting_user_id} tried to modify review {review_id} owned by {review.user_id}")
            raise ForbiddenException("Only the author of a review may change or delete it")
        return review

    def get_review(self, review_id: str) -> Review:
        review = self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundException(f"Review with ID {review_id} not found")
        return review

    def get_movie_reviews(self, movie_id: str) -> List[Review]:
        if not self.movie_repo.get_by_id(movie_id):
            raise NotFoundException(f"Movie with ID {movie_id} not found")
        return _with_author_fallback(self.review_repo.get_movie_reviews(movie_id))

    def get_user_reviews(self, user_id: str) -> List[Review]:
        return self.review_repo.get_user_reviews(user_id)

    def get_recent_reviews(self, limit: int = RECENT_REVIEWS_LIMIT) -> List[Review]:
        if limit < 1:
            raise InvalidInputException("limit must be at least 1")
        return _with_author_fallback(self.review_repo.get_recent_reviews(limit))

    def get_user_review_for_movie(self, user_id: str, movie_id: str) -> Optional[Review]:
        return self.review_repo.get_by_user_id_and_movie_id(user_id, movie_id)
