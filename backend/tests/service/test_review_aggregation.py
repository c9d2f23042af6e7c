"""End-to-end review mutations against a real database.

These go through the SQLAlchemy repositories against an on-disk SQLite file, so the
fresh sessions used for assertions only see what was actually committed.
"""
import pytest
from decimal import Decimal

from cinelog.db.models import MovieORM, ReviewORM
from cinelog.repositories import SQLAlchemyMovieRepo, SQLAlchemyReviewRepo
from cinelog.service.review_service import ReviewService
from cinelog.exceptions.repository import RepositoryOperationException
from cinelog.exceptions.service import (
    InvalidInputException,
    DuplicateEntryException,
    ForbiddenException,
    NotFoundException,
    AggregationFailureException
)


@pytest.fixture
def engine(file_engine):
    return file_engine


class FailingAggregateMovieRepo(SQLAlchemyMovieRepo):
    def set_rating_aggregate(self, movie_id, average_rating, total_reviews):
        raise RepositoryOperationException("simulated write failure")


@pytest.fixture
def service(session, catalog):
    return ReviewService(session, SQLAlchemyReviewRepo(session), SQLAlchemyMovieRepo(session))


def aggregate(session_factory, movie_id):
    """Read the movie's aggregate through a fresh session, as another request would."""
    db = session_factory()
    try:
        movie = db.get(MovieORM, movie_id)
        return Decimal(movie.average_rating).quantize(Decimal("0.01")), movie.total_reviews
    finally:
        db.close()


def review_count(session_factory, movie_id):
    db = session_factory()
    try:
        return db.query(ReviewORM).filter(ReviewORM.movie_id == movie_id).count()
    finally:
        db.close()


def test_first_review_sets_aggregate(service, session_factory):
    service.submit_review("user-1", "movie-1", 4)

    assert aggregate(session_factory, "movie-1") == (Decimal("4.00"), 1)


def test_second_review_averages(service, session_factory):
    service.submit_review("user-1", "movie-1", 4)
    service.submit_review("user-2", "movie-1", 5)

    assert aggregate(session_factory, "movie-1") == (Decimal("4.50"), 2)


def test_update_then_delete_recomputes(service, session_factory):
    """A (4) and B (5), A revises to 2, B deletes, then A deletes."""
    review_a = service.submit_review("user-1", "movie-1", 4)
    review_b = service.submit_review("user-2", "movie-1", 5)

    service.update_review(review_a.id, "user-1", 2)
    assert aggregate(session_factory, "movie-1") == (Decimal("3.50"), 2)

    service.delete_review(review_b.id, "user-2")
    assert aggregate(session_factory, "movie-1") == (Decimal("2.00"), 1)

    service.delete_review(review_a.id, "user-1")
    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)


def test_deleting_last_review_resets_aggregate(service, session_factory):
    review = service.submit_review("user-1", "movie-1", 3)

    service.delete_review(review.id, "user-1")

    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)


def test_average_rounds_to_two_places(service, session_factory):
    service.submit_review("user-1", "movie-1", 4)
    service.submit_review("user-2", "movie-1", 4)
    service.submit_review("user-3", "movie-1", 5)

    assert aggregate(session_factory, "movie-1") == (Decimal("4.33"), 3)


def test_duplicate_review_leaves_aggregate_unchanged(service, session_factory):
    service.submit_review("user-1", "movie-1", 4)

    with pytest.raises(DuplicateEntryException):
        service.submit_review("user-1", "movie-1", 1)

    assert aggregate(session_factory, "movie-1") == (Decimal("4.00"), 1)
    assert review_count(session_factory, "movie-1") == 1


def test_invalid_rating_writes_nothing(service, session_factory):
    with pytest.raises(InvalidInputException):
        service.submit_review("user-1", "movie-1", 0)

    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)
    assert review_count(session_factory, "movie-1") == 0


def test_unknown_movie(service):
    with pytest.raises(NotFoundException):
        service.submit_review("user-1", "movie-404", 3)


def test_foreign_update_and_delete_are_forbidden(service, session_factory):
    review = service.submit_review("user-1", "movie-1", 4)

    with pytest.raises(ForbiddenException):
        service.update_review(review.id, "user-2", 1)
    with pytest.raises(ForbiddenException):
        service.delete_review(review.id, "user-2")

    assert aggregate(session_factory, "movie-1") == (Decimal("4.00"), 1)
    assert review_count(session_factory, "movie-1") == 1


def test_reviews_on_other_movies_are_independent(service, session_factory):
    service.submit_review("user-1", "movie-1", 5)
    service.submit_review("user-1", "movie-2", 1)
    service.submit_review("user-2", "movie-2", 2)

    assert aggregate(session_factory, "movie-1") == (Decimal("5.00"), 1)
    assert aggregate(session_factory, "movie-2") == (Decimal("1.50"), 2)
    assert aggregate(session_factory, "movie-3") == (Decimal("0.00"), 0)


def test_failed_aggregation_rolls_back_submit(session, catalog, session_factory):
    service = ReviewService(session, SQLAlchemyReviewRepo(session), FailingAggregateMovieRepo(session))

    with pytest.raises(AggregationFailureException):
        service.submit_review("user-1", "movie-1", 5)

    assert review_count(session_factory, "movie-1") == 0
    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)


def test_failed_aggregation_rolls_back_update_and_delete(service, session, session_factory):
    review = service.submit_review("user-1", "movie-1", 4)
    failing = ReviewService(session, SQLAlchemyReviewRepo(session), FailingAggregateMovieRepo(session))

    with pytest.raises(AggregationFailureException):
        failing.update_review(review.id, "user-1", 1)
    with pytest.raises(AggregationFailureException):
        failing.delete_review(review.id, "user-1")

    assert aggregate(session_factory, "movie-1") == (Decimal("4.00"), 1)
    assert service.get_review(review.id).rating == 4


def test_retry_after_failure_succeeds(session, catalog, session_factory):
    failing = ReviewService(session, SQLAlchemyReviewRepo(session), FailingAggregateMovieRepo(session))
    with pytest.raises(AggregationFailureException):
        failing.submit_review("user-1", "movie-1", 3)

    service = ReviewService(session, SQLAlchemyReviewRepo(session), SQLAlchemyMovieRepo(session))
    service.submit_review("user-1", "movie-1", 3)

    assert aggregate(session_factory, "movie-1") == (Decimal("3.00"), 1)


def test_movie_reviews_carry_author(service):
    service.submit_review("user-1", "movie-1", 4, "Dreams within dreams")

    reviews = service.get_movie_reviews("movie-1")

    assert len(reviews) == 1
    assert reviews[0].author.username == "alice"
    assert reviews[0].review_text == "Dreams within dreams"


def test_user_review_for_movie(service):
    service.submit_review("user-1", "movie-2", 5)

    assert service.get_user_review_for_movie("user-1", "movie-2").rating == 5
    assert service.get_user_review_for_movie("user-2", "movie-2") is None


def test_review_by_unknown_user_is_a_storage_error(service, session_factory):
    """A foreign key failure must not be reported as a duplicate review."""
    with pytest.raises(RepositoryOperationException):
        service.submit_review("no-profile-user", "movie-1", 4)

    assert review_count(session_factory, "movie-1") == 0
    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)


@pytest.fixture
def stale_session(session_factory, catalog):
    """Session that keeps loaded rows cached across commits, like a request that read
    a review just before another request deleted it."""
    db = session_factory(expire_on_commit=False)
    yield db
    db.close()


def _review_deleted_elsewhere(stale_session, session_factory):
    service = ReviewService(stale_session, SQLAlchemyReviewRepo(stale_session), SQLAlchemyMovieRepo(stale_session))
    review = service.submit_review("user-1", "movie-1", 4)
    cached = stale_session.get(ReviewORM, review.id)

    other = session_factory()
    try:
        ReviewService(other, SQLAlchemyReviewRepo(other), SQLAlchemyMovieRepo(other)).delete_review(review.id, "user-1")
    finally:
        other.close()
    return service, review, cached


def test_update_of_review_deleted_elsewhere_is_not_found(stale_session, session_factory):
    service, review, cached = _review_deleted_elsewhere(stale_session, session_factory)

    with pytest.raises(NotFoundException):
        service.update_review(review.id, "user-1", 2)

    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)


def test_delete_of_review_deleted_elsewhere_is_not_found(stale_session, session_factory):
    service, review, cached = _review_deleted_elsewhere(stale_session, session_factory)

    with pytest.raises(NotFoundException):
        service.delete_review(review.id, "user-1")

    assert aggregate(session_factory, "movie-1") == (Decimal("0.00"), 0)
