import pytest
from datetime import datetime, timedelta, timezone

from cinelog.db.models import ReviewORM
from cinelog.domain.models import Review
from cinelog.repositories.implementation.sql_alchemy_review_repo import SQLAlchemyReviewRepo
from cinelog.exceptions.repository import (
    EntityNotFoundException,
    DuplicateEntityException
)


@pytest.fixture
def review_repo(session):
    """Create a review repository instance."""
    return SQLAlchemyReviewRepo(session)


@pytest.fixture
def reviews(session, catalog):
    """Alice rates Inception and The Godfather, Bob rates Inception."""
    base = datetime(2025, 9, 1, tzinfo=timezone.utc)
    rows = [
        ReviewORM(id="review-1", user_id="user-1", movie_id="movie-1", rating=4,
                  review_text="Layered", created_at=base, updated_at=base),
        ReviewORM(id="review-2", user_id="user-1", movie_id="movie-2", rating=5,
                  created_at=base + timedelta(minutes=1), updated_at=base + timedelta(minutes=1)),
        ReviewORM(id="review-3", user_id="user-2", movie_id="movie-1", rating=3,
                  created_at=base + timedelta(minutes=2), updated_at=base + timedelta(minutes=2)),
    ]
    session.add_all(rows)
    session.commit()
    return rows


def test_get_by_id(review_repo, reviews):
    review = review_repo.get_by_id("review-1")
    assert isinstance(review, Review)
    assert review.rating == 4
    assert review.review_text == "Layered"


def test_get_by_user_id_and_movie_id(review_repo, reviews):
    assert review_repo.get_by_user_id_and_movie_id("user-2", "movie-1").id == "review-3"
    assert review_repo.get_by_user_id_and_movie_id("user-2", "movie-2") is None


def test_get_movie_reviews_newest_first_with_author(review_repo, reviews):
    result = review_repo.get_movie_reviews("movie-1")
    assert [r.id for r in result] == ["review-3", "review-1"]
    assert result[0].author.username == "bob"
    assert result[1].author.display_name == "Alice"


def test_get_user_reviews_with_movie(review_repo, reviews):
    result = review_repo.get_user_reviews("user-1")
    assert [r.id for r in result] == ["review-2", "review-1"]
    assert result[0].movie.title == "The Godfather"


def test_get_recent_reviews(review_repo, reviews):
    result = review_repo.get_recent_reviews(2)
    assert [r.id for r in result] == ["review-3", "review-2"]
    assert result[0].movie.title == "Inception"
    assert result[0].author.username == "bob"


def test_get_rating_totals(review_repo, reviews):
    assert review_repo.get_rating_totals("movie-1") == (2, 7)
    assert review_repo.get_rating_totals("movie-3") == (0, 0)


def test_add_review(review_repo, session, reviews):
    saved = review_repo.add_review(Review(user_id="user-2", movie_id="movie-3", rating=2))
    session.commit()

    assert saved.id is not None
    assert saved.created_at is not None
    assert review_repo.get_by_user_id_and_movie_id("user-2", "movie-3").rating == 2


def test_add_duplicate_review(review_repo, session, reviews):
    """Test the unique (user, movie) constraint surfaces as a duplicate."""
    with pytest.raises(DuplicateEntityException):
        review_repo.add_review(Review(user_id="user-1", movie_id="movie-1", rating=1))
    session.rollback()


def test_update_review(review_repo, session, reviews):
    review = review_repo.get_by_id("review-1")
    review.rating = 2
    review.review_text = "Less layered on rewatch"
    updated = review_repo.update_review(review)
    session.commit()

    assert updated.rating == 2
    assert updated.movie_id == "movie-1"
    assert review_repo.get_by_id("review-1").review_text == "Less layered on rewatch"


def test_update_review_keeps_movie(review_repo, session, reviews):
    """Test the movie a review belongs to cannot be reassigned."""
    review = review_repo.get_by_id("review-1")
    review.movie_id = "movie-3"
    review_repo.update_review(review)
    session.commit()

    assert review_repo.get_by_id("review-1").movie_id == "movie-1"


def test_update_nonexistent_review(review_repo, reviews):
    with pytest.raises(EntityNotFoundException):
        review_repo.update_review(Review(id="missing", user_id="user-1", movie_id="movie-1", rating=3))


def test_delete_by_id(review_repo, session, reviews):
    assert review_repo.delete_by_id("review-1") is True
    session.commit()
    assert review_repo.get_by_id("review-1") is None
    assert review_repo.delete_by_id("review-1") is False
