import pytest
from decimal import Decimal
from unittest.mock import Mock

from cinelog.service.rating_aggregator import RatingAggregator, compute_average
from cinelog.exceptions.repository import RepositoryOperationException, EntityNotFoundException
from cinelog.exceptions.service import AggregationFailureException


@pytest.mark.parametrize("count, total, expected", [
    (0, 0, "0.00"),
    (1, 4, "4.00"),
    (2, 9, "4.50"),
    (3, 13, "4.33"),
    (3, 14, "4.67"),
    (8, 33, "4.13"),
    (6, 30, "5.00"),
])
def test_compute_average(count, total, expected):
    assert compute_average(count, total) == Decimal(expected)


def test_compute_average_has_two_decimal_places():
    assert compute_average(3, 13).as_tuple().exponent == -2
    assert compute_average(0, 0).as_tuple().exponent == -2


def test_recompute_writes_mean_and_count():
    movie_repo = Mock()
    review_repo = Mock()
    review_repo.get_rating_totals.return_value = (3, 13)

    result = RatingAggregator(movie_repo, review_repo).recompute("movie-1")

    assert result == (Decimal("4.33"), 3)
    review_repo.get_rating_totals.assert_called_once_with("movie-1")
    movie_repo.set_rating_aggregate.assert_called_once_with("movie-1", Decimal("4.33"), 3)


def test_recompute_resets_when_no_reviews():
    movie_repo = Mock()
    review_repo = Mock()
    review_repo.get_rating_totals.return_value = (0, 0)

    RatingAggregator(movie_repo, review_repo).recompute("movie-1")

    movie_repo.set_rating_aggregate.assert_called_once_with("movie-1", Decimal("0.00"), 0)


@pytest.mark.parametrize("error", [
    RepositoryOperationException("db down"),
    EntityNotFoundException("Movie movie-1 not found"),
])
def test_recompute_wraps_repository_errors(error):
    movie_repo = Mock()
    review_repo = Mock()
    review_repo.get_rating_totals.return_value = (1, 5)
    movie_repo.set_rating_aggregate.side_effect = error

    with pytest.raises(AggregationFailureException):
        RatingAggregator(movie_repo, review_repo).recompute("movie-1")
