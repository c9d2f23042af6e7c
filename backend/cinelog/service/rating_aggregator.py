import logging
from decimal import Decimal, ROUND_HALF_UP

from cinelog.repositories import MovieRepository, ReviewRepository
from cinelog.exceptions.repository import RepositoryException
from cinelog.exceptions.service import AggregationFailureException

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO_RATING = Decimal("0.00")


def compute_average(count: int, total: int) -> Decimal:
    """Mean rating rounded half-up to two decimals; 0.00 when there are no reviews."""
    if count <= 0:
        return ZERO_RATING
    return (Decimal(total) / Decimal(count)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class RatingAggregator:
    """Keeps a movie's average_rating and total_reviews equal to its current review set.

    The aggregate is always rebuilt from the reviews table rather than adjusted
    incrementally. It must run inside the transaction that mutated the review, after
    the mutation has been flushed and while the movie row is locked.
    """

    def __init__(self, movie_repo: MovieRepository, review_repo: ReviewRepository):
        self.movie_repo = movie_repo
        self.review_repo = review_repo

    def recompute(self, movie_id: str) -> tuple[Decimal, int]:
        try:
            count, total = self.review_repo.get_rating_totals(movie_id)
            average = compute_average(count, total)
            self.movie_repo.set_rating_aggregate(movie_id, average, count)
        except RepositoryException as e:
            logger.error(f"Rating aggregation failed for movie {movie_id}: {str(e)}")
            raise AggregationFailureException(f"Could not recompute rating for movie {movie_id}") from e

        logger.debug(f"Movie {movie_id} aggregate is now {average} over {count} reviews")
        return average, count
