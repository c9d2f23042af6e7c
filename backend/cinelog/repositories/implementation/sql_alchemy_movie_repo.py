from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from cinelog.db.models import MovieORM
from cinelog.domain.models import Movie
from cinelog.repositories.interface.movie_repository import MovieRepository
from cinelog.exceptions.repository import (
    EntityNotFoundException,
    RepositoryOperationException,
    InvalidEntityDataException
)

TWO_PLACES = Decimal("0.01")


def locked_movie_query(movie_id: str):
    """SELECT ... FOR UPDATE on a single movie row.

    Holding this row lock for the rest of the transaction serialises every review
    mutation on the same movie while leaving other movies untouched. SQLite ignores
    the clause; its writer lock already serialises transactions.
    """
    return (
        select(MovieORM)
        .where(MovieORM.id == movie_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


class SQLAlchemyMovieRepo(MovieRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_domain(self, movie_orm: MovieORM) -> Movie:
        try:
            return Movie(
                id=movie_orm.id,
                title=movie_orm.title,
                genre=list(movie_orm.genre or []),
                release_year=movie_orm.release_year,
                director=movie_orm.director,
                actors=list(movie_orm.actors or []),
                synopsis=movie_orm.synopsis,
                poster_url=movie_orm.poster_url,
                trailer_url=movie_orm.trailer_url,
                runtime=movie_orm.runtime,
                average_rating=Decimal(movie_orm.average_rating or 0).quantize(TWO_PLACES),
                total_reviews=movie_orm.total_reviews or 0,
                created_at=movie_orm.created_at,
                updated_at=movie_orm.updated_at
            )
        except Exception as e:
            raise InvalidEntityDataException(f"Failed to convert movie data: {str(e)}")

    def _to_orm(self, movie: Movie) -> MovieORM:
        # aggregate columns are left to their defaults; only the aggregator writes them
        return MovieORM(
            id=movie.id,
            title=movie.title,
            genre=list(movie.genre),
            release_year=movie.release_year,
            director=movie.director,
            actors=list(movie.actors),
            synopsis=movie.synopsis,
            poster_url=movie.poster_url,
            trailer_url=movie.trailer_url,
            runtime=movie.runtime
        )

    def get_by_id(self, movie_id: str) -> Optional[Movie]:
        try:
            movie_orm = self.session.get(MovieORM, movie_id)
            if not movie_orm:
                return None
            return self._to_domain(movie_orm)
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get movie by ID: {str(e)}")

    def get_for_update(self, movie_id: str) -> Optional[Movie]:
        try:
            movie_orm = self.session.execute(locked_movie_query(movie_id)).scalar_one_or_none()
            if not movie_orm:
                return None
            return self._to_domain(movie_orm)
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to lock movie {movie_id}: {str(e)}")

    def get_all_items(self) -> List[Movie]:
        try:
            movies_orm = self.session.query(MovieORM).order_by(MovieORM.title).all()
            return [self._to_domain(movie_orm) for movie_orm in movies_orm]
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get all movies: {str(e)}")

    def get_most_reviewed(self, limit: int) -> List[Movie]:
        try:
            movies_orm = (
                self.session.query(MovieORM)
                .order_by(MovieORM.total_reviews.desc(), MovieORM.title)
                .limit(limit)
                .all()
            )
            return [self._to_domain(movie_orm) for movie_orm in movies_orm]
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get most reviewed movies: {str(e)}")

    def get_top_rated(self, limit: int) -> List[Movie]:
        try:
            movies_orm = (
                self.session.query(MovieORM)
                .order_by(MovieORM.average_rating.desc(), MovieORM.title)
                .limit(limit)
                .all()
            )
            return [self._to_domain(movie_orm) for movie_orm in movies_orm]
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get top rated movies: {str(e)}")

    def add_movie(self, movie: Movie) -> Movie:
        try:
            movie_orm = self._to_orm(movie)
            self.session.add(movie_orm)
            self.session.flush()
            return self._to_domain(movie_orm)
        except Exception as e:
            raise RepositoryOperationException(f"Failed to add movie: {str(e)}")

    def count(self) -> int:
        try:
            return self.session.query(func.count(MovieORM.id)).scalar() or 0
        except Exception as e:
            raise RepositoryOperationException(f"Failed to count movies: {str(e)}")

    def set_rating_aggregate(self, movie_id: str, average_rating: Decimal, total_reviews: int) -> None:
        try:
            result = self.session.execute(
                update(MovieORM)
                .where(MovieORM.id == movie_id)
                .values(average_rating=average_rating, total_reviews=total_reviews)
            )
        except Exception as e:
            raise RepositoryOperationException(f"Failed to store rating aggregate: {str(e)}")
        if result.rowcount == 0:
            raise EntityNotFoundException(f"Movie {movie_id} not found")
