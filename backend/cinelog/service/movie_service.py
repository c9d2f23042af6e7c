from typing import List, Optional
from cinelog.config import FEATURED_LIMIT, TOP_RATED_LIMIT
from cinelog.domain.models import Movie
from cinelog.repositories.interface.movie_repository import MovieRepository
from cinelog.exceptions.service import InvalidInputException, NotFoundException

SORT_KEYS = {
    'title': (lambda movie: movie.title.lower(), False),
    'year': (lambda movie: movie.release_year or 0, True),
    'rating': (lambda movie: movie.average_rating, True),
    'reviews': (lambda movie: movie.total_reviews, True),
}


class MovieService:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    def get_movie(self, movie_id: str) -> Movie:
        movie: Optional[Movie] = self.movie_repository.get_by_id(movie_id)
        if movie is None:
            raise NotFoundException(f"Movie with ID {movie_id} not found")
        return movie

    def browse(
        self,
        search: Optional[str] = None,
        genre: Optional[str] = None,
        year: Optional[int] = None,
        sort_by: str = 'title'
    ) -> List[Movie]:
        """Filter the catalog by free text, genre and year, then sort it.

        Free text matches title, director or any actor, case-insensitively.
        """
        if sort_by not in SORT_KEYS:
            raise InvalidInputException(f"Unknown sort key '{sort_by}', expected one of {sorted(SORT_KEYS)}")

        movies: List[Movie] = self.movie_repository.get_all_items()

        if search and search.strip():
            needle = search.strip().lower()
            movies = [
                m for m in movies
                if needle in m.title.lower()
                or needle in (m.director or '').lower()
                or any(needle in actor.lower() for actor in m.actors)
            ]

        if genre:
            movies = [m for m in movies if genre in m.genre]

        if year is not None:
            movies = [m for m in movies if m.release_year == year]

        key, reverse = SORT_KEYS[sort_by]
        return sorted(movies, key=key, reverse=reverse)

    def featured(self, limit: int = FEATURED_LIMIT) -> List[Movie]:
        return self.movie_repository.get_most_reviewed(limit)

    def top_rated(self, limit: int = TOP_RATED_LIMIT) -> List[Movie]:
        return self.movie_repository.get_top_rated(limit)

    def genres(self) -> List[str]:
        return sorted({g for movie in self.movie_repository.get_all_items() for g in movie.genre})
