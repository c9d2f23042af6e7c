from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from cinelog.domain.models import Movie


class MovieRepository(ABC):
    @abstractmethod
    def get_by_id(self, movie_id: str) -> Optional["Movie"]:
        pass

    @abstractmethod
    def get_for_update(self, movie_id: str) -> Optional["Movie"]:
        pass

    @abstractmethod
    def get_all_items(self) -> List["Movie"]:
        pass

    @abstractmethod
    def get_most_reviewed(self, limit: int) -> List["Movie"]:
        pass

    @abstractmethod
    def get_top_rated(self, limit: int) -> List["Movie"]:
        pass

    @abstractmethod
    def add_movie(self, movie: Movie) -> "Movie":
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def set_rating_aggregate(self, movie_id: str, average_rating: Decimal, total_reviews: int) -> None:
        pass
