from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from cinelog.domain.models import Review

class ReviewRepository(ABC):
    @abstractmethod
    def get_by_id(self, review_id: str, refresh: bool = False) -> Optional["Review"]:
        """Get a review by id; refresh=True bypasses anything already loaded in the session"""
        pass

    @abstractmethod
    def get_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> Optional["Review"]:
        pass

    @abstractmethod
    def get_movie_reviews(self, movie_id: str) -> List["Review"]:
        pass

    @abstractmethod
    def get_user_reviews(self, user_id: str) -> List["Review"]:
        pass

    @abstractmethod
    def get_recent_reviews(self, limit: int) -> List["Review"]:
        pass

    @abstractmethod
    def get_rating_totals(self, movie_id: str) -> Tuple[int, int]:
        pass

    @abstractmethod
    def add_review(self, review: Review) -> "Review":
        pass

    @abstractmethod
    def update_review(self, review: Review) -> "Review":
        pass

    @abstractmethod
    def delete_by_id(self, review_id: str) -> bool:
        pass
