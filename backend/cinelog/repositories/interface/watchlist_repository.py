from abc import ABC, abstractmethod
from typing import List, Optional

from cinelog.domain.models import WatchlistEntry


class WatchlistRepository(ABC):
    @abstractmethod
    def get_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> Optional["WatchlistEntry"]:
        pass

    @abstractmethod
    def get_user_entries(self, user_id: str) -> List["WatchlistEntry"]:
        pass

    @abstractmethod
    def count_user_entries(self, user_id: str) -> int:
        pass

    @abstractmethod
    def add_entry(self, entry: WatchlistEntry) -> "WatchlistEntry":
        pass

    @abstractmethod
    def delete_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> bool:
        pass
