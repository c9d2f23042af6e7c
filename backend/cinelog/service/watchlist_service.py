import logging
from typing import List

from sqlalchemy.orm import Session

from cinelog.db.database import transaction
from cinelog.domain.models import WatchlistEntry
from cinelog.repositories import WatchlistRepository, MovieRepository
from cinelog.exceptions.repository import DuplicateEntityException
from cinelog.exceptions.service import DuplicateEntryException, NotFoundException

logger = logging.getLogger(__name__)


class WatchlistService:
    def __init__(self, session: Session, watchlist_repo: WatchlistRepository, movie_repo: MovieRepository):
        self.session = session
        self.watchlist_repo = watchlist_repo
        self.movie_repo = movie_repo

    def add(self, user_id: str, movie_id: str) -> WatchlistEntry:
        try:
            with transaction(self.session):
                if not self.movie_repo.get_by_id(movie_id):
                    raise NotFoundException(f"Movie with ID {movie_id} not found")

                if self.watchlist_repo.get_by_user_id_and_movie_id(user_id, movie_id):
                    raise DuplicateEntryException(f"Movie {movie_id} is already on the watchlist")

                entry = self.watchlist_repo.add_entry(WatchlistEntry(user_id=user_id, movie_id=movie_id))
        except DuplicateEntityException as e:
            raise DuplicateEntryException(str(e)) from e

        logger.info(f"User {user_id} added movie {movie_id} to their watchlist")
        return entry

    def remove(self, user_id: str, movie_id: str) -> bool:
        """Remove a movie from the watchlist. Returns False when it was not there."""
        with transaction(self.session):
            removed = self.watchlist_repo.delete_by_user_id_and_movie_id(user_id, movie_id)

        if removed:
            logger.info(f"User {user_id} removed movie {movie_id} from their watchlist")
        return removed

    def list(self, user_id: str) -> List[WatchlistEntry]:
        return self.watchlist_repo.get_user_entries(user_id)

    def contains(self, user_id: str, movie_id: str) -> bool:
        return self.watchlist_repo.get_by_user_id_and_movie_id(user_id, movie_id) is not None

    def movie_ids(self, user_id: str) -> List[str]:
        return [entry.movie_id for entry in self.watchlist_repo.get_user_entries(user_id)]
