from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from cinelog.db.database import is_unique_violation

from cinelog.db.models import WatchlistORM
from cinelog.domain.models import WatchlistEntry
from cinelog.repositories.interface.watchlist_repository import WatchlistRepository
from cinelog.repositories.implementation.sql_alchemy_movie_repo import SQLAlchemyMovieRepo
from cinelog.exceptions.repository import (
    DuplicateEntityException,
    RepositoryOperationException,
    InvalidEntityDataException
)


class SQLAlchemyWatchlistRepo(WatchlistRepository):
    def __init__(self, session: Session):
        self.session = session
        self._movies = SQLAlchemyMovieRepo(session)

    def _to_domain(self, entry_orm: WatchlistORM, with_movie: bool = False) -> WatchlistEntry:
        try:
            entry = WatchlistEntry(
                id=entry_orm.id,
                user_id=entry_orm.user_id,
                movie_id=entry_orm.movie_id,
                added_at=entry_orm.added_at
            )
            if with_movie and entry_orm.movie is not None:
                entry.movie = self._movies._to_domain(entry_orm.movie)
            return entry
        except Exception as e:
            raise InvalidEntityDataException(f"Failed to convert watchlist data: {str(e)}")

    def get_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> Optional[WatchlistEntry]:
        try:
            entry_orm = self.session.query(WatchlistORM).filter(
                WatchlistORM.user_id == user_id,
                WatchlistORM.movie_id == movie_id
            ).first()
            return self._to_domain(entry_orm) if entry_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get watchlist entry: {str(e)}")

    def get_user_entries(self, user_id: str) -> List[WatchlistEntry]:
        try:
            entries_orm = (
                self.session.query(WatchlistORM)
                .options(joinedload(WatchlistORM.movie))
                .filter(WatchlistORM.user_id == user_id)
                .order_by(WatchlistORM.added_at.desc())
                .all()
            )
            return [self._to_domain(e, with_movie=True) for e in entries_orm]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get watchlist: {str(e)}")

    def count_user_entries(self, user_id: str) -> int:
        try:
            return self.session.query(func.count(WatchlistORM.id)).filter(
                WatchlistORM.user_id == user_id
            ).scalar() or 0
        except Exception as e:
            raise RepositoryOperationException(f"Failed to count watchlist entries: {str(e)}")

    def add_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        try:
            entry_orm = WatchlistORM(user_id=entry.user_id, movie_id=entry.movie_id)
            self.session.add(entry_orm)
            self.session.flush()
            return self._to_domain(entry_orm)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise RepositoryOperationException(f"Failed to add watchlist entry: {str(e)}")
            raise DuplicateEntityException(
                f"Movie {entry.movie_id} is already on the watchlist of user {entry.user_id}"
            )
        except Exception as e:
            raise RepositoryOperationException(f"Failed to add watchlist entry: {str(e)}")

    def delete_by_user_id_and_movie_id(self, user_id: str, movie_id: str) -> bool:
        try:
            deleted = self.session.query(WatchlistORM).filter(
                WatchlistORM.user_id == user_id,
                WatchlistORM.movie_id == movie_id
            ).delete(synchronize_session=False)
            self.session.flush()
            return deleted > 0
        except Exception as e:
            raise RepositoryOperationException(f"Failed to delete watchlist entry: {str(e)}")
