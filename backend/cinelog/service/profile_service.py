import logging
import re
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from cinelog.db.database import transaction
from cinelog.domain.models import Profile, ProfileStats
from cinelog.repositories import ProfileRepository, ReviewRepository, WatchlistRepository
from cinelog.service.rating_aggregator import compute_average
from cinelog.exceptions.repository import DuplicateEntityException
from cinelog.exceptions.service import (
    InvalidInputException,
    DuplicateEntryException,
    ForbiddenException,
    NotFoundException
)

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50
PROVISION_ATTEMPTS = 2
_UNSET = object()


def username_from_email(email: Optional[str]) -> str:
    local_part = (email or '').split('@', 1)[0].strip()
    return local_part or 'user'


class ProfileService:
    def __init__(
        self,
        session: Session,
        profile_repo: ProfileRepository,
        review_repo: ReviewRepository,
        watchlist_repo: WatchlistRepository
    ):
        self.session = session
        self.profile_repo = profile_repo
        self.review_repo = review_repo
        self.watchlist_repo = watchlist_repo

    def provision(
        self,
        user_id: str,
        email: Optional[str] = None,
        username: Optional[str] = None,
        display_name: Optional[str] = None
    ) -> Profile:
        """Create the profile for a newly seen identity; return the existing one otherwise."""
        existing = self.profile_repo.get_by_user_id(user_id)
        if existing:
            return existing

        base_username = (username or username_from_email(email))[:USERNAME_MAX_LENGTH]

        for attempt in range(PROVISION_ATTEMPTS):
            profile = Profile(
                user_id=user_id,
                username=self._free_username(base_username),
                display_name=display_name or username_from_email(email)
            )
            try:
                with transaction(self.session):
                    created = self.profile_repo.create(profile)
                break
            except DuplicateEntityException:
                # lost a race: either this identity was provisioned concurrently,
                # or another identity took the same username
                created = self.profile_repo.get_by_user_id(user_id)
                if created:
                    break
                if attempt == PROVISION_ATTEMPTS - 1:
                    raise
                logger.warning(f"Username {profile.username} was taken concurrently, retrying for user {user_id}")

        logger.info(f"Provisioned profile {created.username} for user {user_id}")
        return created

    def _free_username(self, base: str) -> str:
        candidate = base
        suffix = 1
        while self.profile_repo.get_by_username(candidate):
            suffix += 1
            tail = f"-{suffix}"
            candidate = f"{base[:USERNAME_MAX_LENGTH - len(tail)]}{tail}"
        return candidate

    def get_profile(self, user_id: str) -> Profile:
        profile = self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundException(f"Profile for user {user_id} not found")
        return profile

    def update_profile(
        self,
        user_id: str,
        acting_user_id: str,
        username=_UNSET,
        display_name=_UNSET,
        avatar_url=_UNSET,
        bio=_UNSET,
        favorite_genres=_UNSET
    ) -> Profile:
        if user_id != acting_user_id:
            raise ForbiddenException("Profiles can only be edited by their owner")

        profile = self.get_profile(user_id)

        if username is not _UNSET:
            username = (username or '').strip()
            if not username or len(username) > USERNAME_MAX_LENGTH or not re.fullmatch(r"[\w.\-]+", username):
                raise InvalidInputException("Username must be 1-50 letters, digits, '.', '-' or '_'")
            taken_by = self.profile_repo.get_by_username(username)
            if taken_by and taken_by.user_id != user_id:
                raise DuplicateEntryException(f"Username {username} is already taken")
            profile.username = username
        if display_name is not _UNSET:
            profile.display_name = display_name
        if avatar_url is not _UNSET:
            profile.avatar_url = avatar_url
        if bio is not _UNSET:
            profile.bio = bio
        if favorite_genres is not _UNSET:
            profile.favorite_genres = self._clean_genres(favorite_genres)

        try:
            with transaction(self.session):
                updated = self.profile_repo.update(profile)
        except DuplicateEntityException as e:
            raise DuplicateEntryException(str(e)) from e

        logger.info(f"User {user_id} updated their profile")
        return updated

    @staticmethod
    def _clean_genres(genres: Optional[List[str]]) -> List[str]:
        cleaned = []
        for genre in genres or []:
            genre = genre.strip()
            if genre and genre not in cleaned:
                cleaned.append(genre)
        return cleaned

    def stats(self, user_id: str) -> ProfileStats:
        profile = self.get_profile(user_id)
        reviews = self.review_repo.get_user_reviews(user_id)
        average: Decimal = compute_average(len(reviews), sum(r.rating for r in reviews))

        return ProfileStats(
            total_reviews=len(reviews),
            average_rating=average,
            watchlist_count=self.watchlist_repo.count_user_entries(user_id),
            favorite_genre=profile.favorite_genres[0] if profile.favorite_genres else ''
        )
