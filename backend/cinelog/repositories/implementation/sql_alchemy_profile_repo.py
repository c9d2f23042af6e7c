from sqlalchemy.orm import Session
from typing import Optional
from sqlalchemy.exc import IntegrityError

from cinelog.db.database import is_unique_violation

from cinelog.domain.models import Profile
from cinelog.db.models import ProfileORM
from cinelog.repositories.interface.profile_repository import ProfileRepository
from cinelog.exceptions.repository import (
    EntityNotFoundException,
    DuplicateEntityException,
    RepositoryOperationException,
)

class SQLAlchemyProfileRepo(ProfileRepository):
    def __init__(self, db: Session):
        self.db = db

    def _to_domain(self, profile_orm: ProfileORM) -> Profile:
        return Profile(
            id=profile_orm.id,
            user_id=profile_orm.user_id,
            username=profile_orm.username,
            display_name=profile_orm.display_name,
            avatar_url=profile_orm.avatar_url,
            bio=profile_orm.bio,
            favorite_genres=list(profile_orm.favorite_genres or []),
            created_at=profile_orm.created_at,
            updated_at=profile_orm.updated_at
        )

    def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        """Get a profile by the identity provider's user id"""
        try:
            profile_orm = self.db.query(ProfileORM).filter(ProfileORM.user_id == user_id).first()
            return self._to_domain(profile_orm) if profile_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get profile by user ID: {str(e)}")

    def get_by_username(self, username: str) -> Optional[Profile]:
        """Get a profile by username"""
        try:
            profile_orm = self.db.query(ProfileORM).filter(ProfileORM.username == username).first()
            return self._to_domain(profile_orm) if profile_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get profile by username: {str(e)}")

    def create(self, profile: Profile) -> Profile:
        try:
            profile_orm = ProfileORM(
                user_id=profile.user_id,
                username=profile.username,
                display_name=profile.display_name,
                avatar_url=profile.avatar_url,
                bio=profile.bio,
                favorite_genres=list(profile.favorite_genres)
            )
            self.db.add(profile_orm)
            self.db.flush()
            return self._to_domain(profile_orm)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise RepositoryOperationException(f"Failed to create profile: {str(e)}")
            raise DuplicateEntityException("Profile already exists with this user id or username")
        except Exception as e:
            raise RepositoryOperationException(f"Failed to create profile: {str(e)}")

    def update(self, profile: Profile) -> Profile:
        try:
            profile_orm = self.db.query(ProfileORM).filter(ProfileORM.user_id == profile.user_id).first()
            if not profile_orm:
                raise EntityNotFoundException(f"Profile for user {profile.user_id} not found")

            profile_orm.username = profile.username
            profile_orm.display_name = profile.display_name
            profile_orm.avatar_url = profile.avatar_url
            profile_orm.bio = profile.bio
            profile_orm.favorite_genres = list(profile.favorite_genres)

            self.db.flush()
            return self._to_domain(profile_orm)
        except EntityNotFoundException:
            raise
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise RepositoryOperationException(f"Failed to update profile: {str(e)}")
            raise DuplicateEntityException(f"Username {profile.username} is already taken")
        except Exception as e:
            raise RepositoryOperationException(f"Failed to update profile: {str(e)}")
