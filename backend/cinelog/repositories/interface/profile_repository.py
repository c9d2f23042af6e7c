from abc import ABC, abstractmethod
from typing import Optional

from cinelog.domain.models import Profile


class ProfileRepository(ABC):
    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Optional["Profile"]:
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> Optional["Profile"]:
        pass

    @abstractmethod
    def create(self, profile: "Profile") -> "Profile":
        pass

    @abstractmethod
    def update(self, profile: "Profile") -> "Profile":
        pass
