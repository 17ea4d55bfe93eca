"""In-process stores for local development and tests."""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from candidate_profiles.profile.schema import Profile
from candidate_profiles.storage.base import CandidateQuery, ProfileStore
from candidate_profiles.storage.users import User, UserStore

logger = logging.getLogger(__name__)


class MemoryProfileStore(ProfileStore):
    """
    Dict-backed profile store.

    Documents are kept in their serialized form so callers can never mutate
    stored state through a returned Profile. Retrieval order is insertion
    order of first creation.
    """

    def __init__(self):
        self._documents: Dict[str, dict] = {}

    def get(self, owner: str) -> Optional[Profile]:
        data = self._documents.get(owner)
        if data is None:
            return None
        return Profile.from_firestore(owner, data)

    def find(self, query: CandidateQuery) -> List[Profile]:
        profiles = [Profile.from_firestore(owner, data) for owner, data in self._documents.items()]
        return [profile for profile in profiles if query.matches(profile)]

    def upsert(self, owner: str, profile: Profile) -> Profile:
        now = datetime.now(timezone.utc)
        previous = self._documents.get(owner)

        data = profile.to_firestore()
        data["createdAt"] = previous["createdAt"] if previous else now
        data["updatedAt"] = now
        self._documents[owner] = data

        logger.debug(f"{'Replaced' if previous else 'Created'} profile for {owner}")
        return Profile.from_firestore(owner, data)

    def __len__(self) -> int:
        return len(self._documents)


class MemoryUserStore(UserStore):
    """Dict-backed account store keyed by user ID."""

    def __init__(self):
        self._users: Dict[str, User] = {}

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    def create(self, user: User) -> User:
        stored = user.model_copy(
            update={"id": user.id or self.new_id(), "created_at": datetime.now(timezone.utc)}
        )
        self._users[stored.id] = stored
        return stored
