"""Read and write a user's own profile."""

from typing import TYPE_CHECKING, Tuple

from candidate_profiles.exceptions import NotFound
from candidate_profiles.logging_config import get_structured_logger
from candidate_profiles.profile.schema import Profile
from candidate_profiles.profile.submission import ProfileSubmission

if TYPE_CHECKING:
    from candidate_profiles.storage.base import ProfileStore

slogger = get_structured_logger(__name__)


class ProfileService:
    """Profile edit operations scoped to one owner identity per call."""

    def __init__(self, store: "ProfileStore"):
        self.store = store

    def get(self, owner: str) -> Profile:
        """
        Return the owner's profile.

        Raises:
            NotFound: The owner has not created a profile yet.
        """
        profile = self.store.get(owner)
        if profile is None:
            slogger.profile_activity(owner, "not_found")
            raise NotFound("Profile not found")
        return profile

    def save(self, owner: str, submission: ProfileSubmission) -> Tuple[Profile, bool]:
        """
        Create or replace the owner's profile from a validated submission.

        Attachments the submission omits keep their stored values.

        Returns:
            (stored profile, True if it was created rather than replaced)
        """
        existing = self.store.get(owner)
        profile = submission.to_profile(owner, existing)
        stored = self.store.upsert(owner, profile)

        created = existing is None
        slogger.profile_activity(
            owner,
            "created" if created else "replaced",
            {"skills": len(stored.skills), "certificates": len(stored.education.certificates)},
        )
        return stored, created
