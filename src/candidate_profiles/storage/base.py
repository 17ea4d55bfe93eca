"""Profile store contract and the coarse candidate query."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from candidate_profiles.profile.schema import Profile

# Slack on the inclusive experience bounds so that 2.2 vs 0.2 counts as 2 years apart,
# as it does in scoring
EXPERIENCE_TOLERANCE = 1e-6


@dataclass
class CandidateQuery:
    """
    Coarse candidate filter for a match request.

    A profile qualifies when it is not the requester's own AND (shares at
    least one skill OR has the same job type) AND, when an experience range
    is set, has an experience inside it. A job type of None matches nothing.

    Stores translate this into native predicates; `matches` is the reference
    semantics and is re-applied to whatever a store returns.
    """

    exclude_owner: str
    skills: List[str] = field(default_factory=list)
    job_type: Optional[str] = None
    experience_min: Optional[float] = None
    experience_max: Optional[float] = None

    @classmethod
    def for_requester(cls, requester: Profile, experience_window: float = 2) -> "CandidateQuery":
        """Build the query for candidates similar to `requester`."""
        query = cls(
            exclude_owner=requester.owner,
            skills=list(requester.skills),
            job_type=requester.job_type,
        )
        if requester.experience is not None:
            query.experience_min = requester.experience - experience_window
            query.experience_max = requester.experience + experience_window
        return query

    @property
    def has_experience_range(self) -> bool:
        return self.experience_min is not None and self.experience_max is not None

    def experience_bounds(self) -> Tuple[float, float]:
        """Inclusive (low, high) experience bounds, widened by EXPERIENCE_TOLERANCE."""
        return (
            self.experience_min - EXPERIENCE_TOLERANCE,
            self.experience_max + EXPERIENCE_TOLERANCE,
        )

    def is_unsatisfiable(self) -> bool:
        """True when no profile can match (no skills and no job type)."""
        return not self.skills and self.job_type is None

    def matches(self, profile: Profile) -> bool:
        if profile.owner == self.exclude_owner:
            return False

        shares_skill = bool(set(self.skills) & set(profile.skills))
        same_type = self.job_type is not None and profile.job_type == self.job_type
        if not (shares_skill or same_type):
            return False

        if self.has_experience_range:
            if profile.experience is None:
                return False
            low, high = self.experience_bounds()
            return low <= profile.experience <= high
        return True


class ProfileStore(ABC):
    """Durable record of one profile per owner."""

    @abstractmethod
    def get(self, owner: str) -> Optional[Profile]:
        """Return the owner's profile, or None if they have not created one."""

    @abstractmethod
    def find(self, query: CandidateQuery) -> List[Profile]:
        """Return profiles satisfying `query`, in store retrieval order."""

    @abstractmethod
    def upsert(self, owner: str, profile: Profile) -> Profile:
        """Create or fully replace the owner's profile and return the stored version."""
