"""Rank other candidates against the requester's own profile."""

import logging
from typing import List

from candidate_profiles.exceptions import NotFound
from candidate_profiles.logging_config import get_structured_logger
from candidate_profiles.matching.models import MatchResult
from candidate_profiles.matching.scoring import score_candidate, shared_skills
from candidate_profiles.storage.base import CandidateQuery, ProfileStore

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)


class MatchEngine:
    """
    Deterministic overlap-based matcher.

    Every candidate passing the coarse filter is scored before the list is
    cut to `max_results`, so a high-scoring candidate is never lost to
    retrieval order. Equal scores keep retrieval order.
    """

    def __init__(self, store: ProfileStore, max_results: int = 10, experience_window: float = 2):
        """
        Initialize match engine.

        Args:
            store: Profile store to read the requester and candidates from.
            max_results: Maximum number of matches returned.
            experience_window: Allowed experience distance (years, inclusive)
                when the requester's experience is known.
        """
        self.store = store
        self.max_results = max_results
        self.experience_window = experience_window

    def find_matches(self, owner: str) -> List[MatchResult]:
        """
        Find the candidates most similar to the owner's profile.

        Args:
            owner: Authenticated requester identity.

        Returns:
            Up to `max_results` matches, best first. Empty when no candidate
            passes the filter.

        Raises:
            NotFound: The requester has no profile yet.
        """
        requester = self.store.get(owner)
        if requester is None:
            slogger.match_activity(owner, "rejected", {"reason": "no profile"})
            raise NotFound("Profile not found. Create your profile before viewing matches")

        query = CandidateQuery.for_requester(requester, self.experience_window)
        if query.is_unsatisfiable():
            slogger.match_activity(owner, "completed", {"candidates": 0, "returned": 0})
            return []

        candidates = [c for c in self.store.find(query) if query.matches(c)]

        results = [
            MatchResult.from_profile(
                candidate,
                match_score=score_candidate(requester, candidate),
                matched_skills=shared_skills(requester, candidate),
            )
            for candidate in candidates
        ]
        # sorted() is stable, also with reverse=True
        results = sorted(results, key=lambda r: r.match_score, reverse=True)[: self.max_results]

        slogger.match_activity(
            owner,
            "completed",
            {
                "candidates": len(candidates),
                "returned": len(results),
                "top_score": results[0].match_score if results else 0,
            },
        )
        return results
