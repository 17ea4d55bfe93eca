"""Profile-to-profile matching."""

from candidate_profiles.matching.engine import MatchEngine
from candidate_profiles.matching.models import MatchResult
from candidate_profiles.matching.scoring import score_candidate

__all__ = ["MatchEngine", "MatchResult", "score_candidate"]
