"""
Profile-to-profile match scoring.

score = 10 per shared skill
      + 20 when both job types are set and equal
      + 5 * max(0, 5 - |experience difference|) when both experiences are known

The experience term is floored to an integer, so the score is always a
non-negative integer.
"""

import math
from typing import List, Optional

from candidate_profiles.profile.schema import Profile

SKILL_POINTS = 10
JOB_TYPE_POINTS = 20
EXPERIENCE_POINTS = 5
EXPERIENCE_HORIZON = 5


def shared_skills(requester: Profile, candidate: Profile) -> List[str]:
    """Skills both profiles list, in the requester's order."""
    candidate_skills = set(candidate.skills)
    return [skill for skill in requester.skills if skill in candidate_skills]


def job_type_matches(requester: Profile, candidate: Profile) -> bool:
    """Equal job types. An unset type never matches, not even another unset one."""
    return requester.job_type is not None and requester.job_type == candidate.job_type


def experience_points(requester_years: Optional[float], candidate_years: Optional[float]) -> int:
    if requester_years is None or candidate_years is None:
        return 0
    distance = abs(candidate_years - requester_years)
    points = max(0, EXPERIENCE_HORIZON - distance) * EXPERIENCE_POINTS
    # round first so 5.1 vs 3.1 (distance 2.0000000000000004) still earns 15
    return math.floor(round(points, 6))


def score_candidate(requester: Profile, candidate: Profile) -> int:
    score = SKILL_POINTS * len(shared_skills(requester, candidate))
    if job_type_matches(requester, candidate):
        score += JOB_TYPE_POINTS
    score += experience_points(requester.experience, candidate.experience)
    return score
