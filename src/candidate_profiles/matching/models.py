"""Match results returned to the requester."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from candidate_profiles.profile.schema import Address, JobPreferences, Profile, ProfileModel


class MatchResult(ProfileModel):
    """
    A matched candidate: the public part of their profile plus the score.

    Contact details (email, phone, date of birth) are not exposed. Results
    are computed per request and never stored.
    """

    owner: str
    full_name: str
    job_title: str
    experience: Optional[float] = None
    skills: List[str] = Field(default_factory=list)
    address: Address = Field(default_factory=Address)
    linkedin: str = ""
    job_preferences: JobPreferences = Field(default_factory=JobPreferences)

    match_score: int = Field(..., ge=0, description="Overall match score")
    matched_skills: List[str] = Field(default_factory=list)

    @classmethod
    def from_profile(
        cls, profile: Profile, match_score: int, matched_skills: List[str]
    ) -> "MatchResult":
        return cls(
            owner=profile.owner,
            full_name=profile.full_name,
            job_title=profile.job_title,
            experience=profile.experience,
            skills=list(profile.skills),
            address=profile.address,
            linkedin=profile.linkedin,
            job_preferences=profile.job_preferences,
            match_score=match_score,
            matched_skills=matched_skills,
        )

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
