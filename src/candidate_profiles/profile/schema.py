"""
Pydantic models for candidate profiles.

Profiles are stored in the `profiles` collection, one document per owner,
with the owner identity as document ID. Documents use camelCase field names
(fullName, jobPreferences, workHistory); the models expose snake_case
attributes and translate through aliases.

Stored documents are not trusted to be complete: any nested structure that
is missing or null (skills, jobPreferences, education, ...) loads as its
empty default instead of failing.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class JobType(str, Enum):
    """Preferred working arrangement."""

    ON_SITE = "On-site"
    REMOTE = "Remote"
    HYBRID = "Hybrid"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


JOB_TYPES = [t.value for t in JobType]
GENDERS = [g.value for g in Gender]


class ProfileModel(BaseModel):
    """Base for all profile documents: camelCase aliases, enums stored as values."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class Address(ProfileModel):
    city: str = ""
    country: str = ""


class Certificate(ProfileModel):
    name: str = ""
    file: str = ""


class Education(ProfileModel):
    degree: str = ""
    institution: str = ""
    year: Optional[int] = None
    certificates: List[Certificate] = Field(default_factory=list)

    @field_validator("certificates", mode="before")
    @classmethod
    def _none_certificates(cls, value: Any) -> Any:
        return [] if value is None else value


class WorkHistoryEntry(ProfileModel):
    company: str = ""
    job_title: str = ""
    duration: str = ""
    achievements: str = ""


class JobPreferences(ProfileModel):
    title: str = ""
    type: Optional[JobType] = Field(
        default=None, description="On-site, Remote or Hybrid; None when the candidate has no preference"
    )
    salary: Optional[float] = None
    currency: str = "USD"
    location: str = ""


def unique_skills(skills: Any) -> List[str]:
    """
    Normalize a skills value to a list of distinct, non-blank strings.

    Order of first occurrence is kept; comparison is exact (case-sensitive).
    """
    if not skills:
        return []
    if isinstance(skills, str):
        skills = [skills]

    seen = set()
    result = []
    for skill in skills:
        if skill is None:
            continue
        name = str(skill).strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


class Profile(ProfileModel):
    """
    A candidate's professional profile.

    Exactly one profile exists per owner. `experience` is in years and is
    None when unknown (which is different from zero).
    """

    owner: str = Field(description="Owner identity; also the document ID")

    # Personal details
    full_name: str
    email: str
    phone_number: str = ""
    dob: Optional[date] = None
    nationality: str = ""
    gender: Optional[Gender] = None
    address: Address = Field(default_factory=Address)

    # Professional details
    job_title: str
    experience: Optional[float] = Field(default=None, ge=0)
    skills: List[str] = Field(default_factory=list)
    linkedin: str = ""
    education: Education = Field(default_factory=Education)
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)
    job_preferences: JobPreferences = Field(default_factory=JobPreferences)

    # Attachments
    resume: str = ""

    # Timestamps (maintained by the store)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _normalize_skills(cls, value: Any) -> List[str]:
        return unique_skills(value)

    @field_validator("address", "education", "job_preferences", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("work_history", mode="before")
    @classmethod
    def _none_work_history(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("gender", mode="before")
    @classmethod
    def _blank_gender(cls, value: Any) -> Any:
        return None if value == "" else value

    @property
    def job_type(self) -> Optional[str]:
        """Preferred job type value, or None when unset."""
        return self.job_preferences.type

    def to_firestore(self) -> Dict[str, Any]:
        """
        Convert to Firestore document format.

        Excludes the owner (it is the document ID), store-managed timestamps
        and None values, so absent experience stays absent in range queries.
        """
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"owner", "created_at", "updated_at"},
        )

    @classmethod
    def from_firestore(cls, doc_id: str, data: Dict[str, Any]) -> "Profile":
        """
        Create Profile from a Firestore document.

        Args:
            doc_id: Firestore document ID (the owner identity)
            data: Document data

        Returns:
            Profile instance
        """
        data = dict(data)
        data["owner"] = doc_id
        return cls.model_validate(data)

    def to_api(self) -> Dict[str, Any]:
        """JSON-ready representation returned by the HTTP layer."""
        return self.model_dump(mode="json", by_alias=True)
