"""Candidate profile data model and submission handling."""

from candidate_profiles.profile.schema import (
    Address,
    Certificate,
    Education,
    Gender,
    JobPreferences,
    JobType,
    Profile,
    WorkHistoryEntry,
)
from candidate_profiles.profile.submission import (
    AttachmentPatch,
    ProfileSubmission,
    parse_submission,
)

__all__ = [
    "Address",
    "AttachmentPatch",
    "Certificate",
    "Education",
    "Gender",
    "JobPreferences",
    "JobType",
    "Profile",
    "ProfileSubmission",
    "WorkHistoryEntry",
    "parse_submission",
]
