"""Shared fixtures."""

import pytest

from candidate_profiles.profile.schema import Profile


@pytest.fixture
def make_profile():
    """Factory for profiles with sensible required fields."""

    def _make(owner, skills=None, job_type=None, experience=None, **extra):
        data = {
            "owner": owner,
            "full_name": extra.pop("full_name", f"Candidate {owner}"),
            "email": extra.pop("email", f"{owner}@example.com"),
            "job_title": extra.pop("job_title", "Software Engineer"),
            "skills": skills or [],
            "experience": experience,
            "job_preferences": {"type": job_type},
        }
        data.update(extra)
        return Profile(**data)

    return _make
