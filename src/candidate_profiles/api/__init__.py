"""HTTP surface."""

from candidate_profiles.api.app import create_app

__all__ = ["create_app"]
