"""Candidate profile management and profile-to-profile matching."""

__version__ = "1.0.0"
