"""Tests for the in-memory stores and the candidate query."""

import pytest

from candidate_profiles.storage import CandidateQuery, MemoryProfileStore, MemoryUserStore, User


@pytest.fixture
def store():
    """Empty in-memory profile store."""
    return MemoryProfileStore()


class TestMemoryProfileStore:
    """Test MemoryProfileStore."""

    def test_get_missing(self, store):
        """Test get returns None for unknown owners."""
        assert store.get("nobody") is None

    def test_upsert_creates_then_replaces(self, store, make_profile):
        """Test upsert keeps exactly one profile per owner."""
        first = store.upsert("u1", make_profile("u1", skills=["Go"]))
        second = store.upsert("u1", make_profile("u1", skills=["Rust"], job_title="SRE"))

        assert len(store) == 1
        assert store.get("u1").skills == ["Rust"]
        assert store.get("u1").job_title == "SRE"
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at

    def test_returned_profiles_are_copies(self, store, make_profile):
        """Test mutating a returned profile does not change stored state."""
        store.upsert("u1", make_profile("u1", skills=["Go"]))

        store.get("u1").skills.append("Rust")

        assert store.get("u1").skills == ["Go"]

    def test_find_applies_query(self, store, make_profile):
        """Test find returns only profiles satisfying the query, in insertion order."""
        store.upsert("me", make_profile("me", skills=["Go"]))
        store.upsert("b", make_profile("b", skills=["Go"]))
        store.upsert("a", make_profile("a", skills=["Java"], job_type="Remote"))
        store.upsert("c", make_profile("c", skills=["Java"]))

        found = store.find(CandidateQuery(exclude_owner="me", skills=["Go"], job_type="Remote"))

        assert [p.owner for p in found] == ["b", "a"]


class TestCandidateQuery:
    """Test the reference filter semantics."""

    def test_for_requester_with_experience(self, make_profile):
        """Test the experience range is centred on the requester."""
        query = CandidateQuery.for_requester(make_profile("me", skills=["Go"], experience=4), 2)

        assert (query.experience_min, query.experience_max) == (2, 6)
        assert query.has_experience_range

    def test_for_requester_without_experience(self, make_profile):
        """Test no range is set when experience is unknown."""
        query = CandidateQuery.for_requester(make_profile("me", skills=["Go"]))

        assert not query.has_experience_range

    def test_unset_type_matches_nothing(self, make_profile):
        """Test a query without job type does not match untyped profiles by type."""
        query = CandidateQuery(exclude_owner="me")

        assert query.is_unsatisfiable()
        assert not query.matches(make_profile("them"))


class TestMemoryUserStore:
    """Test MemoryUserStore."""

    def test_create_assigns_id(self):
        """Test created users get an ID and creation time."""
        users = MemoryUserStore()

        user = users.create(User(full_name="Ada", email="Ada@Example.com", password_hash="x"))

        assert user.id
        assert user.created_at is not None
        assert users.get(user.id) == user

    def test_get_by_email_case_insensitive(self):
        """Test email lookup ignores case and whitespace."""
        users = MemoryUserStore()
        user = users.create(User(full_name="Ada", email="ada@example.com", password_hash="x"))

        assert users.get_by_email(" ADA@example.com ") == user
        assert users.get_by_email("bob@example.com") is None
