"""Store candidate profiles in Firestore."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from google.cloud import firestore as gcloud_firestore

from candidate_profiles.exceptions import StorageError
from candidate_profiles.logging_config import get_structured_logger
from candidate_profiles.profile.schema import Profile
from candidate_profiles.storage.base import CandidateQuery, ProfileStore
from candidate_profiles.storage.firestore_client import FirestoreClient

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)

# Firestore limits the values of an array-contains-any filter, so skills are queried in chunks.
# Current Firestore allows 30 values; 10 keeps every query within the older limit as well.
SKILLS_CHUNK_SIZE = 10


class FirestoreProfileStore(ProfileStore):
    """
    Profiles in the `profiles` collection, one document per owner.

    The owner identity is the document ID, so upserts replace the existing
    document instead of ever creating a second one.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        database_name: str = "(default)",
        collection_name: str = "profiles",
    ):
        """
        Initialize Firestore profile storage.

        Args:
            credentials_path: Path to Firebase service account JSON.
            database_name: Firestore database name (default: "(default)").
            collection_name: Collection holding profile documents.
        """
        self.database_name = database_name
        self.collection_name = collection_name
        self.db = FirestoreClient.get_client(database_name, credentials_path)

    def get(self, owner: str) -> Optional[Profile]:
        if not self.db:
            raise RuntimeError("Firestore not initialized")

        try:
            doc = self.db.collection(self.collection_name).document(owner).get()
            if not doc.exists:
                return None
            return Profile.from_firestore(doc.id, doc.to_dict() or {})

        except Exception as e:
            logger.error(
                f"Error getting profile for {owner} ({type(e).__name__}): {str(e)}",
                exc_info=True,
            )
            raise StorageError(f"Failed to load profile for {owner}") from e

    def upsert(self, owner: str, profile: Profile) -> Profile:
        """
        Create or fully replace the owner's profile.

        The creation timestamp of an existing document is carried over;
        every other field comes from `profile`.
        """
        if not self.db:
            raise RuntimeError("Firestore not initialized")

        data = profile.to_firestore()
        data["updatedAt"] = gcloud_firestore.SERVER_TIMESTAMP

        try:
            doc_ref = self.db.collection(self.collection_name).document(owner)
            snapshot = doc_ref.get()
            if snapshot.exists:
                data["createdAt"] = (snapshot.to_dict() or {}).get(
                    "createdAt", gcloud_firestore.SERVER_TIMESTAMP
                )
                operation = "update"
            else:
                data["createdAt"] = gcloud_firestore.SERVER_TIMESTAMP
                operation = "create"

            doc_ref.set(data)
            slogger.database_activity(operation, self.collection_name, "success", {"owner": owner})

            stored = doc_ref.get()
            return Profile.from_firestore(owner, stored.to_dict() or {})

        except Exception as e:
            logger.error(
                f"Error saving profile for {owner} ({type(e).__name__}): {str(e)}",
                exc_info=True,
            )
            raise StorageError(f"Failed to save profile for {owner}") from e

    def find(self, query: CandidateQuery) -> List[Profile]:
        """
        Query candidate profiles.

        Firestore cannot OR an array filter with an equality filter in one
        simple query, so one query runs per skills chunk plus one for the
        job type; results are merged by document ID in retrieval order.
        The experience range is pushed into every query.
        """
        if not self.db:
            raise RuntimeError("Firestore not initialized")

        if query.is_unsatisfiable():
            return []

        try:
            results: Dict[str, Profile] = {}

            skills = list(query.skills)
            for i in range(0, len(skills), SKILLS_CHUNK_SIZE):
                chunk = skills[i : i + SKILLS_CHUNK_SIZE]
                fs_query = self._base_query(query).where("skills", "array_contains_any", chunk)
                self._collect(fs_query.stream(), query, results)

            if query.job_type is not None:
                fs_query = self._base_query(query).where("jobPreferences.type", "==", query.job_type)
                self._collect(fs_query.stream(), query, results)

            slogger.database_activity(
                "query", self.collection_name, "success", {"candidates": len(results)}
            )
            return list(results.values())

        except Exception as e:
            logger.error(
                f"Error querying candidate profiles ({type(e).__name__}): {str(e)}",
                exc_info=True,
            )
            raise StorageError("Failed to query candidate profiles") from e

    def _base_query(self, query: CandidateQuery) -> Any:
        fs_query = self.db.collection(self.collection_name)
        if query.has_experience_range:
            low, high = query.experience_bounds()
            fs_query = fs_query.where("experience", ">=", low)
            fs_query = fs_query.where("experience", "<=", high)
        return fs_query

    def _collect(
        self, docs: Iterable[Any], query: CandidateQuery, results: Dict[str, Profile]
    ) -> None:
        for doc in docs:
            if doc.id == query.exclude_owner or doc.id in results:
                continue
            try:
                profile = Profile.from_firestore(doc.id, doc.to_dict() or {})
            except ValueError as e:
                # Skip documents written outside this service that fail validation
                logger.warning(f"Skipping malformed profile document {doc.id}: {e}")
                continue
            results[doc.id] = profile
