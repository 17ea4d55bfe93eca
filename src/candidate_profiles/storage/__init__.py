"""Profile, account and upload storage."""

from typing import Any, Dict, Tuple

from candidate_profiles.storage.base import CandidateQuery, ProfileStore
from candidate_profiles.storage.file_store import LocalFileStore
from candidate_profiles.storage.memory import MemoryProfileStore, MemoryUserStore
from candidate_profiles.storage.users import User, UserStore


def create_stores(config: Dict[str, Any]) -> Tuple[ProfileStore, UserStore]:
    """
    Create the profile and user stores selected by `storage.backend`.

    Args:
        config: Application configuration (see candidate_profiles.config).

    Returns:
        (profile_store, user_store)
    """
    storage_config = config.get("storage", {})
    backend = storage_config.get("backend", "firestore").lower()

    if backend == "memory":
        return MemoryProfileStore(), MemoryUserStore()

    if backend == "firestore":
        from candidate_profiles.storage.firestore_profiles import FirestoreProfileStore
        from candidate_profiles.storage.users import FirestoreUserStore

        database_name = storage_config.get("database_name", "(default)")
        credentials_path = storage_config.get("credentials_path")
        return (
            FirestoreProfileStore(
                credentials_path=credentials_path,
                database_name=database_name,
                collection_name=storage_config.get("profiles_collection", "profiles"),
            ),
            FirestoreUserStore(
                credentials_path=credentials_path,
                database_name=database_name,
                collection_name=storage_config.get("users_collection", "users"),
            ),
        )

    raise ValueError(f"Unknown storage backend: {backend}. Use 'firestore' or 'memory'")


__all__ = [
    "CandidateQuery",
    "LocalFileStore",
    "MemoryProfileStore",
    "MemoryUserStore",
    "ProfileStore",
    "User",
    "UserStore",
    "create_stores",
]
