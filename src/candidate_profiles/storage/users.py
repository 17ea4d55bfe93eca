"""User account records and their stores."""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from google.cloud import firestore as gcloud_firestore
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from candidate_profiles.exceptions import StorageError
from candidate_profiles.storage.firestore_client import FirestoreClient

logger = logging.getLogger(__name__)


class User(BaseModel):
    """An account that can own a profile. Emails are stored lower-cased."""

    id: Optional[str] = None  # Set by the store
    full_name: str
    email: str
    password_hash: str
    phone_number: str = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    def to_firestore(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})

    @classmethod
    def from_firestore(cls, doc_id: str, data: Dict[str, Any]) -> "User":
        data = dict(data)
        data["id"] = doc_id
        return cls.model_validate(data)


class UserStore(ABC):
    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        """Return the user with this ID, or None."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return the user registered with this email (case-insensitive), or None."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Persist a new user and return it with its ID assigned."""

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex


class FirestoreUserStore(UserStore):
    """Stores accounts in the Firestore `users` collection."""

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        database_name: str = "(default)",
        collection_name: str = "users",
    ):
        """
        Initialize user store.

        Args:
            credentials_path: Path to Firebase service account JSON (optional).
            database_name: Firestore database name
            collection_name: Collection holding user documents
        """
        self.db = FirestoreClient.get_client(database_name, credentials_path)
        self.collection_name = collection_name

    def get(self, user_id: str) -> Optional[User]:
        try:
            doc = self.db.collection(self.collection_name).document(user_id).get()
            if doc.exists:
                return User.from_firestore(doc.id, doc.to_dict())
            return None

        except Exception as e:
            logger.error(
                f"Error getting user {user_id} ({type(e).__name__}): {e}", exc_info=True
            )
            raise StorageError(f"Failed to load user {user_id}") from e

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            docs = (
                self.db.collection(self.collection_name)
                .where("email", "==", email.strip().lower())
                .limit(1)
                .stream()
            )
            for doc in docs:
                return User.from_firestore(doc.id, doc.to_dict())
            return None

        except Exception as e:
            logger.error(
                f"Error looking up user by email ({type(e).__name__}): {e}", exc_info=True
            )
            raise StorageError("Failed to look up user by email") from e

    def create(self, user: User) -> User:
        user_id = user.id or self.new_id()
        data = user.to_firestore()
        data["createdAt"] = gcloud_firestore.SERVER_TIMESTAMP

        try:
            self.db.collection(self.collection_name).document(user_id).set(data)
            logger.info(f"Created user {user_id}")
            return user.model_copy(update={"id": user_id})

        except Exception as e:
            logger.error(
                f"Error creating user ({type(e).__name__}): {e}", exc_info=True
            )
            raise StorageError("Failed to create user") from e
