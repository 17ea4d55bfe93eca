"""
Account signup/login and bearer-token identity resolution.

Passwords are hashed with werkzeug.security. Tokens are itsdangerous
timed signatures over the user ID, so any process holding the same secret
can validate a token without shared session state.
"""

import logging
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from candidate_profiles.exceptions import Unauthorized, ValidationError
from candidate_profiles.logging_config import get_structured_logger
from candidate_profiles.storage.users import User, UserStore

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)

TOKEN_SALT = "candidate-profiles-auth"
BEARER_PREFIX = "Bearer "


class AuthService:
    """Issues and validates bearer tokens for user accounts."""

    def __init__(self, users: UserStore, secret_key: str, token_ttl_seconds: int = 3600):
        """
        Initialize auth service.

        Args:
            users: Account store
            secret_key: Token signing secret
            token_ttl_seconds: Token lifetime
        """
        self.users = users
        self.token_ttl_seconds = token_ttl_seconds
        self.serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)

    def signup(
        self, full_name: str, email: str, password: str, phone_number: Optional[str] = None
    ) -> str:
        """
        Register a new account and return a token for it.

        Raises:
            ValidationError: Missing field or email already registered.
        """
        full_name = (full_name or "").strip()
        email = (email or "").strip()
        if not full_name or not email or not password:
            raise ValidationError("Full name, email, and password are required")

        if self.users.get_by_email(email) is not None:
            slogger.auth_activity("signup", "rejected", {"reason": "duplicate email"})
            raise ValidationError("User already exists")

        user = self.users.create(
            User(
                full_name=full_name,
                email=email,
                password_hash=generate_password_hash(password),
                phone_number=(phone_number or "").strip(),
            )
        )
        slogger.auth_activity("signup", "success", {"user_id": user.id})
        return self.issue_token(user.id)

    def login(self, email: str, password: str) -> str:
        """
        Verify credentials and return a fresh token.

        Raises:
            Unauthorized: Unknown email or wrong password.
        """
        user = self.users.get_by_email(email or "")
        if user is None or not check_password_hash(user.password_hash, password or ""):
            slogger.auth_activity("login", "rejected")
            raise Unauthorized("Invalid credentials")

        slogger.auth_activity("login", "success", {"user_id": user.id})
        return self.issue_token(user.id)

    def issue_token(self, user_id: str) -> str:
        return self.serializer.dumps({"userId": user_id})

    def resolve_token(self, token: str) -> str:
        """
        Return the user ID carried by a token.

        Raises:
            Unauthorized: Token expired, tampered with or malformed.
        """
        try:
            payload = self.serializer.loads(token, max_age=self.token_ttl_seconds)
        except SignatureExpired as e:
            raise Unauthorized("Token has expired") from e
        except BadSignature as e:
            raise Unauthorized("Token is not valid") from e

        user_id = payload.get("userId") if isinstance(payload, dict) else None
        if not user_id:
            raise Unauthorized("Token is not valid")
        return user_id

    def resolve_header(self, authorization: Optional[str]) -> str:
        """
        Resolve an Authorization header value to the owner identity.

        Raises:
            Unauthorized: Header missing or not a valid bearer token.
        """
        if not authorization:
            raise Unauthorized("No token, authorization denied")
        token = authorization[len(BEARER_PREFIX):] if authorization.startswith(BEARER_PREFIX) else authorization
        token = token.strip()
        if not token:
            raise Unauthorized("No token, authorization denied")
        return self.resolve_token(token)
