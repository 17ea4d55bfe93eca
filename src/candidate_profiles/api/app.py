"""Flask application factory."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from candidate_profiles.auth import AuthService
from candidate_profiles.config import load_config
from candidate_profiles.exceptions import ProfileServiceError, StorageError
from candidate_profiles.matching import MatchEngine
from candidate_profiles.profile.service import ProfileService
from candidate_profiles.storage import LocalFileStore, ProfileStore, UserStore, create_stores

logger = logging.getLogger(__name__)

EXTENSION_KEY = "candidate_profiles"


@dataclass
class Services:
    """Per-app service container stored in `app.extensions`."""

    auth: AuthService
    profiles: ProfileService
    matches: MatchEngine
    files: LocalFileStore


def create_app(
    config: Optional[Dict[str, Any]] = None,
    profile_store: Optional[ProfileStore] = None,
    user_store: Optional[UserStore] = None,
) -> Flask:
    """
    Create the HTTP application.

    Args:
        config: Configuration dictionary. Loaded from config/config.yaml when None.
        profile_store: Profile store override (tests, local development).
        user_store: User store override.

    Returns:
        Configured Flask app.
    """
    config = config or load_config()
    app_config = config["app"]

    app = Flask(__name__)
    app.secret_key = app_config["secret_key"]
    app.config["UPLOAD_FOLDER"] = app_config["upload_folder"]
    app.config["MAX_CONTENT_LENGTH"] = app_config["max_content_length"]

    # Only the API namespace is cross-origin
    CORS(
        app,
        resources={r"/api/*": {"origins": app_config["allowed_origins"]}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE"],
    )

    if profile_store is None or user_store is None:
        default_profiles, default_users = create_stores(config)
        profile_store = profile_store or default_profiles
        user_store = user_store or default_users

    matching_config = config["matching"]
    app.extensions[EXTENSION_KEY] = Services(
        auth=AuthService(
            user_store,
            secret_key=app_config["secret_key"],
            token_ttl_seconds=int(config["auth"]["token_ttl_seconds"]),
        ),
        profiles=ProfileService(profile_store),
        matches=MatchEngine(
            profile_store,
            max_results=int(matching_config["max_results"]),
            experience_window=float(matching_config["experience_window"]),
        ),
        files=LocalFileStore(app_config["upload_folder"]),
    )

    from candidate_profiles.api.routes import register_routes

    register_routes(app)
    _register_error_handlers(app)

    logger.info(
        f"Application created: storage={config['storage']['backend']}, "
        f"uploads={app_config['upload_folder']}"
    )
    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StorageError)
    def handle_storage_error(error: StorageError):
        logger.error(f"Storage failure: {error}")
        return jsonify({"msg": "Server error"}), 500

    @app.errorhandler(ProfileServiceError)
    def handle_service_error(error: ProfileServiceError):
        return jsonify({"msg": str(error)}), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return jsonify({"msg": error.description}), error.code
        logger.error(f"Unexpected error ({type(error).__name__}): {error}", exc_info=True)
        return jsonify({"msg": "Server error"}), 500
