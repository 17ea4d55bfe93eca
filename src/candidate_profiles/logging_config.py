"""Logging configuration with optional Google Cloud Logging integration."""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

from candidate_profiles import __version__


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_cloud_logging: bool = False,
) -> None:
    """
    Configure logging with optional Google Cloud Logging integration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses logs/candidate_profiles.log.
        enable_cloud_logging: Enable Google Cloud Logging integration.

    Environment Variables:
        ENABLE_CLOUD_LOGGING: Set to 'true' to enable Cloud Logging.
        LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_FILE: Override log file path.
        ENVIRONMENT: Environment name (staging, production, development) - added to Cloud Logging labels.
        GOOGLE_APPLICATION_CREDENTIALS: Path to service account JSON (required for Cloud Logging).
    """
    if os.getenv("ENABLE_CLOUD_LOGGING", "").lower() == "true":
        enable_cloud_logging = True

    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    log_file = os.getenv("LOG_FILE", log_file or "logs/candidate_profiles.log")
    environment = os.getenv("ENVIRONMENT", "development")

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_file),
    ]

    labels: Dict[str, str] = {}
    if enable_cloud_logging:
        try:
            import google.cloud.logging
            from google.cloud.logging.handlers import CloudLoggingHandler

            client = google.cloud.logging.Client()

            # Every entry carries the environment so staging and production can be filtered apart
            labels = {
                "environment": environment,
                "service": "candidate-profiles",
                "version": __version__,
            }

            cloud_handler = CloudLoggingHandler(
                client,
                name="candidate-profiles",
                labels=labels,
            )
            cloud_handler.setLevel(getattr(logging, log_level))
            handlers.append(cloud_handler)

        except ImportError:
            print(
                "google-cloud-logging not installed. Install with: pip install google-cloud-logging",
                file=sys.stderr,
            )
            print("   Falling back to file and console logging only.", file=sys.stderr)
            enable_cloud_logging = False

        except Exception as e:
            print(f"Failed to initialize Google Cloud Logging: {e}", file=sys.stderr)
            print("   Falling back to file and console logging only.", file=sys.stderr)
            enable_cloud_logging = False

    log_format = f"[{environment.upper()}] %(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: environment={environment}, level={log_level}, file={log_file}"
    )
    if enable_cloud_logging:
        logger.info(f"Google Cloud Logging enabled with labels: {labels}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def _format_details(details: Optional[Dict]) -> str:
    if not details:
        return ""
    return " | " + ", ".join(f"{k}={v}" for k, v in details.items())


class StructuredLogger:
    """
    Helper class for structured logging with consistent formatting.

    Provides methods for logging common operations with context.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize structured logger.

        Args:
            logger: Base logger instance
        """
        self.logger = logger
        self.environment = os.getenv("ENVIRONMENT", "development")

    def profile_activity(self, owner: str, action: str, details: Optional[Dict] = None) -> None:
        """
        Log profile create/update/fetch activity.

        Args:
            owner: Owner identity of the profile
            action: Action being performed (created, replaced, fetched, not_found)
            details: Optional additional details
        """
        message = f"[PROFILE] {action.upper()} - Owner:{owner}" + _format_details(details)
        self.logger.info(message)

    def match_activity(self, owner: str, status: str, details: Optional[Dict] = None) -> None:
        """
        Log match engine runs.

        Args:
            owner: Requesting owner identity
            status: Run status (started, completed, failed)
            details: Optional additional details (candidates, returned, top score)
        """
        message = f"[MATCH] {status.upper()} - Owner:{owner}" + _format_details(details)
        if status.lower() in ["failed", "error"]:
            self.logger.error(message)
        else:
            self.logger.info(message)

    def auth_activity(self, action: str, status: str, details: Optional[Dict] = None) -> None:
        """
        Log authentication events.

        Never pass credentials or tokens in details.

        Args:
            action: Auth action (signup, login, resolve)
            status: Outcome (success, rejected)
            details: Optional additional details
        """
        message = f"[AUTH:{action.upper()}] {status}" + _format_details(details)
        if status.lower() == "rejected":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def database_activity(
        self, operation: str, collection: str, status: str, details: Optional[Dict] = None
    ) -> None:
        """
        Log database operations.

        Args:
            operation: Database operation (create, update, query)
            collection: Collection name
            status: Operation status
            details: Optional additional details
        """
        message = f"[DB:{operation.upper()}] {collection} - {status}" + _format_details(details)
        self.logger.info(message)


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger)
