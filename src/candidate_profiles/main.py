"""Main entry point: run the candidate profiles HTTP service."""

import argparse
from typing import List, Optional

from candidate_profiles.api import create_app
from candidate_profiles.config import load_config
from candidate_profiles.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Candidate profile and matching service")
    parser.add_argument(
        "--config", default=None, help="Path to configuration file (default: config/config.yaml)"
    )
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port (overrides config)")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Use in-memory stores instead of Firestore (data is lost on exit)",
    )
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = load_config(args.config)

    logging_config = config["logging"]
    setup_logging(
        log_level=logging_config["level"],
        log_file=logging_config.get("file"),
        enable_cloud_logging=bool(logging_config.get("cloud")),
    )

    if args.memory:
        config["storage"]["backend"] = "memory"

    app = create_app(config)
    host = args.host or config["app"]["host"]
    port = args.port or config["app"]["port"]

    logger.info(f"Starting candidate profiles service on {host}:{port}")
    app.run(host=host, port=port, debug=args.debug)


if __name__ == "__main__":
    main()
