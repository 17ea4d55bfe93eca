"""Load service configuration from YAML with environment overrides."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "secret_key": "dev-secret-key-change-in-production",
        "allowed_origins": "*",
        "upload_folder": "uploads",
        "max_content_length": 16 * 1024 * 1024,
        "host": "0.0.0.0",
        "port": 5000,
    },
    "auth": {
        "token_ttl_seconds": 3600,
    },
    "storage": {
        # "firestore" or "memory"
        "backend": "firestore",
        "database_name": "(default)",
        "credentials_path": None,
        "profiles_collection": "profiles",
        "users_collection": "users",
    },
    "matching": {
        "max_results": 10,
        "experience_window": 2,
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "cloud": False,
    },
}

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "SECRET_KEY": ("app", "secret_key"),
    "ALLOWED_ORIGINS": ("app", "allowed_origins"),
    "UPLOAD_FOLDER": ("app", "upload_folder"),
    "PORT": ("app", "port"),
    "PROFILE_STORE": ("storage", "backend"),
    "FIRESTORE_DATABASE": ("storage", "database_name"),
    "GOOGLE_APPLICATION_CREDENTIALS": ("storage", "credentials_path"),
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries. Values in override win."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> Dict[str, Any]:
    """
    Load configuration from a YAML file merged over the built-in defaults.

    A missing file is not an error; the defaults are used. Environment
    variables (including a .env file) override the keys in ENV_OVERRIDES.

    Args:
        config_path: Path to YAML config. Defaults to CONFIG_PATH env var or config/config.yaml.
        use_env: Apply .env and environment variable overrides.

    Returns:
        Configuration dictionary.
    """
    if use_env:
        load_dotenv()

    config_path = config_path or os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path, "r") as f:
            file_config = yaml.safe_load(f) or {}
        config = deep_merge(config, file_config)
        logger.info(f"Loaded configuration from: {config_path}")
    else:
        logger.info(f"Configuration file not found ({config_path}), using defaults")

    if use_env:
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config[section][key] = value

    config["app"]["port"] = int(config["app"]["port"])
    return config
