"""
Configuration Module for the Font Library service.

This module provides configuration loading and management for the font
library application. Configuration is loaded from config.yml and supports
Docker secrets for API tokens.

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> storage_path = config.get("storage", {}).get("path")
"""
import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "./data/font_library"
DEFAULT_REST_NAMESPACE = "wp/v2"
DEFAULT_FONT_FAMILY_CAPABILITY = "edit_theme_options"
ADMIN_TOKEN_ENV_VAR = "FONT_LIBRARY_ADMIN_TOKEN"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from config.yml file.

    Args:
        config_path: Path to config.yml file. If None, looks in current directory
                    and parent directories, then in the project root.

    Returns:
        Dictionary containing configuration settings. Missing top-level
        sections are filled from get_default_config().

    Example:
        >>> config = load_config()
        >>> namespace = config["rest"]["namespace"]
    """
    if config_path is None:
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            candidate = parent / "config.yml"
            if candidate.exists():
                config_path = str(candidate)
                break

        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            candidate = project_root / "config.yml"
            if candidate.exists():
                config_path = str(candidate)

    if config_path is None:
        logger.warning("config.yml not found, using default configuration")
        return get_default_config()

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
            if not isinstance(config, dict):
                logger.warning("Configuration root must be a mapping, using default configuration")
                return get_default_config()
            logger.info(f"Loaded configuration from {config_path}")
            return _with_defaults(config)
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {config_path}")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        return get_default_config()


def get_default_config() -> Dict[str, Any]:
    """Return default configuration when config.yml is not available.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "storage": {
            "path": DEFAULT_STORAGE_PATH
        },
        "rest": {
            "namespace": DEFAULT_REST_NAMESPACE
        },
        "cors": {
            "enabled": False,
            "origins": []
        },
        "auth": {
            "tokens": []
        },
        "font_families": {
            "capabilities": {}
        }
    }


def _with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Fill missing or malformed top-level sections from the defaults."""
    merged = get_default_config()
    for section, value in config.items():
        if section in merged and isinstance(merged[section], dict):
            if isinstance(value, dict):
                merged[section].update(value)
            else:
                logger.warning(f"Configuration section '{section}' must be a mapping, using defaults")
        else:
            merged[section] = value
    return merged


def get_token_entries(config: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Resolve configured API tokens into name/token/capabilities entries.

    Each entry of auth.tokens may carry the token inline ("token") or point
    at a Docker secret ("token_file"). Entries without a usable token are
    skipped with a warning. The FONT_LIBRARY_ADMIN_TOKEN environment
    variable, when set, adds an "admin" entry holding the default font
    family capability.

    Args:
        config: Configuration dictionary from load_config()

    Returns:
        List of {"name", "token", "capabilities"} dictionaries
    """
    entries: List[Dict[str, Any]] = []
    for index, entry in enumerate(config.get("auth", {}).get("tokens") or []):
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring auth token entry #{index}: not a mapping")
            continue
        name = entry.get("name") or f"token-{index}"
        token = entry.get("token")
        if not token and entry.get("token_file"):
            token = read_secret_file(entry["token_file"])
        if not token:
            logger.warning(f"Ignoring auth token '{name}': no token or readable token_file")
            continue
        capabilities = entry.get("capabilities") or []
        entries.append({
            "name": name,
            "token": token,
            "capabilities": [str(cap) for cap in capabilities],
        })

    admin_token = os.environ.get(ADMIN_TOKEN_ENV_VAR)
    if admin_token:
        entries.append({
            "name": "admin",
            "token": admin_token,
            "capabilities": [DEFAULT_FONT_FAMILY_CAPABILITY],
        })

    return entries


def read_secret_file(filepath: str) -> Optional[str]:
    """Read a Docker secret from a file.

    Docker secrets are mounted as files in /run/secrets/ directory.
    This function reads the content of the secret file.

    Args:
        filepath: Path to the secret file

    Returns:
        Content of the secret file (stripped of whitespace), or None if file doesn't exist

    Example:
        >>> token = read_secret_file("/run/secrets/font_library_admin_token")
    """
    try:
        with open(filepath, "r") as f:
            return f.read().strip()
    except FileNotFoundError:
        logger.debug(f"Secret file not found: {filepath}")
        return None
    except Exception as e:
        logger.error(f"Error reading secret file {filepath}: {e}")
        return None
