#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("reposcan")


def configure_logging(level):
    """Set the level of the reposcan logger.

    Args:
        level: Level name ("DEBUG", "info", ...) or numeric level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOSCAN_CONFIG environment variable
    2. ~/.reposcan/ directory
    """
    # Check for environment variable override
    if 'REPOSCAN_CONFIG' in os.environ:
        path = Path(os.environ['REPOSCAN_CONFIG'])
        if path.exists():
            return path

    reposcan_dir = Path.home() / '.reposcan'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = reposcan_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return reposcan_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            # Merge file config with defaults
            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "repository_directories": ["."],  # Roots used when none are given
            "remote": "origin",
            "strict": False,
            "workers": 1,
            "resolve_slugs": True,
        },
        "git": {
            "timeout_seconds": 30,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REPOSCAN_SECTION_KEY
    For example: REPOSCAN_GENERAL_STRICT=true
    """
    env_prefix = "REPOSCAN_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "REPOSCAN_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                logger.debug(f"Ignoring unknown config override {env_key}")
                break

            i += best_match_len
            if i == len(key_parts):
                current_level[matched_key] = typed_value
            elif isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
            else:
                logger.debug(f"Ignoring config override {env_key}: {matched_key} is not a section")
                break

    return config
