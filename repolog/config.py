#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .renderers.base import DEFAULT_DATE_FORMAT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr)  # Default to stderr
    ]
)
logger = logging.getLogger("repolog")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
PROJECT_CONFIG_FILENAMES = ['.repolog.json', '.repolog.toml', '.repolog.yaml', '.repolog.yml']

DEFAULT_INCLUDE_COMMITS_AFTER = "1970-01-01 00:00:00 +0000"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOLOG_CONFIG environment variable
    2. .repolog.{json,toml,yaml,yml} in the current directory
    3. ~/.repolog/ directory
    """
    if 'REPOLOG_CONFIG' in os.environ:
        path = Path(os.environ['REPOLOG_CONFIG'])
        if path.exists():
            return path

    for filename in PROJECT_CONFIG_FILENAMES:
        path = Path.cwd() / filename
        if path.exists():
            return path

    repolog_dir = Path.home() / '.repolog'
    for filename in CONFIG_FILENAMES:
        path = repolog_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return repolog_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "output_directory": "build",
            "report_title": "",                 # Empty: "<directory name> changelog"
            "verbose": False,                   # Echo the changelog to the log
            "full_git_message": False,
            "date_format": DEFAULT_DATE_FORMAT,
            "include_commits_after": DEFAULT_INCLUDE_COMMITS_AFTER,
            "path_filter": "",                  # Walk only history touching this path
            "filter_on_path": "",               # Render only commits changing files here
        },
        "formats": {
            "plain_text": {"enabled": True, "filename": "changelog.txt"},
            "markdown": {"enabled": False, "filename": "changelog.md"},
            "simple_html": {"enabled": True, "filename": "changelog.html"},
            "html_table": {"enabled": False, "filename": "changelogtable.html"},
            "json": {"enabled": True, "filename": "changelog.json"},
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


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


def save_config(config, config_path=None):
    """Save configuration to file (JSON unless the path ends in .yaml/.yml).

    Returns the path written. Raises OSError if the file cannot be written.
    """
    config_path = Path(config_path) if config_path else get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        else:
            if config_path.suffix.lower() != '.json':
                logger.warning(f"Cannot write {config_path.suffix} files. Saving as JSON instead.")
                config_path = config_path.with_suffix('.json')
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
        raise
    return config_path


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
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REPOLOG_SECTION_SUBSECTION_KEY
    For example: REPOLOG_FORMATS_MARKDOWN_ENABLED=true
    """
    env_prefix = "REPOLOG_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

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
            # Longest config key whose parts prefix the remaining env key parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


def configure_logging(config, debug=False):
    """Set the repolog log level from config (or DEBUG when ``debug``)."""
    if debug:
        level = logging.DEBUG
    else:
        level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    return level
