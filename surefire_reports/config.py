"""Configuration for the report collector - YAML file plus environment overrides."""

import logging
import os
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_REPORTS_PATH = "target/surefire-reports"
CONFIG_FILE_NAME = "surefire-reports.yaml"
CONFIG_KEYS = ['SUREFIRE_REPORTS_PATH', 'SUREFIRE_PUBLISH_DETAILS']


def load_config() -> dict:
    """Load config from a YAML file and environment variables.

    The first existing file among $SUREFIRE_REPORTS_CONFIG and
    ./surefire-reports.yaml is read. Keys are matched case-insensitively
    against CONFIG_KEYS. Environment variables take precedence over file values.
    """
    paths = [
        os.environ.get('SUREFIRE_REPORTS_CONFIG'),
        Path.cwd() / CONFIG_FILE_NAME,
    ]
    config = {}
    for p in paths:
        if p and Path(p).exists():
            try:
                data = yaml.safe_load(Path(p).read_text()) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load {p}: {e}, skipping it")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Ignoring {p}: expected a mapping, got {type(data).__name__}")
                continue
            for key, value in data.items():
                key = str(key).upper()
                if key in CONFIG_KEYS and value is not None:
                    config[key] = str(value)
            break

    for key in CONFIG_KEYS:
        env_value = os.environ.get(key)
        if env_value is not None:
            config[key] = env_value

    return config


def get_reports_dir() -> Path:
    reports_dir = load_config().get('SUREFIRE_REPORTS_PATH', DEFAULT_REPORTS_PATH)
    return Path(reports_dir).expanduser()


def get_publish_details() -> bool:
    value = load_config().get('SUREFIRE_PUBLISH_DETAILS', '')
    return value.strip().lower() in ('1', 'true', 'yes', 'on')
