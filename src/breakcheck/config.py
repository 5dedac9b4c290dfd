"""DetectorConfig dataclass and loader for breakcheck settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from breakcheck.rule_engine.rules import DEFAULT_DOCS_BASE_URL

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".breakcheck.json"


@dataclass
class DetectorConfig:
    docs_base_url: str = DEFAULT_DOCS_BASE_URL
    default_version: str = "latest"
    fail_on_violation: bool = True


def load_detector_config(path: Path | None = None) -> DetectorConfig:
    """Load detector config from .breakcheck.json, then apply env overrides."""
    if path is None:
        path = Path.cwd() / CONFIG_FILENAME
    config = DetectorConfig()
    if path.exists():
        try:
            text = path.read_text()
            if text.strip():
                data = json.loads(text)
                section = data.get("breakcheck", {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(config, section)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load breakcheck config from {path}: {e}")

    if env_url := os.environ.get("BREAKCHECK_DOCS_BASE_URL"):
        config.docs_base_url = env_url
    if env_version := os.environ.get("BREAKCHECK_VERSION"):
        config.default_version = env_version
    if env_fail := os.environ.get("BREAKCHECK_FAIL_ON_VIOLATION"):
        config.fail_on_violation = env_fail.lower() in ("true", "1", "yes")
    return config


def _apply(cfg: DetectorConfig, data: dict[str, object]) -> None:
    if isinstance(data.get("docs_base_url"), str) and data["docs_base_url"]:
        cfg.docs_base_url = str(data["docs_base_url"])
    if isinstance(data.get("default_version"), str) and data["default_version"]:
        cfg.default_version = str(data["default_version"])
    if "fail_on_violation" in data and isinstance(data["fail_on_violation"], bool):
        cfg.fail_on_violation = data["fail_on_violation"]
