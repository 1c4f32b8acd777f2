# -*- coding: utf-8 -*-
# sensorboard/core/config.py - application settings + settings.yaml
import logging
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parents[2]
CONFIG_DIR = BASE_DIR / "config"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # .env
    UPSTREAM_BASE_URL: str = "https://iot.finscloud.my.id"
    LOG_LEVEL: str = "INFO"
    # CORS
    cors_allow_origins: list[str] = ["*"]

    # Paths
    settings_yaml: str = str(CONFIG_DIR / "settings.yaml")
    frontend_dir: str = str(BASE_DIR / "frontend")

    class Config:
        env_file = CONFIG_DIR / ".env"


def load_yaml_settings(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to read settings.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def _section(name: str) -> dict:
    value = yaml_cfg.get(name)
    return dict(value) if isinstance(value, dict) else {}


settings = Settings()
yaml_cfg = load_yaml_settings(settings.settings_yaml)

# Upstream IoT cloud service
UPSTREAM = _section("upstream")
UPSTREAM.setdefault("base_url", settings.UPSTREAM_BASE_URL)
UPSTREAM.setdefault("relay_id", 1)
UPSTREAM.setdefault("timeout_s", 10.0)
UPSTREAM.setdefault("update_method", "PATCH")
UPSTREAM["base_url"] = str(UPSTREAM["base_url"]).rstrip("/")
if str(UPSTREAM["update_method"]).upper() not in ("PUT", "PATCH"):
    logger.warning("Unsupported upstream.update_method %r; using PATCH", UPSTREAM["update_method"])
    UPSTREAM["update_method"] = "PATCH"
UPSTREAM["update_method"] = str(UPSTREAM["update_method"]).upper()

# Dashboard view model
DASHBOARD = _section("dashboard")
DASHBOARD.setdefault("poll_interval_s", 5.0)
DASHBOARD.setdefault("push_interval_s", 1.0)
DASHBOARD.setdefault("default_range", "weekly")
DASHBOARD.setdefault("merge_tolerance_s", 300)
DASHBOARD.setdefault("timezone", "UTC")

# Summary card thresholds
THRESHOLDS = _section("thresholds")
THRESHOLDS.setdefault("temp_low_c", 20.0)
THRESHOLDS.setdefault("temp_high_c", 30.0)
THRESHOLDS.setdefault("hum_low_percent", 30.0)
THRESHOLDS.setdefault("hum_high_percent", 60.0)
