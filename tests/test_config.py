import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sensorboard.core.config import DASHBOARD, UPSTREAM, load_yaml_settings, settings


def test_missing_yaml_returns_empty(tmp_path):
    assert load_yaml_settings(str(tmp_path / "missing.yaml")) == {}


def test_malformed_yaml_returns_empty(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("upstream: [unclosed\n", encoding="utf-8")
    assert load_yaml_settings(str(path)) == {}


def test_non_mapping_yaml_returns_empty(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_yaml_settings(str(path)) == {}


def test_yaml_sections_loaded(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("dashboard:\n  poll_interval_s: 2\n", encoding="utf-8")
    assert load_yaml_settings(str(path)) == {"dashboard": {"poll_interval_s": 2}}


def test_defaults_present():
    assert UPSTREAM["update_method"] in ("PUT", "PATCH")
    assert not UPSTREAM["base_url"].endswith("/")
    assert float(DASHBOARD["poll_interval_s"]) > 0
    assert DASHBOARD["default_range"] in ("daily", "weekly", "monthly")


def test_env_base_url_used_when_yaml_omits_it():
    shipped = load_yaml_settings(settings.settings_yaml)
    assert "base_url" not in shipped.get("upstream", {})
    assert UPSTREAM["base_url"] == settings.UPSTREAM_BASE_URL.rstrip("/")
