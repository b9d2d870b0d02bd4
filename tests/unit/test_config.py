import pytest

from elevation_profile import config
from elevation_profile.config import DEFAULTS, chart_geometry_from_config, get_setting, load_config


class TestLoadConfig:
    def test_returns_config_from_global_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", tmp_path / "nonexistent" / "elevation-profile.json")
        global_path = tmp_path / ".config" / "elevation-profile" / "elevation-profile.json"
        global_path.parent.mkdir(parents=True)
        global_path.write_text('{"map_target": "global-map"}')
        monkeypatch.setattr(config, "CONFIG_PATH", global_path)

        assert load_config() == {"map_target": "global-map"}

    def test_local_overrides_global(self, tmp_path, monkeypatch):
        local_path = tmp_path / "elevation-profile.json"
        local_path.write_text('{"map_target": "local-map"}')
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)

        global_path = tmp_path / ".config" / "elevation-profile" / "elevation-profile.json"
        global_path.parent.mkdir(parents=True)
        global_path.write_text('{"map_target": "global-map", "chart_height": 80}')
        monkeypatch.setattr(config, "CONFIG_PATH", global_path)

        assert load_config() == {"map_target": "local-map", "chart_height": 80}

    def test_returns_empty_when_both_files_missing(self, no_config):
        assert load_config() == {}

    def test_skips_invalid_local_and_uses_global(self, tmp_path, monkeypatch):
        local_path = tmp_path / "elevation-profile.json"
        local_path.write_text("not valid json")
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)

        global_path = tmp_path / "global.json"
        global_path.write_text('{"fetch_timeout": 10}')
        monkeypatch.setattr(config, "CONFIG_PATH", global_path)

        assert load_config() == {"fetch_timeout": 10}


class TestGetSetting:
    def test_falls_back_to_default(self):
        assert get_setting("map_target", {}) == DEFAULTS["map_target"]

    def test_config_value_wins(self):
        assert get_setting("map_target", {"map_target": "trip-map"}) == "trip-map"

    def test_loads_config_when_not_given(self, no_config):
        assert get_setting("fetch_timeout") is None

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            get_setting("no_such_setting", {})


class TestChartGeometryFromConfig:
    def test_defaults(self, no_config):
        geometry = chart_geometry_from_config()
        assert (geometry.width, geometry.height, geometry.label_band) == (100.0, 100.0, 25.0)

    def test_overrides(self):
        geometry = chart_geometry_from_config({"chart_height": 60, "chart_label_band": 20})
        assert geometry.height == 60.0
        assert geometry.elevation_ratio == pytest.approx(0.75)
