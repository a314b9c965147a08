"""Tests for pioneer_chrome.preferences."""

from __future__ import annotations

from pathlib import Path

from pioneer_chrome.preferences import Preferences, load_preferences


class TestLoadPreferences:
    def test_missing_file_writes_defaults(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.yaml"
        prefs = load_preferences(path)
        assert prefs == Preferences()
        assert path.exists()
        assert "search_url" in path.read_text()

    def test_default_file_loads_back_to_defaults(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        load_preferences(path)
        assert load_preferences(path) == Preferences()

    def test_overrides(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text(
            "browsing:\n"
            "  home_url: https://home.example\n"
            "  search_url: https://duckduckgo.com/?q={query}\n"
            "history:\n"
            "  max_entries: 50\n"
            "progress:\n"
            "  fallback_seconds: 5\n"
            "  complete_seconds: 0.1\n"
            f"storage:\n"
            f"  data_dir: {tmp_path / 'data'}\n"
        )
        prefs = load_preferences(path)
        assert prefs.browsing.home_url == "https://home.example"
        assert prefs.browsing.search_url == "https://duckduckgo.com/?q={query}"
        assert prefs.max_history_entries == 50
        assert prefs.progress.fallback_seconds == 5.0
        assert prefs.progress.complete_seconds == 0.1
        assert prefs.data_dir == tmp_path / "data"

    def test_search_url_without_placeholder_ignored(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("browsing:\n  search_url: https://example.com/search\n")
        assert load_preferences(path).browsing.search_url == Preferences().browsing.search_url

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("history:\n  max_entries: 10\n")
        prefs = load_preferences(path)
        assert prefs.max_history_entries == 10
        assert prefs.browsing == Preferences().browsing

    def test_history_cap_has_floor_of_one(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("history:\n  max_entries: 0\n")
        assert load_preferences(path).max_history_entries == 1

    def test_invalid_yaml_falls_back(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("browsing: [unclosed\n")
        assert load_preferences(path) == Preferences()

    def test_bad_value_falls_back(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("progress:\n  fallback_seconds: soon\n")
        assert load_preferences(path) == Preferences()

    def test_non_mapping_falls_back(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("- just\n- a list\n")
        assert load_preferences(path) == Preferences()

    def test_data_dir_expands_user(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("storage:\n  data_dir: ~/pioneer-data\n")
        assert load_preferences(path).data_dir == Path("~/pioneer-data").expanduser()
