"""Tests for the YAML muscle-group table and user overrides."""

import pytest

from lift_analytics.config_loader import (
    default_period_id,
    get_bundled_yaml_path,
    get_user_yaml_path,
    load_config,
    muscle_group_lookup,
)


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point HOME at an empty temporary directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


class TestBundledConfig:
    def test_bundled_file_ships(self):
        assert get_bundled_yaml_path().exists()

    def test_defaults(self, fake_home):
        cfg = load_config()
        assert default_period_id(cfg) == "last_30_days"
        assert cfg["exercises"]["squat"]["primary"] == "quads"

    def test_no_user_file(self, fake_home):
        assert get_user_yaml_path() is None


class TestUserOverride:
    def test_user_file_in_home_is_merged(self, fake_home):
        user_dir = fake_home / ".lift-analytics"
        user_dir.mkdir()
        (user_dir / "muscle_groups.yaml").write_text(
            "settings:\n  default_period: this_month\n"
            "exercises:\n  hip_thrust:\n    primary: glutes\n    secondary: [hamstrings]\n",
            encoding="utf-8",
        )
        cfg = load_config()
        assert default_period_id(cfg) == "this_month"
        # Bundled entries survive the merge
        assert "bench_press" in cfg["exercises"]
        assert cfg["exercises"]["hip_thrust"]["primary"] == "glutes"

    def test_nested_keys_replaced_individually(self, tmp_path):
        user = tmp_path / "override.yaml"
        user.write_text("exercises:\n  squat:\n    secondary: [glutes]\n", encoding="utf-8")
        cfg = load_config(user_path=user)
        assert cfg["exercises"]["squat"] == {"primary": "quads", "secondary": ["glutes"]}

    def test_malformed_user_file_warns_and_is_ignored(self, tmp_path):
        user = tmp_path / "broken.yaml"
        user.write_text("exercises: [unclosed\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="Ignoring user config"):
            cfg = load_config(user_path=user)
        assert default_period_id(cfg) == "last_30_days"

    def test_non_mapping_user_file_warns(self, tmp_path):
        user = tmp_path / "list.yaml"
        user.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.warns(UserWarning):
            load_config(user_path=user)


class TestMuscleGroupLookup:
    def test_primary_then_secondary(self):
        lookup = muscle_group_lookup({
            "bench_press": {"primary": "chest", "secondary": ["triceps", "shoulders"]},
        })
        assert lookup("bench_press") == ("chest", "triceps", "shoulders")

    def test_unknown_exercise_is_other(self):
        assert muscle_group_lookup({})("sled_push") == ("other",)

    def test_duplicates_and_invalid_entries_dropped(self):
        lookup = muscle_group_lookup({
            "curl": {"primary": "biceps", "secondary": ["biceps", "forearms"]},
            "mystery": {"secondary": ["chest"]},
            "junk": "not a mapping",
        })
        assert lookup("curl") == ("biceps", "forearms")
        assert lookup("mystery") == ("other",)
        assert lookup("junk") == ("other",)

    def test_bundled_table(self, fake_home):
        lookup = muscle_group_lookup(load_config()["exercises"])
        assert lookup("deadlift") == ("back", "hamstrings", "glutes")

    def test_default_period_missing(self):
        assert default_period_id({}) is None
