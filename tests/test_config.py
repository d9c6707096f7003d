"""Tests for configuration loading and persistence."""

import json

import pytest
import yaml

from protoforge.core.config import Config, substitute_env


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the user config at a temporary home and run from it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


class TestConfigLoad:
    """Test configuration hierarchy."""

    def test_defaults(self, isolated_home):
        config = Config.load()
        assert config.keep_failed_runs is True
        assert config.create_archive is False
        assert config.max_recent_projects == 10
        assert config.output_dir == str(isolated_home / "protoforge-output")

    def test_user_yaml(self, isolated_home):
        """Test values from ~/.protoforge/config.yaml."""
        path = isolated_home / ".protoforge" / "config.yaml"
        path.parent.mkdir()
        path.write_text("create_archive: true\nlog_level: DEBUG\n", encoding="utf-8")

        config = Config.load()
        assert config.create_archive is True
        assert config.log_level == "DEBUG"

    def test_project_file_overrides_user_file(self, isolated_home, tmp_path):
        """Test that .protoforge.yaml in the working directory wins."""
        user = isolated_home / ".protoforge" / "config.yaml"
        user.parent.mkdir()
        user.write_text("output_dir: /from/user\n", encoding="utf-8")
        (tmp_path / ".protoforge.yaml").write_text("output_dir: /from/project\n", encoding="utf-8")

        assert Config.load().output_dir == "/from/project"

    def test_explicit_json_file(self, tmp_path):
        """Test an explicit JSON config file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"keep_failed_runs": False, "unknown": 1}), encoding="utf-8")

        config = Config.load(config_path=path)
        assert config.keep_failed_runs is False
        assert not hasattr(config, "unknown")

    def test_env_substitution(self, tmp_path, monkeypatch):
        """Test ${VAR} references in string values."""
        monkeypatch.setenv("PF_OUT", "/data/out")
        path = tmp_path / "settings.yaml"
        path.write_text("output_dir: ${PF_OUT}/projects\n", encoding="utf-8")

        assert Config.load(config_path=path).output_dir == "/data/out/projects"

    def test_cli_args_win(self, tmp_path):
        """Test that non-None CLI values override files."""
        path = tmp_path / "settings.yaml"
        path.write_text("create_archive: false\nlog_level: WARNING\n", encoding="utf-8")

        config = Config.load({"create_archive": True, "log_level": None}, path)
        assert config.create_archive is True
        assert config.log_level == "WARNING"

    def test_invalid_yaml_is_ignored(self, tmp_path):
        """Test that an unreadable file leaves defaults in place."""
        path = tmp_path / "broken.yaml"
        path.write_text("output_dir: [unclosed\n", encoding="utf-8")

        config = Config.load(config_path=path)
        assert config.output_dir.endswith("protoforge-output")

    def test_unknown_suffix_is_ignored(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("create_archive = true\n", encoding="utf-8")
        assert Config.load(config_path=path).create_archive is False


class TestConfigPersistence:
    """Test saving configuration."""

    def test_save_and_reload(self, tmp_path):
        config = Config()
        config.output_dir = "/tmp/projects"
        config.create_archive = True
        path = config.save(tmp_path / "saved.yaml")

        reloaded = Config.load(config_path=path)
        assert reloaded.output_dir == "/tmp/projects"
        assert reloaded.create_archive is True
        assert "log_file" not in yaml.safe_load(path.read_text(encoding="utf-8"))

    def test_save_json(self, tmp_path):
        path = Config().save(tmp_path / "saved.json", format="json")
        assert json.loads(path.read_text(encoding="utf-8"))["keep_failed_runs"] is True

    def test_save_recent_projects_keeps_other_keys(self, isolated_home):
        """Test that only recent-project keys are rewritten."""
        path = isolated_home / ".protoforge" / "config.yaml"
        path.parent.mkdir()
        path.write_text("output_dir: /keep/me\n", encoding="utf-8")

        config = Config()
        config.remember_project("/p/one")
        config.save_recent_projects()

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data == {"output_dir": "/keep/me", "recent_projects": ["/p/one"], "last_project": "/p/one"}

    def test_remember_project(self):
        """Test ordering, de-duplication and the cap."""
        config = Config()
        config.max_recent_projects = 3
        for name in ["a", "b", "c", "a", "d"]:
            config.remember_project(name)

        assert config.recent_projects == ["d", "a", "c"]
        assert config.last_project == "d"


def test_substitute_env(monkeypatch):
    monkeypatch.setenv("PF_NAME", "rover")
    monkeypatch.delenv("PF_MISSING", raising=False)
    assert substitute_env("${PF_NAME}-${PF_MISSING}") == "rover-${PF_MISSING}"
    assert substitute_env(5) == 5
