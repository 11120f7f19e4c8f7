"""
Tests for configuration loading and prefix validation.
"""

import pytest

from sourcepin.config import (
    DEFAULT_ATTRIBUTE_PREFIX,
    get_attribute_prefix,
    load_config,
    validate_attribute_prefix,
)
from sourcepin.exceptions import ConfigError
from sourcepin.mutation import MutationFacade
from sourcepin.paths import SourcepinPaths


@pytest.fixture(autouse=True)
def isolated_home(temp_dir, monkeypatch):
    """Point the user config at an empty home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("SOURCEPIN_CONFIG", raising=False)
    monkeypatch.delenv("SOURCEPIN_ATTRIBUTE_PREFIX", raising=False)
    return home


@pytest.fixture
def project(temp_dir):
    root = temp_dir / "project"
    root.mkdir()
    return root


class TestValidatePrefix:
    @pytest.mark.parametrize("prefix", ["data-sourcepin", "data-x", "x", "data_pin", "$pin"])
    def test_valid(self, prefix):
        assert validate_attribute_prefix(prefix) == prefix

    @pytest.mark.parametrize("prefix", ["", "1data", "data-", "data pin", "data=x", "data\"x"])
    def test_invalid(self, prefix):
        with pytest.raises(ConfigError):
            validate_attribute_prefix(prefix)


class TestLoadConfig:
    def test_defaults(self, project):
        config = load_config(project)
        assert config["annotate"]["attribute_prefix"] == DEFAULT_ATTRIBUTE_PREFIX
        assert config["edit"]["backup"] is False
        assert config["edit"]["backup_dir"] == str(project / ".sourcepin" / "backups")

    def test_project_file(self, project):
        (project / "sourcepin.toml").write_text(
            '[annotate]\nattribute_prefix = "data-pin"\n\n[edit]\nbackup = true\n'
        )
        config = load_config(project)
        assert config["annotate"]["attribute_prefix"] == "data-pin"
        assert config["annotate"]["verbose"] is False
        assert config["edit"]["backup"] is True

    def test_user_file_is_overridden_by_project(self, project, isolated_home):
        user_config = SourcepinPaths(project).user_config
        user_config.parent.mkdir(parents=True)
        user_config.write_text('[annotate]\nattribute_prefix = "data-user"\nverbose = true\n')
        (project / "sourcepin.toml").write_text('[annotate]\nattribute_prefix = "data-project"\n')

        config = load_config(project)
        assert config["annotate"]["attribute_prefix"] == "data-project"
        assert config["annotate"]["verbose"] is True

    def test_env_overrides(self, project, temp_dir, monkeypatch):
        extra = temp_dir / "extra.toml"
        extra.write_text('[edit]\nbackup_dir = "/tmp/elsewhere"\n')
        monkeypatch.setenv("SOURCEPIN_CONFIG", str(extra))
        monkeypatch.setenv("SOURCEPIN_ATTRIBUTE_PREFIX", "data-env")

        config = load_config(project)
        assert config["edit"]["backup_dir"] == "/tmp/elsewhere"
        assert get_attribute_prefix(project) == "data-env"

    def test_invalid_toml(self, project):
        (project / "sourcepin.toml").write_text("[annotate\n")
        with pytest.raises(ConfigError):
            load_config(project)

    def test_invalid_prefix_in_file(self, project):
        (project / "sourcepin.toml").write_text('[annotate]\nattribute_prefix = "9"\n')
        with pytest.raises(ConfigError):
            load_config(project)

    def test_facade_uses_config(self, project):
        (project / "sourcepin.toml").write_text('[annotate]\nattribute_prefix = "data-pin"\n')
        facade = MutationFacade(project)
        assert facade.attribute_prefix == "data-pin"
        assert facade.backup is False
