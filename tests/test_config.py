"""
Tests for configuration loading — extdl.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from src.core.config.loader import ConfigError, find_config_file, load_settings
from src.core.models.settings import DEFAULT_FEED_URL
from src.core.use_cases.config_check import check_config


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EXTDL_FEED_URL", raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        feed_url: https://feed.example.org/single.json
        dev_feed_url: https://feed.example.org/dev.json
        extensions_dir: ext
        state_dir: .cache/extdl
        timeout: 5
    """)
    path = tmp_path / "extdl.yml"
    path.write_text(content)
    return path


class TestFindConfigFile:
    def test_found_in_cwd(self, config_file: Path):
        assert find_config_file() == config_file.resolve()

    def test_found_in_parent(self, config_file: Path, tmp_path: Path):
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        assert find_config_file(sub) == config_file.resolve()

    def test_not_found(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        found = find_config_file(empty)
        assert found is None or tmp_path.resolve() not in found.parents


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path: Path):
        settings = load_settings(None, search=False)
        assert settings.feed_url == DEFAULT_FEED_URL
        assert settings.extensions_dir == str(tmp_path.resolve() / "extensions")

    def test_values_and_relative_dirs(self, config_file: Path, tmp_path: Path):
        settings = load_settings(config_file)
        assert settings.feed_url == "https://feed.example.org/single.json"
        assert settings.timeout == 5
        assert settings.extensions_dir == str(tmp_path.resolve() / "ext")
        assert settings.state_dir == str(tmp_path.resolve() / ".cache" / "extdl")

    def test_wrapped_under_extdl_key(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("extdl:\n  feed_url: file:///srv/feed.json\n")
        assert load_settings(path).feed_url == "file:///srv/feed.json"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("")
        assert load_settings(path).feed_url == DEFAULT_FEED_URL

    def test_env_override(self, config_file: Path, monkeypatch):
        monkeypatch.setenv("EXTDL_FEED_URL", "https://env.example.org/feed.json")
        assert load_settings(config_file).feed_url == "https://env.example.org/feed.json"

    def test_relative_feed_path_follows_config_dir(self, tmp_path: Path):
        proj = tmp_path / "proj"
        proj.mkdir()
        path = proj / "extdl.yml"
        path.write_text("feed_url: feed.json\ndev_feed_url: feeds/dev.json\nextensions_dir: ext\n")

        settings = load_settings(path)
        assert settings.feed_url == str(proj.resolve() / "feed.json")
        assert settings.dev_feed_url == str(proj.resolve() / "feeds" / "dev.json")
        assert settings.extensions_dir == str(proj.resolve() / "ext")

    def test_feed_urls_with_scheme_untouched(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("feed_url: https://x/feed.json\ndev_feed_url: file:///srv/dev.json\n")
        settings = load_settings(path)
        assert settings.feed_url == "https://x/feed.json"
        assert settings.dev_feed_url == "file:///srv/dev.json"

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("feed_url: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("timeout: 0\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)


class TestPickFeed:
    def test_precedence(self):
        settings = load_settings(None, search=False)
        assert settings.pick_feed() == settings.feed_url
        assert settings.pick_feed(dev=True) == settings.dev_feed_url
        assert settings.pick_feed("http://explicit", dev=True) == "http://explicit"


class TestCheckConfig:
    def test_valid(self, config_file: Path):
        result = check_config(config_file)
        assert result.valid
        assert any("does not exist yet" in w for w in result.warnings)

    def test_unknown_keys_warned(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("feed_url: https://x/feed.json\nfeed_ulr: typo\n")
        result = check_config(path)
        assert result.valid
        assert any("feed_ulr" in w for w in result.warnings)

    def test_bad_scheme(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("feed_url: ftp://x/feed.json\n")
        result = check_config(path)
        assert not result.valid
        assert any("ftp" in e for e in result.errors)

    def test_local_feed_path_must_exist(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text(f"feed_url: {tmp_path / 'feed.json'}\n")
        result = check_config(path)
        assert not result.valid
        (tmp_path / "feed.json").write_text("{}")
        assert check_config(path).valid

    def test_broken_file(self, tmp_path: Path):
        path = tmp_path / "extdl.yml"
        path.write_text("timeout: -1\n")
        result = check_config(path)
        assert not result.valid
        assert result.to_dict()["settings"] is None
