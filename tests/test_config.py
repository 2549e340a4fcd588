from pathlib import Path

import pytest

from catalog.config import ENV_VARS, Settings, load_settings
from catalog.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for env_var in list(ENV_VARS.values()) + ["CATALOG_CONFIG"]:
        monkeypatch.delenv(env_var, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings == Settings()
    assert settings.image_dir == Path("images")
    assert settings.backend == "sqlite"
    assert settings.port == 9000
    assert settings.api_url is None


def test_yaml_overrides_defaults(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("backend: json\nport: 8080\nimage_dir: /srv/images\n")

    settings = load_settings(config)

    assert settings.backend == "json"
    assert settings.port == 8080
    assert settings.image_dir == Path("/srv/images")


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    config = tmp_path / "config.yaml"
    config.write_text("port: 8080\nlog_level: debug\n")
    monkeypatch.setenv("CATALOG_CONFIG", str(config))
    monkeypatch.setenv("PORT", "7000")
    monkeypatch.setenv("FRONT_URL", "http://example.test")

    settings = load_settings()

    assert settings.port == 7000
    assert settings.log_level == "DEBUG"
    assert settings.front_url == "http://example.test"


def test_empty_yaml_is_allowed(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("")
    assert load_settings(config) == Settings()


@pytest.mark.parametrize(
    "content",
    ["backend: postgres\n", "port: many\n", "port: 70000\n", "log_level: loud\n", "colour: blue\n", "- a\n- b\n", "key: [unclosed\n"],
)
def test_invalid_config_raises(tmp_path, content):
    config = tmp_path / "config.yaml"
    config.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(config)


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(tmp_path / "nope.yaml")


def test_invalid_environment_value_raises(monkeypatch):
    monkeypatch.setenv("CATALOG_BACKEND", "mongo")
    with pytest.raises(ConfigError):
        load_settings()
