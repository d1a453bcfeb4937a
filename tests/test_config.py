import pytest

from ellm.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    Config,
    ConfigResolver,
    load_config,
    mask,
)
from ellm.errors import ConfigParseError, ConfigReadError, InvalidConfig, MissingApiKey


ENV = {"ANTHROPIC_API_KEY": "sk-ant-env"}


def write_config(tmp_path, text):
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_key_wins_over_env_and_file(tmp_path):
    path = write_config(tmp_path, 'api_key = "sk-ant-file"\n')
    cfg = load_config("sk-ant-cli", path=path, env=ENV)
    assert cfg.api_key == "sk-ant-cli"


def test_env_key_wins_over_file(tmp_path):
    path = write_config(tmp_path, 'api_key = "sk-ant-file"\nmodel = "claude-opus-4"\n')
    cfg = load_config(None, path=path, env=ENV)
    assert cfg.api_key == "sk-ant-env"
    # file settings are not consulted once the env supplies the key
    assert cfg.model == DEFAULT_MODEL


def test_file_key_used_when_cli_and_env_absent(tmp_path):
    path = write_config(
        tmp_path,
        'api_key = "sk-ant-file"\n'
        'model = "claude-opus-4"\n'
        "max_tokens = 1000\n"
        "temperature = 1\n"
        'base_url = "http://localhost:8080/v1"\n',
    )
    cfg = load_config(None, path=path, env={})
    assert cfg.api_key == "sk-ant-file"
    assert cfg.model == "claude-opus-4"
    assert cfg.max_tokens == 1000
    assert cfg.temperature == 1.0
    assert cfg.base_url == "http://localhost:8080/v1"


def test_all_sources_absent(tmp_path):
    with pytest.raises(MissingApiKey):
        load_config(None, path=tmp_path / "missing.toml", env={})


def test_empty_values_fall_through(tmp_path):
    path = write_config(tmp_path, 'api_key = "sk-ant-file"\n')
    cfg = load_config("", path=path, env={"ANTHROPIC_API_KEY": ""})
    assert cfg.api_key == "sk-ant-file"


def test_file_without_api_key_is_absent(tmp_path):
    path = write_config(tmp_path, 'model = "claude-opus-4"\n')
    with pytest.raises(MissingApiKey):
        load_config(None, path=path, env={})


def test_wrong_type_for_api_key(tmp_path):
    path = write_config(tmp_path, "api_key = 123\n")
    with pytest.raises(ConfigParseError):
        load_config(None, path=path, env={})


def test_invalid_toml(tmp_path):
    path = write_config(tmp_path, "api_key = \n[[[")
    with pytest.raises(ConfigParseError):
        load_config(None, path=path, env={})


def test_file_not_utf8(tmp_path):
    path = tmp_path / "config.toml"
    path.write_bytes(b'api_key = "sk-ant-\xff\xfe"\n')
    with pytest.raises(ConfigParseError):
        load_config(None, path=path, env={})


def test_wrong_type_for_optional_field(tmp_path):
    path = write_config(tmp_path, 'api_key = "sk-ant-file"\nmax_tokens = "lots"\n')
    with pytest.raises(ConfigParseError):
        load_config(None, path=path, env={})


def test_malformed_file_not_read_when_env_set(tmp_path):
    path = write_config(tmp_path, "api_key = 123\n")
    cfg = load_config(None, path=path, env=ENV)
    assert cfg.api_key == "sk-ant-env"


def test_unreadable_path_is_distinct_error(tmp_path):
    with pytest.raises(ConfigReadError):
        load_config(None, path=tmp_path, env={})


def test_resolver_defaults_to_process_env(monkeypatch, tmp_path):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-process")
    resolver = ConfigResolver(path=tmp_path / "missing.toml")
    assert resolver.resolve().api_key == "sk-ant-process"


def test_read_file_missing_returns_none(tmp_path):
    assert ConfigResolver(path=tmp_path / "nope.toml", env={}).read_file() is None


def test_config_defaults():
    cfg = Config(api_key="sk-ant-test")
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.model == DEFAULT_MODEL
    assert cfg.max_tokens == DEFAULT_MAX_TOKENS
    assert cfg.timeout is None


def test_overrides_return_copies():
    cfg = Config(api_key="sk-ant-test")
    other = cfg.with_model("claude-opus-4").with_max_tokens(10)
    assert other.model == "claude-opus-4"
    assert other.max_tokens == 10
    assert cfg.model == DEFAULT_MODEL


def test_validate_empty_key():
    with pytest.raises(InvalidConfig):
        Config(api_key="").validate()


def test_validate_warns_on_unusual_key(caplog):
    Config(api_key="not-a-real-key").validate()
    assert "sk-ant-" in caplog.text


def test_key_hidden_from_repr():
    assert "sk-ant-secret" not in repr(Config(api_key="sk-ant-secret"))


def test_mask():
    assert mask("sk-ant-1234567890") == "sk-a*********7890"
    assert mask("short") == "*****"
    assert mask("") == ""
