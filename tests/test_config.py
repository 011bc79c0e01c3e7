import logging

import pytest

from config.fixture_config import DEFAULT_RPC_URL, ConfigError, FixtureConfig, load_fixture_config
from config.logging_setup import resolve_log_level
from ingestion.assets.das_client import HeliusDasClient


def test_defaults_without_file_or_env():
    config = load_fixture_config(env={})
    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.indexer_url == DEFAULT_RPC_URL
    assert config.commitment == "finalized"
    assert config.das_page_size == 1000


def test_yaml_and_env_overrides(tmp_path):
    path = tmp_path / "fixtures.yaml"
    path.write_text("rpc_url: http://localhost:8899\ndas_page_size: 100\nskip_preflight: false\n")

    config = load_fixture_config(str(path), env={"DAS_API_URL": "http://das", "DEBUG_LOGS": "true"})

    assert config.rpc_url == "http://localhost:8899"
    assert config.indexer_url == "http://das"
    assert config.das_page_size == 100
    assert config.skip_preflight is False
    assert config.debug_logs is True


def test_env_overrides_yaml(tmp_path):
    path = tmp_path / "fixtures.yaml"
    path.write_text("rpc_url: http://from-file\n")
    config = load_fixture_config(str(path), env={"RPC_URL": "http://from-env"})
    assert config.rpc_url == "http://from-env"


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "fixtures.yaml"
    path.write_text("rpc_url: http://x\nbogus: 1\n")
    with pytest.raises(ConfigError):
        load_fixture_config(str(path), env={})


def test_websocket_setting_is_not_accepted(tmp_path):
    path = tmp_path / "fixtures.yaml"
    path.write_text("ws_url: ws://localhost:8900\n")
    with pytest.raises(ConfigError):
        load_fixture_config(str(path), env={})
    assert load_fixture_config(env={"RPC_WS_URL": "ws://localhost:8900"}).rpc_url == DEFAULT_RPC_URL


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_fixture_config(str(tmp_path / "nope.yaml"), env={})


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "fixtures.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_fixture_config(str(path), env={})


@pytest.mark.parametrize("kwargs", [
    {"commitment": "eventually"},
    {"das_page_size": 0},
    {"das_page_size": 5000},
    {"das_max_retries": -1},
    {"rpc_url": ""},
])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        FixtureConfig(**kwargs)


def test_log_level_switches():
    assert resolve_log_level(FixtureConfig()) == logging.WARNING
    assert resolve_log_level(FixtureConfig(debug_logs=True)) == logging.DEBUG
    assert resolve_log_level(FixtureConfig(error_logs=True)) == logging.ERROR


def test_das_client_from_config():
    config = FixtureConfig(das_api_url="http://das", das_page_size=50)
    client = HeliusDasClient.from_config(config)
    assert client.page_size == 50
