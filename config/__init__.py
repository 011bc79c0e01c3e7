"""
config package

Fixture run configuration, key loading and logging setup.
"""
from .fixture_config import ConfigError, FixtureConfig, load_fixture_config
from .key_manager import KeyLoadError, load_keypair_from_env, parse_keypair
from .logging_setup import configure_logging

__all__ = [
    'ConfigError',
    'FixtureConfig',
    'KeyLoadError',
    'configure_logging',
    'load_fixture_config',
    'load_keypair_from_env',
    'parse_keypair',
]
