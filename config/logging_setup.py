"""config/logging_setup.py

Root logging configuration for fixture runs.
"""

import logging

from .fixture_config import FixtureConfig


LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'
DATE_FORMAT = '%H:%M:%S'


def resolve_log_level(config: FixtureConfig) -> int:
    if config.debug_logs:
        return logging.DEBUG
    if config.error_logs:
        return logging.ERROR
    return logging.WARNING


def configure_logging(config: FixtureConfig) -> None:
    logging.basicConfig(level=resolve_log_level(config), format=LOG_FORMAT, datefmt=DATE_FORMAT)
