"""Tests for configuration validation."""
import pytest
from favarchive.config import Config


def test_default_config_is_valid():
    Config().validate()


@pytest.mark.parametrize("name", ["MAX_RETRIES", "CONCURRENCY", "TIMEOUT", "PROGRESS_EVERY"])
def test_non_positive_values_rejected(name):
    config = Config()
    setattr(config, name, 0)
    with pytest.raises(ValueError, match=name):
        config.validate()
