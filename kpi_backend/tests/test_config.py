"""
Tests for settings validation.

Settings are built with ``_env_file=None`` so a local .env file does not leak
into the assertions.
"""

import logging

import pytest
from pydantic import ValidationError

from kpi_backend.core.config import Settings


class TestLogLevel:

    def test_default(self):
        assert Settings(_env_file=None).log_level == 'INFO'

    @pytest.mark.parametrize('value, expected', [
        ('debug', 'DEBUG'),
        ('Warning', 'WARNING'),
        ('CRITICAL', 'CRITICAL'),
    ])
    def test_normalized_to_upper_case(self, value: str, expected: str):
        settings = Settings(_env_file=None, log_level=value)
        assert settings.log_level == expected
        # Accepted by the logging module as-is
        logging.getLogger('kpi_backend.tests').setLevel(settings.log_level)

    @pytest.mark.parametrize('value', ['verbose', 'TRACE', ''])
    def test_unknown_level_rejected(self, value: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level=value)

    def test_read_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv('LOG_LEVEL', 'verbose')
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestIdentifiers:

    @pytest.mark.parametrize('dataset', ['analytics-123', 'analytics.123', 'a`b'])
    def test_invalid_dataset_rejected(self, dataset: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, bigquery_dataset=dataset)

    def test_prefix_requires_trailing_underscore(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, events_table_prefix='events')

    def test_cache_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cache_max_entries=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cache_ttl_seconds=0)
