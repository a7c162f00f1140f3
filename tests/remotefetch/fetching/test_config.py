"""Unit tests for fetching.config module"""

import pytest

from remotefetch.fetching import FetcherConfig


class TestFetcherConfig:
    """Test suite for FetcherConfig class"""

    def test_defaults(self):
        config = FetcherConfig()
        assert config.site_id is None
        assert config.disable_error_reporting is False
        assert config.admin_context is False
        assert config.cache_group == 'remote_fetch'
        assert config.suppression_ttl == 60
        assert config.min_cache_time == 60

    def test_from_dict(self):
        config = FetcherConfig.from_dict({
            'site_id': 12,
            'disable_error_reporting': True,
            'suppression_ttl': '120',
            'unknown': 'ignored'
        })
        assert config.site_id == 12
        assert config.disable_error_reporting is True
        assert config.suppression_ttl == 120

    def test_from_empty_dict(self):
        assert FetcherConfig.from_dict(None) == FetcherConfig()

    @pytest.mark.parametrize('kwargs', [
        {'suppression_ttl': 0},
        {'min_cache_time': -1},
        {'cache_group': ''},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            FetcherConfig(**kwargs)
