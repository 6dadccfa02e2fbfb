# tests/test_config.py
"""
Tests for DispatcherConfig.
"""

import pytest

from pathrules.config import DispatcherConfig
from pathrules.errors import ConfigError


class TestDispatcherConfig:

    def test_defaults(self):
        config = DispatcherConfig()
        assert config.namespace_aware
        assert config.trim_body
        assert not config.trace_code
        assert not config.external_entities
        assert config.validate() == []

    def test_validate_flags_non_bools(self):
        config = DispatcherConfig(trim_body=1)
        assert config.validate() == ["trim_body must be a bool"]

    def test_from_mapping(self):
        config = DispatcherConfig.from_mapping({"trace_code": True})
        assert config.trace_code

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ConfigError, match="validating"):
            DispatcherConfig.from_mapping({"validating": True})

    def test_from_mapping_bad_value(self):
        with pytest.raises(ConfigError, match="namespace_aware"):
            DispatcherConfig.from_mapping({"namespace_aware": "no"})
