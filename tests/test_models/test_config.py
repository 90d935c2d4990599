"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from kubeforge.models.config import CompilerConfig, StateConfig


class TestCompilerConfig:
    """Test CompilerConfig model."""
    
    def test_default_values(self):
        """Test default configuration values."""
        config = CompilerConfig()
        
        assert config.log_level == "INFO"
        assert config.security_hardening is True
        assert config.binary_content is True
        assert isinstance(config.state, StateConfig)
        assert config.state.path == "./state/identifiers.yaml"
        
    def test_legacy_feature_flags(self):
        """Test disabling the newer schema features."""
        config = CompilerConfig(security_hardening=False, binary_content=False)
        
        assert config.security_hardening is False
        assert config.binary_content is False
        
    def test_log_level_validation(self):
        """Test log level validation."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config = CompilerConfig(log_level=level)
            assert config.log_level == level
            
        # Case insensitive
        config = CompilerConfig(log_level="debug")
        assert config.log_level == "DEBUG"
        
        with pytest.raises(ValidationError) as exc_info:
            CompilerConfig(log_level="INVALID")
            
        assert "log_level" in str(exc_info.value)
        
    def test_extra_fields_ignored(self):
        """Test that extra fields are ignored."""
        config = CompilerConfig(extra_field="ignored")
        
        assert not hasattr(config, "extra_field")
