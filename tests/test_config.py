# =============================================================================
# test_config.py - Assembler Configuration Tests
# =============================================================================

import pytest
from isa_utils.config import AssemblerConfig, OUTPUT_FORMATS


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.strict_lexing is False
        assert config.output_format == "hex"
        assert config.emit_listing is False
        assert config.output_suffix == ".hex"

    def test_suffixes(self):
        assert OUTPUT_FORMATS == {"hex": ".hex", "bin": ".bits", "text": ".txt", "raw": ".bin"}

    def test_invalid_format(self):
        with pytest.raises(ValueError):
            AssemblerConfig(output_format="elf")


class TestFromEnv:
    """Test environment variable overrides."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("ISA_UTILS_STRICT", "ISA_UTILS_FORMAT", "ISA_UTILS_LISTING"):
            monkeypatch.delenv(name, raising=False)

    def test_empty_environment(self):
        assert AssemblerConfig.from_env() == AssemblerConfig()

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_strict_true(self, monkeypatch, value):
        monkeypatch.setenv("ISA_UTILS_STRICT", value)
        assert AssemblerConfig.from_env().strict_lexing is True

    def test_strict_false(self, monkeypatch):
        monkeypatch.setenv("ISA_UTILS_STRICT", "0")
        assert AssemblerConfig.from_env().strict_lexing is False

    def test_format(self, monkeypatch):
        monkeypatch.setenv("ISA_UTILS_FORMAT", "RAW")
        config = AssemblerConfig.from_env()
        assert config.output_format == "raw"
        assert config.output_suffix == ".bin"

    def test_invalid_format(self, monkeypatch):
        monkeypatch.setenv("ISA_UTILS_FORMAT", "elf")
        with pytest.raises(ValueError, match="ISA_UTILS_FORMAT"):
            AssemblerConfig.from_env()

    def test_listing(self, monkeypatch):
        monkeypatch.setenv("ISA_UTILS_LISTING", "yes")
        assert AssemblerConfig.from_env().emit_listing is True
