"""Tests for settings and logging configuration."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from py_terrain.config import Settings, settings
from py_terrain.core import BoundaryRule, ElevationConfig, SmoothingMode
from py_terrain.utils.logging import configure_logging


class TestSettings:
    """Test environment driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("PY_TERRAIN_DEFAULT_GRID_SIZE", "PY_TERRAIN_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        current = Settings(_env_file=None)
        assert current.default_grid_size == 257
        assert current.initial_variance_factor == 9.6
        assert current.variance_decay_exponent == 0.65
        assert current.log_format == "json"

    def test_singleton(self):
        assert isinstance(settings, Settings)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PY_TERRAIN_DEFAULT_GRID_SIZE", "129")
        monkeypatch.setenv("PY_TERRAIN_BOUNDARY_RULE", "reference")
        current = Settings(_env_file=None)
        assert current.default_grid_size == 129
        assert current.boundary_rule == "reference"

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("PY_TERRAIN_MIN_VARIANCE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_elevation_config_from_settings(self):
        current = Settings(
            _env_file=None,
            default_grid_size=65,
            initial_variance_factor=4.0,
            boundary_rule="reference",
            smoothing_mode="in_place",
        )
        config = ElevationConfig.from_settings(current)
        assert config.size == 65
        assert config.initial_variance_factor == 4.0
        assert config.boundary_rule is BoundaryRule.REFERENCE
        assert config.smoothing_mode is SmoothingMode.IN_PLACE

    def test_unknown_rule_rejected_by_settings(self, monkeypatch):
        monkeypatch.setenv("PY_TERRAIN_BOUNDARY_RULE", "sideways")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_unknown_smoothing_mode_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, smoothing_mode="twice")

    def test_enum_fields_are_typed(self, monkeypatch):
        monkeypatch.setenv("PY_TERRAIN_SMOOTHING_MODE", "in_place")
        current = Settings(_env_file=None)
        assert current.smoothing_mode is SmoothingMode.IN_PLACE
        assert current.boundary_rule is BoundaryRule.SYMMETRIC


class TestConfigureLogging:
    """Test structlog setup."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_output(self, capsys):
        configure_logging("INFO", "json")
        structlog.get_logger("py_terrain.test").info("Grid ready", size=17)

        captured = capsys.readouterr()
        output = captured.err + captured.out
        assert '"event": "Grid ready"' in output
        assert '"size": 17' in output
        assert '"level": "info"' in output

    def test_level_filters_debug(self, capsys):
        configure_logging("WARNING", "plain")
        structlog.get_logger("py_terrain.test").info("Hidden")

        captured = capsys.readouterr()
        assert "Hidden" not in captured.err + captured.out

    def test_defaults_from_settings(self):
        configure_logging()
        assert logging.getLogger().level == logging.getLevelName(settings.log_level.upper())

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            configure_logging("INFO", "xml")
