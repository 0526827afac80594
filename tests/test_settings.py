import logging
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from pypopupanchor.settings import Settings
from pypopupanchor.types import LogLevel
from pypopupanchor.utils import configure_logging
from pypopupanchor.utils.log import to_logging_level


def test_defaults():
    s = Settings()
    assert s.smoothing_factor == 0.75
    assert s.min_smoothing_factor == 0.5
    assert (s.jitter_threshold, s.ui_update_threshold, s.large_movement_threshold) == (2, 1, 40)
    assert (s.min_offset, s.max_offset) == (15.0, 500.0)
    assert s.height_cache_size == 20
    assert s.terrain_fallback_level == 9
    assert (s.camera_change_throttle, s.render_loop_throttle) == (100, 150)
    s.validate()


def test_instances_are_independent():
    a, b = Settings(), Settings()
    a.jitter_threshold = 5
    assert b.jitter_threshold == Settings.JITTER_THRESHOLD


def test_from_mapping():
    s = Settings.from_mapping({"smoothing_factor": 0.9, "max_offset": 250.0, "log_level": "debug"})
    assert s.smoothing_factor == 0.9
    assert s.max_offset == 250.0
    assert s.log_level == LogLevel.DEBUG
    assert Settings.from_mapping({"log_level": 4}).log_level == LogLevel.ERROR


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ValueError, match="Unknown popup setting"):
        Settings.from_mapping({"smothing_factor": 0.9})


@pytest.mark.parametrize("key,value", [
    ("smoothing_factor", 1.5),
    ("smoothing_factor", 0.4),
    ("jitter_threshold", -1),
    ("min_offset", 600.0),
    ("height_cache_size", 0),
    ("terrain_fallback_level", -2),
])
def test_validate_rejects_bad_values(key, value):
    with pytest.raises(ValueError):
        Settings.from_mapping({key: value})


def test_configure_logging_sets_package_level():
    package_logger = logging.getLogger("pypopupanchor")
    previous = package_logger.level
    try:
        assert configure_logging(LogLevel.DEBUG) is package_logger
        assert package_logger.level == logging.DEBUG
        configure_logging(LogLevel.NONE)
        assert not logging.getLogger("pypopupanchor.positioning.calculator").isEnabledFor(logging.ERROR)
    finally:
        package_logger.setLevel(previous)


def test_log_level_mapping():
    assert to_logging_level(LogLevel.WARNING) == logging.WARNING
    assert to_logging_level(LogLevel.NONE) > logging.CRITICAL
