import dataclasses

import pytest

from roiobstacle.config import DetectorConfig


def test_defaults_match_tuned_values():
    config = DetectorConfig()
    assert config.kp_ratio_threshold == 1.25
    assert config.area_ratio_threshold == 1.35
    assert config.base_min_matches == 8
    assert config.min_matches_floor == 4
    assert config.match_ratio_threshold == 0.75
    assert config.roi_margin_x == 0.25
    assert config.roi_margin_y == 0.25


def test_adaptive_and_flow_defaults():
    config = DetectorConfig()
    assert config.adaptive_match_percentage == 0.45
    assert config.emergency_kp_threshold == 0.9
    assert config.emergency_area_threshold == 0.85
    assert config.trend_window_size == 3
    assert config.strong_trend_threshold == 0.06
    assert config.flow_magnitude_min_threshold == 0.3
    assert config.flow_magnitude_max_threshold == 20.0
    assert config.flow_consistency_threshold == 0.15


def test_buffer_static_and_confidence_defaults():
    config = DetectorConfig()
    assert config.detection_buffer_size == 3
    assert config.min_detections_for_trigger == 3
    assert config.static_area_growth_max == 1.15
    assert config.static_kp_growth_max == 1.12
    assert config.min_confidence_threshold == 0.75
    assert config.excellent_confidence_threshold == 0.85


def test_config_is_frozen():
    config = DetectorConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.kp_ratio_threshold = 2.0  # type: ignore[misc]
    assert config.kp_ratio_threshold == 1.25


def test_replace_keeps_other_fields():
    config = dataclasses.replace(DetectorConfig(), trend_window_size=5)
    assert config.trend_window_size == 5
    assert config.detection_buffer_size == DetectorConfig().detection_buffer_size


@pytest.mark.parametrize(
    "overrides",
    [
        {"kp_ratio_threshold": 1.0},
        {"area_ratio_threshold": 0.9},
        {"roi_margin_x": 0.5},
        {"roi_margin_y": -0.1},
        {"min_matches_floor": -1},
        {"base_min_matches": 0},
        {"trend_window_size": 0},
        {"detection_buffer_size": 0},
        {"min_detections_for_trigger": -1},
        {"flow_magnitude_min_threshold": 30.0},
        {"min_confidence_threshold": 0.9},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        DetectorConfig(**overrides)


def test_equal_configs_compare_equal():
    assert DetectorConfig(roi_margin_x=0.1) == DetectorConfig(roi_margin_x=0.1)
    assert DetectorConfig(roi_margin_x=0.1) != DetectorConfig()