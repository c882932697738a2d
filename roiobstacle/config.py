"""Tunable parameters of the ROI obstacle detector."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectorConfig:
    """Thresholds and window sizes that drive obstacle detection.

    The defaults are the values the detector is tuned with.
    """

    # Growth ratio thresholds
    kp_ratio_threshold: float = 1.25
    area_ratio_threshold: float = 1.35
    base_min_matches: int = 8
    min_matches_floor: int = 4
    match_ratio_threshold: float = 0.75

    # Fixed centre region of interest, as a fraction of each side
    roi_margin_x: float = 0.25
    roi_margin_y: float = 0.25

    # Adaptive and emergency detection
    adaptive_match_percentage: float = 0.45
    emergency_kp_threshold: float = 0.9
    emergency_area_threshold: float = 0.85
    trend_window_size: int = 3
    strong_trend_threshold: float = 0.06

    # Soft optical flow analysis
    flow_magnitude_min_threshold: float = 0.3
    flow_magnitude_max_threshold: float = 20.0
    flow_consistency_threshold: float = 0.15

    # Detection consistency buffer
    detection_buffer_size: int = 3
    min_detections_for_trigger: int = 3

    # Static object suppression
    static_area_growth_max: float = 1.15
    static_kp_growth_max: float = 1.12

    # Confidence scoring
    min_confidence_threshold: float = 0.75
    excellent_confidence_threshold: float = 0.85

    def __post_init__(self) -> None:
        if self.kp_ratio_threshold <= 1.0:
            raise ValueError("kp_ratio_threshold must be greater than 1")
        if self.area_ratio_threshold <= 1.0:
            raise ValueError("area_ratio_threshold must be greater than 1")
        for name in ("roi_margin_x", "roi_margin_y"):
            value = getattr(self, name)
            if not 0.0 <= value < 0.5:
                raise ValueError(f"{name} must lie in [0, 0.5), got {value}")
        if self.min_matches_floor < 0:
            raise ValueError("min_matches_floor must not be negative")
        if self.base_min_matches < 1:
            raise ValueError("base_min_matches must be at least 1")
        if self.trend_window_size < 1:
            raise ValueError("trend_window_size must be at least 1")
        if self.detection_buffer_size < 1:
            raise ValueError("detection_buffer_size must be at least 1")
        if self.min_detections_for_trigger < 0:
            raise ValueError("min_detections_for_trigger must not be negative")
        if self.flow_magnitude_min_threshold > self.flow_magnitude_max_threshold:
            raise ValueError(
                "flow_magnitude_min_threshold must not exceed flow_magnitude_max_threshold"
            )
        if self.min_confidence_threshold > self.excellent_confidence_threshold:
            raise ValueError(
                "min_confidence_threshold must not exceed excellent_confidence_threshold"
            )