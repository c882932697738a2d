"""Confidence scoring that turns growth measurements into a detection decision."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import DetectorConfig
from .flow import FlowAnalysis


@dataclass
class DetectionConfidence:
    """A confidence score in [0, 1], the reasons behind it and the resulting decision."""

    score: float = 0.0
    primary_reason: str = "INSUFFICIENT_DATA"
    contributing_factors: list[str] = field(default_factory=list)
    should_detect: bool = False


def adaptive_min_matches(config: DetectorConfig, available_keypoints: int) -> int:
    """Scale the match requirement with the keypoints available, within the configured bounds."""
    scaled = int(available_keypoints * config.adaptive_match_percentage)
    return min(max(scaled, config.min_matches_floor), config.base_min_matches)


def is_likely_static(
    config: DetectorConfig, avg_kp_ratio: float, area_ratio: float, flow_magnitude: float
) -> bool:
    """Whether the scene looks static: little flow and little growth."""
    if flow_magnitude > config.flow_magnitude_min_threshold * 2:
        return False
    return (
        avg_kp_ratio <= config.static_kp_growth_max
        and area_ratio <= config.static_area_growth_max
    )


def _match_quality(match_count: int, adaptive_min: int) -> float:
    if adaptive_min:
        return match_count / adaptive_min
    if match_count > 0:
        return float("inf")
    return 0.0


def calculate_confidence(
    config: DetectorConfig,
    avg_kp_ratio: float,
    area_ratio: float,
    has_strong_trend: bool,
    match_count: int,
    adaptive_min: int,
    flow: FlowAnalysis,
    is_static: bool,
) -> DetectionConfidence:
    """Combine growth, trend, match quality and flow into a clamped confidence score."""
    factors: list[str] = []
    kp_conf = min(1.0, (avg_kp_ratio - 1.0) / (config.kp_ratio_threshold - 1.0))
    area_conf = min(1.0, (area_ratio - 1.0) / (config.area_ratio_threshold - 1.0))
    score = (kp_conf + area_conf) / 2.0

    if avg_kp_ratio >= config.kp_ratio_threshold:
        score += 0.2
        factors.append("KP_THRESHOLD_MET")
    if area_ratio >= config.area_ratio_threshold:
        score += 0.2
        factors.append("AREA_THRESHOLD_MET")

    if has_strong_trend:
        score += 0.25
        factors.append("STRONG_TREND")

    if _match_quality(match_count, adaptive_min) > 1.5:
        score += 0.1
        factors.append("GOOD_MATCHES")

    score += flow.confidence_modifier
    if flow.confidence_modifier != 0.0:
        factors.append(f"FLOW_{flow.status.value}")

    if is_static:
        score -= 0.2
        factors.append("STATIC_PENALTY")

    near_kp = avg_kp_ratio >= config.kp_ratio_threshold * config.emergency_kp_threshold
    near_area = area_ratio >= config.area_ratio_threshold * config.emergency_area_threshold
    if (near_kp or near_area) and has_strong_trend:
        score += 0.3
        factors.append("EMERGENCY_CONDITIONS")

    score = max(0.0, min(1.0, score))

    if score >= config.excellent_confidence_threshold:
        reason, detect = "HIGH_CONFIDENCE", True
    elif score >= config.min_confidence_threshold:
        reason, detect = "MODERATE_CONFIDENCE", True
    else:
        reason, detect = "LOW_CONFIDENCE", False

    return DetectionConfidence(
        score=score, primary_reason=reason, contributing_factors=factors, should_detect=detect
    )