"""Soft analysis of the motion between matched feature positions."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .config import DetectorConfig
from .geometry import Point


class FlowStatus(Enum):
    """How the observed motion was classified."""

    NO_FLOW = "NO_FLOW"
    SLOW_MOTION = "SLOW_MOTION"
    POSSIBLE_SHAKE = "POSSIBLE_SHAKE"
    INCONSISTENT_FLOW = "INCONSISTENT_FLOW"
    GOOD_FLOW = "GOOD_FLOW"


@dataclass(frozen=True)
class FlowAnalysis:
    """Summary of the flow field and how it should shift detection confidence."""

    avg_magnitude: float = 0.0
    flow_consistency: float = 0.0
    is_valid_motion: bool = True
    is_likely_shake: bool = False
    status: FlowStatus = FlowStatus.NO_FLOW
    confidence_modifier: float = 0.0


def _mean_consistency(flows: list[Point]) -> float:
    """Average clipped cosine similarity between each flow vector and the mean flow."""
    count = len(flows)
    mean_x = sum(fx for fx, _ in flows) / count
    mean_y = sum(fy for _, fy in flows) / count
    mean_norm = math.hypot(mean_x, mean_y)
    similarities = [
        max(0.0, (fx * mean_x + fy * mean_y) / (math.hypot(fx, fy) * mean_norm))
        for fx, fy in flows
        if math.hypot(fx, fy) > 0.1 and mean_norm > 0.1
    ]
    return sum(similarities) / len(similarities) if similarities else 0.0


def analyze_optical_flow(
    prev_pts: Iterable[Point],
    curr_pts: Iterable[Point],
    config: DetectorConfig | None = None,
) -> FlowAnalysis:
    """Classify the motion from ``prev_pts`` to ``curr_pts``.

    The analysis never blocks detection; it yields a confidence modifier.
    Empty or unequal point lists give a neutral ``NO_FLOW`` result.
    """
    cfg = config or DetectorConfig()
    prev = [(float(x), float(y)) for x, y in prev_pts]
    curr = [(float(x), float(y)) for x, y in curr_pts]
    if not prev or len(prev) != len(curr):
        return FlowAnalysis()

    flows = [(cx - px, cy - py) for (px, py), (cx, cy) in zip(prev, curr)]
    avg_magnitude = sum(math.hypot(fx, fy) for fx, fy in flows) / len(flows)
    consistency = _mean_consistency(flows) if len(flows) > 1 else 0.0

    consistency_threshold = cfg.flow_consistency_threshold
    if len(prev) < 8:
        consistency_threshold *= 0.7

    is_shake = False
    if avg_magnitude < cfg.flow_magnitude_min_threshold:
        status, modifier = FlowStatus.SLOW_MOTION, -0.1
    elif avg_magnitude > cfg.flow_magnitude_max_threshold:
        status, modifier, is_shake = FlowStatus.POSSIBLE_SHAKE, -0.2, True
    elif consistency < consistency_threshold:
        status, modifier = FlowStatus.INCONSISTENT_FLOW, -0.15
    else:
        status, modifier = FlowStatus.GOOD_FLOW, 0.1

    is_valid = True
    if avg_magnitude > cfg.flow_magnitude_max_threshold * 1.5:
        is_valid = False
        modifier = -0.4

    return FlowAnalysis(
        avg_magnitude=avg_magnitude,
        flow_consistency=consistency,
        is_valid_motion=is_valid,
        is_likely_shake=is_shake,
        status=status,
        confidence_modifier=modifier,
    )