"""Frame-by-frame obstacle detection from the growth of matched features."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .confidence import (
    DetectionConfidence,
    adaptive_min_matches,
    calculate_confidence,
    is_likely_static,
)
from .config import DetectorConfig
from .flow import FlowAnalysis, analyze_optical_flow
from .geometry import Point, Rect, convex_hull, fixed_center_roi, polygon_area
from .matching import KeyPoint, Match, Norm, knn_match, ratio_test
from .tracking import BufferSummary, DetectionBuffer, TrendHistory

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Everything the detector concluded about one frame."""

    reason: str
    obstacle: bool
    roi: Rect
    keypoint_count: int
    buffer: BufferSummary
    strong_trend: bool
    matches: list[Match] = field(default_factory=list)
    prev_hull: list[Point] = field(default_factory=list)
    curr_hull: list[Point] = field(default_factory=list)
    flow: FlowAnalysis | None = None
    confidence: DetectionConfidence = field(default_factory=DetectionConfidence)

    @property
    def state(self) -> int:
        """The published obstacle state: 1 for an obstacle, 0 otherwise."""
        return int(self.obstacle)


@dataclass
class _Frame:
    keypoints: list[KeyPoint]
    descriptors: np.ndarray
    roi: Rect


def _as_descriptor_array(descriptors: object) -> np.ndarray:
    array = np.asarray(descriptors)
    if array.size == 0:
        width = array.shape[-1] if array.ndim == 2 else 0
        return array.reshape(0, width)
    if array.ndim != 2:
        raise ValueError("descriptors must be a 2-D array, one row per keypoint")
    return array


class ObstacleDetector:
    """Detects approaching obstacles by watching features in the image centre expand.

    Feed it the keypoints and descriptors of each frame in turn. Keypoints
    outside the fixed centre region of interest are ignored.
    """

    def __init__(self, config: DetectorConfig | None = None, norm: Norm = Norm.HAMMING) -> None:
        self.config = config or DetectorConfig()
        self.norm = norm
        self._trend = TrendHistory.from_config(self.config)
        self._buffer = DetectionBuffer.from_config(self.config)
        self._prev: _Frame | None = None

    def reset(self) -> None:
        """Forget the previous frame and all history."""
        self._prev = None
        self._trend.clear()
        self._buffer.clear()

    def _result(self, reason: str, roi: Rect, keypoints: list[KeyPoint], **extra: object) -> FrameResult:
        return FrameResult(
            reason=reason,
            obstacle=bool(extra.pop("obstacle", False)),
            roi=roi,
            keypoint_count=len(keypoints),
            buffer=self._buffer.summary(),
            strong_trend=self._trend.has_strong_growth(),
            **extra,
        )

    def process(
        self,
        keypoints: Iterable[KeyPoint],
        descriptors: object,
        width: int,
        height: int,
    ) -> FrameResult:
        """Analyse one frame of the given size against the previous one."""
        cfg = self.config
        kps = list(keypoints)
        desc = _as_descriptor_array(descriptors)
        if len(kps) != desc.shape[0]:
            raise ValueError(
                f"{len(kps)} keypoints but {desc.shape[0]} descriptor rows"
            )

        roi = fixed_center_roi(width, height, cfg.roi_margin_x, cfg.roi_margin_y)
        inside = np.array(
            [roi.x <= kp.x < roi.right and roi.y <= kp.y < roi.bottom for kp in kps],
            dtype=bool,
        )
        curr_kps = [kp for kp, keep in zip(kps, inside) if keep]
        curr_desc = desc[inside] if kps else desc
        current = _Frame(curr_kps, curr_desc, roi)

        prev = self._prev
        self._prev = current
        if prev is None:
            return self._result("INIT", roi, curr_kps)

        adaptive = adaptive_min_matches(cfg, min(len(prev.keypoints), len(curr_kps)))

        if (
            prev.descriptors.size == 0
            or curr_desc.size == 0
            or len(prev.keypoints) < 3
            or len(curr_kps) < 3
        ):
            logger.warning(
                "Insufficient features: prev=%d, curr=%d", len(prev.keypoints), len(curr_kps)
            )
            self._buffer.update(False, 0.0)
            return self._result("LOW_FEATURES", roi, curr_kps)

        knn = knn_match(prev.descriptors, curr_desc, 2, self.norm)
        good = ratio_test(knn, cfg.match_ratio_threshold)

        min_required = max(3, adaptive // 2)
        if len(good) < min_required:
            logger.warning(
                "Insufficient good matches: %d (need %d)", len(good), min_required
            )
            self._buffer.update(False, 0.0)
            return self._result("LOW_MATCHES", roi, curr_kps, matches=good)

        prev_pts: list[Point] = []
        curr_pts: list[Point] = []
        size_ratios: list[float] = []
        for match in good:
            prev_kp = prev.keypoints[match.query_idx]
            curr_kp = curr_kps[match.train_idx]
            size_ratio = curr_kp.size / (prev_kp.size + 1e-6)
            if size_ratio > 1.0:
                prev_pts.append(prev_kp.pt)
                curr_pts.append(curr_kp.pt)
                size_ratios.append(size_ratio)

        flow = analyze_optical_flow(prev_pts, curr_pts, cfg)
        confidence = DetectionConfidence()
        prev_hull: list[Point] = []
        curr_hull: list[Point] = []

        if len(prev_pts) >= 3:
            prev_hull = convex_hull(prev_pts)
            curr_hull = convex_hull(curr_pts)
            area_ratio = polygon_area(curr_hull) / (polygon_area(prev_hull) + 1e-6)
            avg_kp_ratio = sum(size_ratios) / len(size_ratios)

            self._trend.update(avg_kp_ratio, area_ratio)
            strong = self._trend.has_strong_growth()
            static = is_likely_static(cfg, avg_kp_ratio, area_ratio, flow.avg_magnitude)
            confidence = calculate_confidence(
                cfg, avg_kp_ratio, area_ratio, strong, len(prev_pts), adaptive, flow, static
            )
            logger.info(
                "ROI: %dx%d, Expanding: %d, AvgKP: %.3f, Area: %.3f, Flow: %s (%.2f), "
                "Confidence: %.3f (%s)",
                roi.width, roi.height, len(prev_pts), avg_kp_ratio, area_ratio,
                flow.status.value, flow.avg_magnitude, confidence.score,
                confidence.primary_reason,
            )

        self._buffer.update(confidence.should_detect, confidence.score)
        obstacle = self._buffer.should_trigger()
        if obstacle:
            logger.warning(
                "OBSTACLE DETECTED: %s (avg_conf: %.3f)",
                confidence.primary_reason, self._buffer.average_confidence,
            )

        return self._result(
            confidence.primary_reason,
            roi,
            curr_kps,
            obstacle=obstacle,
            matches=good,
            prev_hull=prev_hull,
            curr_hull=curr_hull,
            flow=flow,
            confidence=confidence,
        )