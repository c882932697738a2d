"""Short histories that smooth detection over consecutive frames."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import pairwise

from .config import DetectorConfig


@dataclass(frozen=True)
class BufferSummary:
    """How many recent frames voted for a detection, and their mean confidence."""

    detections: int
    size: int
    average_confidence: float


class TrendHistory:
    """Sliding windows of keypoint-size and hull-area growth ratios."""

    def __init__(self, window_size: int = 3, threshold: float = 0.06) -> None:
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self.threshold = threshold
        self._kp: deque[float] = deque(maxlen=window_size)
        self._area: deque[float] = deque(maxlen=window_size)

    @classmethod
    def from_config(cls, config: DetectorConfig) -> TrendHistory:
        return cls(config.trend_window_size, config.strong_trend_threshold)

    @property
    def kp_history(self) -> tuple[float, ...]:
        return tuple(self._kp)

    @property
    def area_history(self) -> tuple[float, ...]:
        return tuple(self._area)

    def update(self, kp_ratio: float, area_ratio: float) -> None:
        """Record the ratios of one frame, dropping the oldest beyond the window."""
        self._kp.append(kp_ratio)
        self._area.append(area_ratio)

    def _is_growing(self, values: deque[float]) -> bool:
        return all(later - earlier >= self.threshold for earlier, later in pairwise(values))

    def has_strong_growth(self) -> bool:
        """Whether either ratio rose by at least the threshold at every step in the window."""
        if len(self._kp) < 2 or len(self._area) < 2:
            return False
        return self._is_growing(self._kp) or self._is_growing(self._area)

    def clear(self) -> None:
        self._kp.clear()
        self._area.clear()


class DetectionBuffer:
    """The per-frame detection votes and confidences of the most recent frames."""

    def __init__(
        self,
        size: int = 3,
        min_detections: int = 3,
        excellent_threshold: float = 0.85,
    ) -> None:
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        self.min_detections = min_detections
        self.excellent_threshold = excellent_threshold
        self._entries: deque[tuple[bool, float]] = deque(maxlen=size)

    @classmethod
    def from_config(cls, config: DetectorConfig) -> DetectionBuffer:
        return cls(
            config.detection_buffer_size,
            config.min_detections_for_trigger,
            config.excellent_confidence_threshold,
        )

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.size

    @property
    def average_confidence(self) -> float:
        if not self._entries:
            return 0.0
        return sum(conf for _, conf in self._entries) / len(self._entries)

    def update(self, detection: bool, confidence: float) -> None:
        """Record one frame's vote, dropping the oldest beyond the buffer size."""
        self._entries.append((bool(detection), float(confidence)))

    def should_trigger(self) -> bool:
        """Whether the buffered votes are consistent enough to report an obstacle.

        A full buffer is required. With a very high mean confidence a single
        vote suffices; otherwise the configured number of votes is needed.
        """
        if not self.is_full:
            return False
        detections = sum(1 for vote, _ in self._entries if vote)
        if self.average_confidence >= self.excellent_threshold:
            return detections >= 1
        return detections >= self.min_detections

    def summary(self) -> BufferSummary:
        return BufferSummary(
            detections=sum(1 for vote, _ in self._entries if vote),
            size=len(self._entries),
            average_confidence=self.average_confidence,
        )

    def clear(self) -> None:
        self._entries.clear()