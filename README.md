# roiobstacle

Detects approaching obstacles in a camera stream by watching how matched
features inside a fixed centre region of interest grow from one frame to the
next. When keypoints get larger and the area they span expands, something is
getting closer.

## What it does

You hand it keypoints and descriptors for each frame, and it:

- works out the centre region of interest (`geometry.fixed_center_roi`) and
  ignores keypoints outside it; `geometry.roi_mask` gives the matching
  `uint8` mask if your feature detector takes one,
- matches the descriptors of consecutive frames by brute-force
  k-nearest-neighbour search (`matching.knn_match`, with `Norm.HAMMING` for
  `uint8` binary descriptors or `Norm.L2` for float descriptors) and keeps the
  unambiguous matches (`matching.ratio_test`),
- keeps the matches whose keypoints grew, and compares the convex hulls of
  their old and new positions (`geometry.convex_hull`,
  `geometry.polygon_area`),
- classifies the motion of those points (`flow.analyze_optical_flow`, giving a
  `FlowAnalysis` with a `FlowStatus`); the result only nudges the confidence,
  it never vetoes a detection,
- scores the frame from keypoint-size growth, hull-area growth, growth trend,
  match quality, flow and a static-scene penalty
  (`confidence.calculate_confidence`, `confidence.is_likely_static`,
  `confidence.adaptive_min_matches`),
- smooths the decision over a few frames (`tracking.TrendHistory`,
  `tracking.DetectionBuffer`).

`detector.ObstacleDetector` ties all of this together.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
import numpy as np

from roiobstacle.detector import ObstacleDetector
from roiobstacle.matching import KeyPoint, Norm

detector = ObstacleDetector()  # Norm.HAMMING by default; pass norm=Norm.L2 for float descriptors

for keypoints, descriptors, width, height in frames:
    # keypoints: KeyPoint(x, y, size) objects
    # descriptors: array with one row per keypoint (uint8 for Hamming matching)
    result = detector.process(keypoints, descriptors, width, height)
    if result.obstacle:
        print("obstacle ahead", result.confidence.score)
```

`process` raises `ValueError` when the number of keypoints and descriptor rows
differ. The first frame only primes the detector and is reported with the
reason `"INIT"`. Every call returns a `FrameResult` holding:

- `obstacle` and `state` (1 for an obstacle, 0 otherwise),
- `reason`: `INIT`, `LOW_FEATURES`, `LOW_MATCHES`, `INSUFFICIENT_DATA`,
  `LOW_CONFIDENCE`, `MODERATE_CONFIDENCE` or `HIGH_CONFIDENCE`,
- `roi`, `keypoint_count` (keypoints inside the ROI), `matches`,
  `prev_hull`, `curr_hull`,
- `flow` (a `FlowAnalysis`, or `None` when the frame was not analysed),
- `confidence` (a `DetectionConfidence` with `score`, `primary_reason`,
  `contributing_factors` and `should_detect`),
- `buffer` (detections, size and average confidence of the recent frames) and
  `strong_trend`.

`detector.reset()` forgets the previous frame and all history. Warnings and
per-frame measurements are logged through the standard `logging` module under
the `roiobstacle.detector` logger.

## Tuning

All thresholds live in the frozen dataclass `config.DetectorConfig` and are
passed to `ObstacleDetector(config=...)`; inconsistent values raise
`ValueError`. The defaults are a centre ROI with 25% margins, a ratio test at
0.75, a keypoint growth threshold of 1.25, an area growth threshold of 1.35,
a minimum confidence of 0.75, an "excellent" confidence of 0.85, and a buffer
of three frames that must all vote for a detection unless their average
confidence is excellent, in which case one vote is enough.

## What it does not do

- It does not find features: keypoints and descriptors must come from a
  detector of your choice.
- It does not read cameras, decode images or subscribe to or publish on any
  message bus; you call `process` yourself and act on the `FrameResult`.
- It does not draw debug images. The result carries the ROI, hulls, matches
  and scores, so you can render them with whatever library you use.
- It has no command-line program.