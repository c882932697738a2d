"""Brute-force descriptor matching and Lowe's ratio test."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .geometry import Point


class Norm(Enum):
    """Distance used to compare descriptors."""

    L2 = "l2"
    HAMMING = "hamming"


@dataclass(frozen=True)
class KeyPoint:
    """A detected feature: its position and the diameter of its neighbourhood."""

    x: float
    y: float
    size: float

    @property
    def pt(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class Match:
    """A pairing of a query descriptor with a train descriptor."""

    query_idx: int
    train_idx: int
    distance: float


def _as_descriptors(data: object, norm: Norm, name: str) -> np.ndarray:
    array = np.asarray(data)
    if array.ndim != 2:
        raise ValueError(f"{name} descriptors must be a 2-D array, got {array.ndim} dimensions")
    if norm is Norm.HAMMING and array.size and array.dtype != np.uint8:
        raise ValueError(f"{name} descriptors must be uint8 for Hamming matching")
    return array


def _distance_matrix(query: np.ndarray, train: np.ndarray, norm: Norm) -> np.ndarray:
    if norm is Norm.HAMMING:
        xor = np.bitwise_xor(query[:, None, :], train[None, :, :])
        return np.unpackbits(xor, axis=2).sum(axis=2).astype(np.float64)
    diff = query[:, None, :].astype(np.float64) - train[None, :, :].astype(np.float64)
    return np.sqrt((diff * diff).sum(axis=2))


def knn_match(query: object, train: object, k: int = 2, norm: Norm = Norm.HAMMING) -> list[list[Match]]:
    """Return, for each query descriptor, its ``k`` nearest train descriptors, closest first.

    Each inner list holds at most ``k`` matches; ties keep the train order.
    """
    if k < 1:
        raise ValueError("k must be at least 1")
    q = _as_descriptors(query, norm, "query")
    t = _as_descriptors(train, norm, "train")
    if q.shape[0] == 0:
        return []
    if t.shape[0] == 0:
        return [[] for _ in range(q.shape[0])]
    if q.shape[1] != t.shape[1]:
        raise ValueError(
            f"descriptor lengths differ: query has {q.shape[1]}, train has {t.shape[1]}"
        )
    distances = _distance_matrix(q, t, norm)
    order = np.argsort(distances, axis=1, kind="stable")[:, :k]
    return [
        [Match(qi, int(ti), float(distances[qi, ti])) for ti in row]
        for qi, row in enumerate(order)
    ]


def ratio_test(knn_matches: Iterable[Sequence[Match]], ratio: float = 0.75) -> list[Match]:
    """Keep the best match of each pair that is clearly better than the runner-up.

    Only candidate lists with exactly two matches are considered.
    """
    return [
        pair[0]
        for pair in knn_matches
        if len(pair) == 2 and pair[0].distance < ratio * pair[1].distance
    ]