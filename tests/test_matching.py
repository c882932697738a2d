import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from roiobstacle.matching import KeyPoint, Match, Norm, knn_match, ratio_test


def _binary_descriptors():
    return np.array(
        [
            [0b00000000, 0b11110000],
            [0b10101010, 0b01010101],
            [0b11111111, 0b00001111],
        ],
        dtype=np.uint8,
    )


def test_keypoint_pt_is_position():
    kp = KeyPoint(3.5, 7.25, 12.0)
    assert kp.pt == (3.5, 7.25)


def test_hamming_identical_descriptor_is_nearest():
    train = _binary_descriptors()
    query = train[1:2].copy()
    result = knn_match(query, train, 2, Norm.HAMMING)
    assert len(result) == 1
    best = result[0][0]
    assert best.query_idx == 0
    assert best.train_idx == 1
    assert best.distance == 0.0


def test_hamming_distance_counts_bits():
    query = np.array([[0xFF]], dtype=np.uint8)
    train = np.array([[0x00]], dtype=np.uint8)
    result = knn_match(query, train, 1, Norm.HAMMING)
    assert result[0][0].distance == 8.0


def test_l2_distance():
    result = knn_match([[0.0, 0.0]], [[3.0, 4.0]], 1, Norm.L2)
    assert result[0][0].distance == pytest.approx(5.0)


def test_matches_sorted_and_limited_to_k():
    train = _binary_descriptors()
    query = train.copy()
    result = knn_match(query, train, 2, Norm.HAMMING)
    assert len(result) == len(query)
    for qi, row in enumerate(result):
        assert len(row) == 2
        assert all(m.query_idx == qi for m in row)
        assert row[0].distance <= row[1].distance


def test_k_larger_than_train_returns_all_train():
    train = _binary_descriptors()
    result = knn_match(train[:1], train, 10, Norm.HAMMING)
    assert sorted(m.train_idx for m in result[0]) == [0, 1, 2]


def test_empty_query_gives_no_matches():
    train = _binary_descriptors()
    assert knn_match(np.zeros((0, 2), dtype=np.uint8), train, 2, Norm.HAMMING) == []


def test_empty_train_gives_empty_lists():
    query = _binary_descriptors()
    result = knn_match(query, np.zeros((0, 2), dtype=np.uint8), 2, Norm.HAMMING)
    assert result == [[], [], []]


def test_mismatched_descriptor_length_raises():
    with pytest.raises(ValueError):
        knn_match([[1.0, 2.0]], [[1.0, 2.0, 3.0]], 2, Norm.L2)


def test_invalid_k_raises():
    with pytest.raises(ValueError):
        knn_match([[1.0]], [[1.0]], 0, Norm.L2)


def test_hamming_rejects_float_descriptors():
    with pytest.raises(ValueError):
        knn_match(np.ones((1, 2)), np.ones((1, 2)), 1, Norm.HAMMING)


def test_one_dimensional_descriptors_rejected():
    with pytest.raises(ValueError):
        knn_match([1, 2, 3], [[1, 2, 3]], 1, Norm.L2)


def test_ratio_test_keeps_distinct_and_drops_ambiguous():
    clear = Match(0, 1, 10.0)
    ambiguous = Match(1, 2, 10.0)
    pairs = [
        [clear, Match(0, 3, 20.0)],
        [ambiguous, Match(1, 4, 12.0)],
        [Match(2, 5, 1.0)],
    ]
    assert ratio_test(pairs, 0.75) == [clear]


def test_ratio_test_strict_inequality():
    pair = [Match(0, 0, 3.0), Match(0, 1, 4.0)]
    assert ratio_test([pair], 0.75) == []


@given(
    st.lists(
        st.tuples(
            st.floats(min_value=0, max_value=100, allow_nan=False),
            st.floats(min_value=0, max_value=100, allow_nan=False),
        ),
        max_size=20,
    )
)
def test_ratio_test_returns_subset_of_best_matches(distances):
    pairs = [
        [Match(i, 0, min(a, b)), Match(i, 1, max(a, b))] for i, (a, b) in enumerate(distances)
    ]
    kept = ratio_test(pairs, 0.75)
    firsts = [p[0] for p in pairs]
    assert all(m in firsts for m in kept)
    assert len(kept) <= len(pairs)


def test_knn_on_real_pipeline_feeds_ratio_test():
    train = _binary_descriptors()
    query = train.copy()
    good = ratio_test(knn_match(query, train, 2, Norm.HAMMING), 0.75)
    assert [(m.query_idx, m.train_idx) for m in good] == [(0, 0), (1, 1), (2, 2)]