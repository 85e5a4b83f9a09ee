"""
最小-最大缩放测试
"""

import numpy as np

from minigrt.data import MinMaxScaler, compute_ranges, scale


def test_compute_ranges():
    values = np.array([[0.0, 10.0], [2.0, -10.0], [1.0, 0.0]])
    np.testing.assert_array_equal(compute_ranges(values), [[0.0, 2.0], [-10.0, 10.0]])


def test_scale_maps_to_target_range():
    ranges = np.array([[0.0, 2.0], [-10.0, 10.0]])
    out = scale(np.array([[1.0, 10.0], [0.0, -10.0]]), ranges)
    np.testing.assert_allclose(out, [[0.5, 1.0], [0.0, 0.0]])


def test_scale_zero_range_and_no_clipping():
    """范围为零的维度映射到 target_min；训练范围外的值不截断。"""
    ranges = np.array([[1.0, 1.0], [0.0, 1.0]])
    out = scale(np.array([[1.0, 2.0]]), ranges, target_min=-1.0, target_max=1.0)
    np.testing.assert_allclose(out, [[-1.0, 3.0]])


def test_scaler_serialisation():
    scaler = MinMaxScaler().fit(np.array([[0.1, 3.0], [0.7, 9.0]]))
    restored = MinMaxScaler.from_dict(scaler.to_dict())

    x = np.array([[0.3, 4.0]])
    np.testing.assert_array_equal(restored.transform(x), scaler.transform(x))
    assert not MinMaxScaler.from_dict(MinMaxScaler().to_dict()).is_fitted
