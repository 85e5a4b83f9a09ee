"""
预处理模块

提供：
- 最小/最大值范围计算（compute_ranges）
- 线性缩放（scale / MinMaxScaler）
"""

from __future__ import annotations

from typing import Any

import numpy as np

from .logger import warn_n_times


def compute_ranges(values: np.ndarray) -> np.ndarray:
    """计算每一维的 (min, max)。

    Args:
        values: 形状为 (n_samples, n_dims) 的数组

    Returns:
        np.ndarray: 形状为 (n_dims, 2) 的范围数组
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 2 or values.shape[0] == 0:
        raise ValueError(f"compute_ranges expects a non-empty 2D array, got shape={values.shape}")
    return np.stack([values.min(axis=0), values.max(axis=0)], axis=1)


def scale(values: np.ndarray, ranges: np.ndarray, target_min: float = 0.0, target_max: float = 1.0) -> np.ndarray:
    """把 values 从 ranges 线性映射到 [target_min, target_max]。

    范围为零的维度直接映射到 target_min。不做截断，超出训练范围的值会落在目标区间之外。
    """
    values = np.asarray(values, dtype=float)
    ranges = np.asarray(ranges, dtype=float)
    lo, hi = ranges[:, 0], ranges[:, 1]
    span = hi - lo
    flat = span == 0
    if np.any(flat):
        warn_n_times(f"Scaling: {int(flat.sum())} dimension(s) have a zero range, mapped to {target_min}")
    safe_span = np.where(flat, 1.0, span)
    out = (values - lo) / safe_span * (target_max - target_min) + target_min
    return np.where(flat, target_min, out)


class MinMaxScaler:
    """
    最小-最大缩放器

    在训练数据上拟合每一维的范围，之后把输入映射到 [target_min, target_max]。
    """

    def __init__(self, target_min: float = 0.0, target_max: float = 1.0):
        self.target_min = target_min
        self.target_max = target_max
        self.ranges: np.ndarray | None = None

    @property
    def is_fitted(self) -> bool:
        return self.ranges is not None

    def fit(self, values: np.ndarray) -> MinMaxScaler:
        self.ranges = compute_ranges(values)
        return self

    def transform(self, values: np.ndarray) -> np.ndarray:
        if self.ranges is None:
            raise RuntimeError("MinMaxScaler must be fitted before transform")
        return scale(values, self.ranges, self.target_min, self.target_max)

    def fit_transform(self, values: np.ndarray) -> np.ndarray:
        return self.fit(values).transform(values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_min": self.target_min,
            "target_max": self.target_max,
            "ranges": None if self.ranges is None else self.ranges.tolist(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MinMaxScaler:
        scaler = cls(target_min=d.get("target_min", 0.0), target_max=d.get("target_max", 1.0))
        if d.get("ranges") is not None:
            scaler.ranges = np.asarray(d["ranges"], dtype=float)
        return scaler
