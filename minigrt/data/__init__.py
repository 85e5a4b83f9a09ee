"""
数据模块

提供：
- RegressionData: 回归数据集（M 维输入 -> N 维目标）
- ClassificationData: 分类数据集（类标签 + M 维输入）
- 最小/最大值缩放
"""

from .base import BaseDataset
from .classification_data import ClassificationData, ClassificationSample
from .preprocess import MinMaxScaler, compute_ranges, scale
from .regression_data import RegressionData, RegressionSample

__all__ = [
    "BaseDataset",
    "RegressionData",
    "RegressionSample",
    "ClassificationData",
    "ClassificationSample",
    "MinMaxScaler",
    "compute_ranges",
    "scale",
]
