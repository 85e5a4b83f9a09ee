"""
异常定义

所有库内错误都继承自 GRTError，驱动程序只需捕获这一个基类：
- GRTIOError: 文件缺失、不可读或格式错误（数据集、模型、pipeline 文件）
- DimensionMismatchError: 输入/目标维度不一致（数据集之间，或样本与已训练模型之间）
- TrainError: 训练失败（空数据集、拟合失败）
- PredictError: 预测失败（输入包含非有限值等）
- EvaluationError: 测试失败（如空测试集）
- StateError: 在错误的状态下调用操作（如训练前预测）
"""

from __future__ import annotations


class GRTError(Exception):
    """minigrt 异常基类。"""


class GRTIOError(GRTError, OSError):
    """数据集、模型或 pipeline 文件读写错误。"""


class DimensionMismatchError(GRTError, ValueError):
    """维度不匹配。"""

    def __init__(self, what: str, expected: int, actual: int):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} dimension mismatch: expected {expected}, got {actual}")


class TrainError(GRTError):
    """训练失败。"""


class PredictError(GRTError):
    """预测失败。"""


class EvaluationError(GRTError):
    """测试（评估）失败。"""


class StateError(GRTError):
    """操作与当前状态不符。"""


__all__ = [
    "GRTError",
    "GRTIOError",
    "DimensionMismatchError",
    "TrainError",
    "PredictError",
    "EvaluationError",
    "StateError",
]
