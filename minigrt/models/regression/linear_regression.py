"""
线性回归

一维输出的线性回归：y = w0 + w · x，使用最小二乘拟合。
多维输出请用 MultidimensionalRegression 包装。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...errors import TrainError
from ..base import Regressifier
from ..registry import register_model


@register_model("linear_regression")
class LinearRegression(Regressifier):
    """
    线性回归模型

    示例：
        model = LinearRegression(use_scaling=True)
        model.train(regression_data)   # regression_data 只能有一个目标维度
        y = model.predict([0.1, 0.2])
    """

    def __init__(self, use_scaling: bool = False, **kwargs):
        super().__init__(use_scaling=use_scaling, **kwargs)
        self.intercept = 0.0
        self.weights = np.zeros(0)

    def _fit(self, inputs: np.ndarray, targets: np.ndarray) -> None:
        if targets.ndim != 2 or targets.shape[1] != 1:
            raise TrainError(
                f"LinearRegression supports exactly one target dimension, got {targets.shape[1] if targets.ndim == 2 else targets.ndim}. "
                "Use MultidimensionalRegression for more."
            )
        y = targets[:, 0]
        design = np.hstack([np.ones((inputs.shape[0], 1)), inputs])
        coeffs, _, rank, _ = np.linalg.lstsq(design, y, rcond=None)
        if not np.all(np.isfinite(coeffs)):
            raise TrainError("LinearRegression: least squares produced non-finite coefficients")
        if rank < design.shape[1]:
            self._log_training(f"Design matrix is rank deficient ({rank} < {design.shape[1]}), using the minimum norm solution")

        self.intercept = float(coeffs[0])
        self.weights = coeffs[1:].copy()
        self.num_output_dimensions = 1

        rms = float(np.sqrt(np.mean((design @ coeffs - y) ** 2)))
        self._log_training(f"Training RMS error: {rms}")

    def _predict(self, x: np.ndarray) -> np.ndarray:
        return np.array([self.intercept + float(np.dot(self.weights, x))])

    def _get_parameters(self) -> dict[str, Any]:
        return {"intercept": self.intercept, "weights": self.weights.tolist()}

    def _set_parameters(self, parameters: dict[str, Any]) -> None:
        self.intercept = float(parameters["intercept"])
        self.weights = np.asarray(parameters["weights"], dtype=float)
