"""
多维回归

元算法：把 N 个一维回归模型组合成一个 M 维输入 -> N 维输出的回归模型。
第 j 个子模型用同一组输入和第 j 个目标维度训练；预测时依次调用所有子模型并拼接输出。
"""

from __future__ import annotations

import copy
from typing import Any

import numpy as np

from ...data import RegressionData
from ...errors import GRTError, TrainError
from ..base import Regressifier
from ..registry import get_model, register_model


def _build_regressifier(regressifier: Regressifier | dict[str, Any] | str) -> Regressifier:
    """由模型实例、{name, params} 字典或模型名称构建模板回归模型。"""
    if isinstance(regressifier, Regressifier):
        template = copy.deepcopy(regressifier)
        template.clear()
        return template
    if isinstance(regressifier, str):
        regressifier = {"name": regressifier}
    if isinstance(regressifier, dict):
        if "name" not in regressifier:
            raise ValueError("regressifier config must contain 'name'")
        model = get_model(regressifier["name"], **dict(regressifier.get("params") or {}))
        if not isinstance(model, Regressifier):
            raise TypeError(f"'{regressifier['name']}' is not a regression model")
        return model
    raise TypeError(f"Unsupported regressifier: {regressifier!r}")


@register_model("multidimensional_regression")
class MultidimensionalRegression(Regressifier):
    """
    多维回归模型

    示例：
        model = MultidimensionalRegression(LinearRegression(), use_scaling=True)
        model.train(regression_data)   # 3 个目标维度 -> 训练 3 个 LinearRegression
        y = model.predict([0.1, 0.2])  # len(y) == 3
    """

    def __init__(self, regressifier: Regressifier | dict[str, Any] | str = "linear_regression", use_scaling: bool = False, **kwargs):
        """
        Args:
            regressifier: 一维回归模型模板（实例、{name, params} 字典或名称）
            use_scaling: 训练前是否把输入缩放到 [0, 1]
        """
        self.regressifier = _build_regressifier(regressifier)
        super().__init__(use_scaling=use_scaling, **kwargs)
        self.regressifiers: list[Regressifier] = []

    def get_config(self) -> dict[str, Any]:
        config = super().get_config()
        config["regressifier"] = {
            "name": self.regressifier.model_type,
            "params": self.regressifier.get_config(),
        }
        return config

    def clear(self) -> None:
        super().clear()
        self.regressifiers = []

    def set_regressifier(self, regressifier: Regressifier | dict[str, Any] | str) -> None:
        """替换子模型模板（会清空已训练的子模型）。"""
        self.regressifier = _build_regressifier(regressifier)
        self.clear()

    def _fit(self, inputs: np.ndarray, targets: np.ndarray) -> None:
        num_outputs = targets.shape[1]
        self._log_training(f"Training {num_outputs} regression models of type {self.regressifier.model_type}")

        regressifiers = []
        for j in range(num_outputs):
            model = copy.deepcopy(self.regressifier)
            model.enable_training_logging(self.training_log)
            data = RegressionData.from_arrays(inputs, targets[:, j : j + 1], dataset_name=f"output_dimension_{j}")
            self._log_training(f"Training regression model for output dimension {j + 1}/{num_outputs}")
            try:
                model.train(data)
            except GRTError as e:
                raise TrainError(f"Failed to train the regression model for output dimension {j}: {e}") from e
            regressifiers.append(model)

        self.regressifiers = regressifiers
        self.num_output_dimensions = num_outputs

    def _predict(self, x: np.ndarray) -> np.ndarray:
        return np.concatenate([model.predict(x) for model in self.regressifiers])

    def _get_parameters(self) -> dict[str, Any]:
        return {"regressifiers": [model.to_dict() for model in self.regressifiers]}

    def _set_parameters(self, parameters: dict[str, Any]) -> None:
        self.regressifiers = [Regressifier.from_dict(d) for d in parameters["regressifiers"]]

    def get_model_info(self) -> dict[str, Any]:
        info = super().get_model_info()
        info["regressifiers"] = [model.get_model_info() for model in self.regressifiers]
        return info
