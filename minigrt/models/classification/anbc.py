"""
ANBC: 自适应朴素贝叶斯分类器（Adaptive Naive Bayes Classifier）

每个类、每个维度用一个高斯分布建模；类距离为加权对数似然之和。
训练时记录每个类在自身训练样本上的对数似然均值/标准差，
拒绝阈值 = 均值 - null_rejection_coeff * 标准差。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...config import GRT_DEFAULT_NULL_CLASS_LABEL
from ...errors import TrainError
from ..base import Classifier
from ..registry import register_model

# 标准差下限，避免常数维度导致除零
MIN_SIGMA = 1.0e-2

_LOG_SQRT_2PI = 0.5 * np.log(2.0 * np.pi)


def gaussian_log_likelihood(x: np.ndarray, mu: np.ndarray, sigma: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    加权高斯对数似然。

    Args:
        x: (..., M) 输入
        mu, sigma, weights: (M,) 或可广播到 x 的参数

    Returns:
        沿最后一维求和后的对数似然
    """
    z = (x - mu) / sigma
    return np.sum(weights * (-np.log(sigma) - _LOG_SQRT_2PI - 0.5 * z * z), axis=-1)


@register_model("anbc")
class ANBC(Classifier):
    """
    自适应朴素贝叶斯分类器

    示例：
        anbc = ANBC(use_scaling=True, use_null_rejection=True, null_rejection_coeff=10)
        anbc.train(training_data)
        label = anbc.predict(sample)      # null rejection 时可能返回 0
        anbc.get_class_likelihoods()
    """

    def __init__(
        self,
        use_scaling: bool = False,
        use_null_rejection: bool = False,
        null_rejection_coeff: float = 10.0,
        class_weights: dict[int, Any] | None = None,
        **kwargs,
    ):
        super().__init__(
            use_scaling=use_scaling,
            use_null_rejection=use_null_rejection,
            null_rejection_coeff=null_rejection_coeff,
            **kwargs,
        )
        self.class_weights: dict[int, np.ndarray] = {}
        self.set_weights(class_weights)
        self._reset_parameters()

    def _reset_parameters(self) -> None:
        self.mu = np.zeros((0, 0))
        self.sigma = np.zeros((0, 0))
        self.weights = np.zeros((0, 0))
        self.training_mu = np.zeros(0)
        self.training_sigma = np.zeros(0)
        self.null_rejection_thresholds = np.zeros(0)

    def clear(self) -> None:
        super().clear()
        self._reset_parameters()

    def set_weights(self, class_weights: dict[int, Any] | None) -> None:
        """
        设置每个类的维度权重（下次训练时生效）。

        Args:
            class_weights: {类标签: 长度为 M 的权重向量}；None 表示全部为 1
        """
        self.class_weights = {int(k): np.asarray(v, dtype=float).reshape(-1) for k, v in (class_weights or {}).items()}

    def get_config(self) -> dict[str, Any]:
        config = super().get_config()
        if self.class_weights:
            config["class_weights"] = {str(k): v.tolist() for k, v in self.class_weights.items()}
        return config

    def _fit(self, inputs: np.ndarray, targets: np.ndarray) -> None:
        labels = np.asarray(targets, dtype=np.int64)
        class_labels = sorted(int(c) for c in np.unique(labels))
        if GRT_DEFAULT_NULL_CLASS_LABEL in class_labels:
            raise TrainError(f"Class label {GRT_DEFAULT_NULL_CLASS_LABEL} is reserved for the null class and cannot be trained")

        num_dims = inputs.shape[1]
        mu, sigma, weights, training_mu, training_sigma = [], [], [], [], []
        for label in class_labels:
            x = inputs[labels == label]
            class_mu = x.mean(axis=0)
            class_sigma = x.std(axis=0, ddof=1) if x.shape[0] > 1 else np.zeros(num_dims)
            class_sigma = np.maximum(class_sigma, MIN_SIGMA)

            class_weights = self.class_weights.get(label, np.ones(num_dims))
            if class_weights.size != num_dims:
                raise TrainError(f"Weights for class {label} have {class_weights.size} values, expected {num_dims}")

            log_likelihoods = gaussian_log_likelihood(x, class_mu, class_sigma, class_weights)
            mu.append(class_mu)
            sigma.append(class_sigma)
            weights.append(class_weights)
            training_mu.append(float(np.mean(log_likelihoods)))
            training_sigma.append(float(np.std(log_likelihoods, ddof=1)) if x.shape[0] > 1 else 0.0)
            self._log_training(f"Class {label}: {x.shape[0]} samples, training log-likelihood mean {training_mu[-1]:.4f}")

        self.class_labels = class_labels
        self.mu = np.asarray(mu)
        self.sigma = np.asarray(sigma)
        self.weights = np.asarray(weights)
        self.training_mu = np.asarray(training_mu)
        self.training_sigma = np.asarray(training_sigma)
        self.recompute_null_rejection_thresholds()

    def recompute_null_rejection_thresholds(self) -> None:
        self.null_rejection_thresholds = self.training_mu - self.null_rejection_coeff * self.training_sigma

    def _predict(self, x: np.ndarray) -> int:
        distances = gaussian_log_likelihood(x, self.mu, self.sigma, self.weights)
        shifted = np.exp(distances - np.max(distances))
        likelihoods = shifted / np.sum(shifted)
        best = int(np.argmax(likelihoods))

        self.class_distances = distances
        self.class_likelihoods = likelihoods
        self.max_likelihood = float(likelihoods[best])

        if self.use_null_rejection and distances[best] < self.null_rejection_thresholds[best]:
            return GRT_DEFAULT_NULL_CLASS_LABEL
        return self.class_labels[best]

    def _get_parameters(self) -> dict[str, Any]:
        return {
            "mu": self.mu.tolist(),
            "sigma": self.sigma.tolist(),
            "weights": self.weights.tolist(),
            "training_mu": self.training_mu.tolist(),
            "training_sigma": self.training_sigma.tolist(),
        }

    def _set_parameters(self, parameters: dict[str, Any]) -> None:
        self.mu = np.asarray(parameters["mu"], dtype=float)
        self.sigma = np.asarray(parameters["sigma"], dtype=float)
        self.weights = np.asarray(parameters["weights"], dtype=float)
        self.training_mu = np.asarray(parameters["training_mu"], dtype=float)
        self.training_sigma = np.asarray(parameters["training_sigma"], dtype=float)
        self.recompute_null_rejection_thresholds()
