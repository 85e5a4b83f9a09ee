"""
Evaluator 类

提供评估功能，支持：
- 回归任务（RMS 误差、SSE、MAE）
- 分类任务（准确率、precision / recall / F-measure、混淆矩阵）
"""

from __future__ import annotations

from typing import Any

import numpy as np
from sklearn.metrics import confusion_matrix, precision_recall_fscore_support

from ..config import GRT_DEFAULT_NULL_CLASS_LABEL
from ..data import ClassificationData, RegressionData
from ..errors import DimensionMismatchError, EvaluationError, StateError
from ..models import BaseModel, Classifier, Regressifier


class Evaluator:
    """
    评估器

    对数据集中的每个样本调用 model.predict()，与真值比较并计算汇总指标。
    """

    def __init__(self, task_type: str = "classification"):
        """
        初始化评估器。

        Args:
            task_type: 任务类型（'classification', 'regression'）
        """
        if task_type not in ("classification", "regression"):
            raise ValueError(f"Unknown task type: {task_type}")
        self.task_type = task_type

    @classmethod
    def for_model(cls, model: BaseModel) -> Evaluator:
        if isinstance(model, Regressifier):
            return cls("regression")
        if isinstance(model, Classifier):
            return cls("classification")
        raise TypeError(f"Cannot evaluate a {type(model).__name__}")

    def evaluate(self, model: BaseModel, dataset: RegressionData | ClassificationData) -> dict[str, Any]:
        """
        评估模型。

        Args:
            model: 已训练的模型
            dataset: 测试数据集

        Returns:
            评估指标字典

        Raises:
            StateError: 模型未训练
            DimensionMismatchError: 数据集与模型维度不一致
        """
        if not model.is_trained:
            raise StateError(f"{model.__class__.__name__}: cannot test a model that has not been trained")
        if dataset.num_samples == 0:
            raise EvaluationError("Cannot evaluate on an empty dataset")
        if dataset.num_input_dimensions != model.num_input_dimensions:
            raise DimensionMismatchError("input", model.num_input_dimensions, dataset.num_input_dimensions)

        if self.task_type == "regression":
            if dataset.num_target_dimensions != model.num_output_dimensions:
                raise DimensionMismatchError("target", model.num_output_dimensions, dataset.num_target_dimensions)
            predictions = np.asarray([model.predict(x) for x in dataset.inputs])
            return self._compute_regression_metrics(predictions, np.asarray(dataset.targets))

        predictions = np.asarray([model.predict(x) for x in dataset.inputs], dtype=np.int64)
        return self._compute_classification_metrics(
            predictions,
            np.asarray(dataset.labels),
            class_labels=list(model.class_labels),
            include_null_class=model.use_null_rejection,
        )

    def _compute_regression_metrics(self, predictions: np.ndarray, targets: np.ndarray) -> dict[str, float]:
        """计算回归任务指标。RMS 误差在所有样本和所有维度上取平均。"""
        predictions = np.asarray(predictions, dtype=float).reshape(targets.shape)
        squared = (predictions - targets) ** 2
        return {
            "rms_error": float(np.sqrt(np.mean(squared))),
            "sse": float(np.sum(squared)),
            "mae": float(np.mean(np.abs(predictions - targets))),
            "num_samples": int(targets.shape[0]),
        }

    def _compute_classification_metrics(
        self,
        predictions: np.ndarray,
        labels: np.ndarray,
        class_labels: list[int] | None = None,
        include_null_class: bool = False,
    ) -> dict[str, Any]:
        """
        计算分类任务指标。

        准确率以百分比给出。precision / recall / F-measure 按 class_labels 逐类计算；
        include_null_class 为 True 时混淆矩阵的第一行/列为空类（标签 0）。
        """
        if class_labels is None:
            class_labels = sorted(int(c) for c in np.unique(labels) if c != GRT_DEFAULT_NULL_CLASS_LABEL)
        correct = int(np.sum(predictions == labels))
        total = int(labels.shape[0])

        precision, recall, f_measure, _ = precision_recall_fscore_support(
            labels, predictions, labels=class_labels, average=None, zero_division=0
        )
        matrix_labels = ([GRT_DEFAULT_NULL_CLASS_LABEL] if include_null_class else []) + list(class_labels)
        if np.isin(labels, matrix_labels).any():
            matrix = confusion_matrix(labels, predictions, labels=matrix_labels)
        else:
            # 测试集里没有任何已训练的类
            matrix = np.zeros((len(matrix_labels), len(matrix_labels)), dtype=np.int64)

        return {
            "accuracy": 100.0 * correct / total,
            "num_correct": correct,
            "num_samples": total,
            "class_labels": list(class_labels),
            "precision": precision.tolist(),
            "recall": recall.tolist(),
            "f_measure": f_measure.tolist(),
            "confusion_matrix_labels": matrix_labels,
            "confusion_matrix": matrix.tolist(),
            "num_rejected": int(np.sum(predictions == GRT_DEFAULT_NULL_CLASS_LABEL)),
        }
