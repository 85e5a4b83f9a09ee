"""
模型基类

定义可训练模型的能力集合，支持：
- Regressifier / Classifier 两类模型
- 可选的输入最小-最大缩放
- 训练 / 预测状态检查
- 模型保存和加载（JSON，按 model_type 通过注册表还原）
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import numpy as np

from ..config import GRT_DEFAULT_NULL_CLASS_LABEL, logger
from ..data import ClassificationData, MinMaxScaler, RegressionData
from ..errors import DimensionMismatchError, GRTError, GRTIOError, PredictError, StateError, TrainError
from ..utils import load_dict, save_dict

MODEL_FILE_FORMAT = "GRT_MODEL_FILE_V1.0"


class BaseModel(ABC):
    """
    模型基类（任务无关）

    所有模型都应该继承此类，实现：
    - _fit(): 在（可能已缩放的）输入上拟合参数
    - _predict(): 对单个（可能已缩放的）输入向量预测，并更新预测状态
    - _get_parameters() / _set_parameters(): 学习到的参数的序列化

    生命周期：构造（未训练） -> train() -> 已训练，之后才接受 predict()。
    """

    # 由 register_model 装饰器设置
    model_type: str = ""

    # 训练数据集类型
    dataset_type: type = object

    def __init__(self, use_scaling: bool = False, training_log: bool = False, **kwargs):
        """
        初始化模型。

        Args:
            use_scaling: 训练前是否把输入缩放到 [0, 1]
            training_log: 是否以 INFO 级别输出训练日志
            **kwargs: 模型特定参数
        """
        self.config = {"use_scaling": use_scaling, "training_log": training_log, **kwargs}
        self.use_scaling = use_scaling
        self.training_log = training_log
        self.scaler = MinMaxScaler()
        self.trained = False
        self.num_input_dimensions = 0

    # ------------------------------------------------------------------
    # 子类需要实现的部分
    # ------------------------------------------------------------------

    @abstractmethod
    def _targets(self, dataset) -> np.ndarray:
        """从数据集取出训练目标。"""

    @abstractmethod
    def _fit(self, inputs: np.ndarray, targets: np.ndarray) -> None:
        """拟合参数。"""

    @abstractmethod
    def _predict(self, x: np.ndarray):
        """预测单个样本。"""

    @abstractmethod
    def _get_parameters(self) -> dict[str, Any]:
        """返回可 JSON 序列化的学习参数。"""

    @abstractmethod
    def _set_parameters(self, parameters: dict[str, Any]) -> None:
        """从 _get_parameters 的输出恢复参数。"""

    def _reset_prediction(self) -> None:
        """清空最近一次预测的状态。"""

    # ------------------------------------------------------------------
    # 状态
    # ------------------------------------------------------------------

    @property
    def is_trained(self) -> bool:
        return self.trained

    def enable_scaling(self, use_scaling: bool = True) -> None:
        self.use_scaling = use_scaling
        self.config["use_scaling"] = use_scaling

    def enable_training_logging(self, training_log: bool = True) -> None:
        self.training_log = training_log
        self.config["training_log"] = training_log

    def _log_training(self, msg: str) -> None:
        if self.training_log:
            logger.info(f"[{self.__class__.__name__}] {msg}")
        else:
            logger.debug(f"[{self.__class__.__name__}] {msg}")

    def clear(self) -> None:
        """回到未训练状态（保留配置）。"""
        self.trained = False
        self.num_input_dimensions = 0
        self.scaler = MinMaxScaler()
        self._reset_prediction()

    def get_config(self) -> dict[str, Any]:
        """构造参数（用于重建模型）。"""
        return dict(self.config)

    # ------------------------------------------------------------------
    # 训练 / 预测
    # ------------------------------------------------------------------

    def train(self, dataset) -> None:
        """
        训练模型。

        Args:
            dataset: 与模型匹配的数据集（RegressionData 或 ClassificationData）

        Raises:
            TypeError: 数据集类型不匹配
            TrainError: 数据集为空或拟合失败
        """
        if not isinstance(dataset, self.dataset_type):
            raise TypeError(f"{self.__class__.__name__} expects {self.dataset_type.__name__}, got {type(dataset).__name__}")
        if dataset.num_samples == 0:
            raise TrainError(f"{self.__class__.__name__}: cannot train on an empty dataset")

        self.clear()
        inputs = np.array(dataset.inputs, dtype=float)
        targets = np.array(self._targets(dataset))
        if self.use_scaling:
            inputs = self.scaler.fit_transform(inputs)

        self._log_training(f"Training on {dataset.num_samples} samples with {dataset.num_input_dimensions} input dimensions")
        try:
            self._fit(inputs, targets)
        except GRTError:
            self.clear()
            raise
        except (ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
            self.clear()
            raise TrainError(f"{self.__class__.__name__}: training failed: {e}") from e

        self.num_input_dimensions = dataset.num_input_dimensions
        self.trained = True
        self._log_training("Training complete")

    def _prepare_input(self, input_vector) -> np.ndarray:
        if not self.trained:
            raise StateError(f"{self.__class__.__name__}: the model has not been trained")
        x = np.asarray(input_vector, dtype=float).reshape(-1)
        if x.size != self.num_input_dimensions:
            raise DimensionMismatchError("input", self.num_input_dimensions, int(x.size))
        if not np.all(np.isfinite(x)):
            raise PredictError(f"{self.__class__.__name__}: input vector contains non-finite values")
        if self.use_scaling:
            x = self.scaler.transform(x.reshape(1, -1))[0]
        return x

    def predict(self, input_vector):
        """
        预测单个输入向量。

        Raises:
            StateError: 模型未训练
            DimensionMismatchError: 输入维度与训练数据不一致
            PredictError: 输入包含 NaN/Inf
        """
        x = self._prepare_input(input_vector)
        return self._predict(x)

    # ------------------------------------------------------------------
    # 保存 / 加载
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """序列化为字典（未训练的模型只包含配置）。"""
        return {
            "model_type": self.model_type,
            "config": self.get_config(),
            "trained": self.trained,
            "num_input_dimensions": self.num_input_dimensions,
            "scaler": self.scaler.to_dict(),
            "parameters": self._get_parameters() if self.trained else None,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> BaseModel:
        """从 to_dict 的输出重建模型。"""
        from .registry import get_model_class

        model_type = d.get("model_type")
        model_class = get_model_class(model_type) if model_type else None
        if model_class is None:
            raise GRTIOError(f"Unknown model type in model data: {model_type!r}")
        if not issubclass(model_class, cls):
            raise GRTIOError(f"Model data holds a {model_class.__name__}, which is not a {cls.__name__}")
        try:
            return model_class._from_dict(d)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise GRTIOError(f"Corrupt model data for {model_class.__name__}: {e!r}") from e

    @classmethod
    def _from_dict(cls, d: dict[str, Any]) -> BaseModel:
        model = cls(**d.get("config", {}))
        model._restore_state(d)
        return model

    def _restore_state(self, d: dict[str, Any]) -> None:
        self.scaler = MinMaxScaler.from_dict(d.get("scaler") or {})
        if d.get("trained"):
            self._set_parameters(d["parameters"])
            self.num_input_dimensions = int(d["num_input_dimensions"])
            self.trained = True

    def save(self, path: str | Path) -> None:
        """
        保存已训练的模型到 JSON 文件。

        Raises:
            StateError: 模型未训练
            GRTIOError: 写文件失败
        """
        if not self.trained:
            raise StateError(f"{self.__class__.__name__}: cannot save a model that has not been trained")
        try:
            save_dict({"format": MODEL_FILE_FORMAT, **self.to_dict()}, str(path))
        except OSError as e:
            raise GRTIOError(f"Failed to save model to {path}: {e}") from e
        logger.info(f"Model saved to {path}")

    @classmethod
    def load(cls, path: str | Path) -> BaseModel:
        """
        从文件加载模型。可在基类上调用，按文件中的 model_type 还原具体模型。

        Raises:
            GRTIOError: 文件不存在、格式错误或模型类型不匹配
        """
        path = Path(path)
        if not path.exists():
            raise GRTIOError(f"Model file not found: {path}")
        try:
            d = load_dict(str(path))
        except (OSError, ValueError) as e:
            raise GRTIOError(f"Failed to read model file {path}: {e}") from e
        if not isinstance(d, dict) or d.get("format") != MODEL_FILE_FORMAT:
            raise GRTIOError(f"{path} is not a {MODEL_FILE_FORMAT} file")
        model = cls.from_dict(d)
        logger.info(f"Model loaded from {path}")
        return model

    # GRT 风格的别名
    def save_model_to_file(self, path: str | Path) -> None:
        self.save(path)

    @classmethod
    def load_model_from_file(cls, path: str | Path) -> BaseModel:
        return cls.load(path)

    def get_model_info(self) -> dict[str, Any]:
        """
        获取模型信息（用于日志和调试）。
        """
        return {
            "model_type": self.model_type or self.__class__.__name__,
            "trained": self.trained,
            "num_input_dimensions": self.num_input_dimensions,
            "config": self.get_config(),
        }


class Regressifier(BaseModel):
    """
    回归模型基类

    predict() 返回输出向量，并保存在 regression_data 中。
    """

    dataset_type = RegressionData

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.num_output_dimensions = 0
        self.regression_data: np.ndarray | None = None

    def _targets(self, dataset: RegressionData) -> np.ndarray:
        return dataset.targets

    def _reset_prediction(self) -> None:
        self.regression_data = None

    def clear(self) -> None:
        super().clear()
        self.num_output_dimensions = 0

    def predict(self, input_vector) -> np.ndarray:
        output = super().predict(input_vector)
        if not np.all(np.isfinite(output)):
            raise PredictError(f"{self.__class__.__name__}: prediction produced non-finite values")
        self.regression_data = output
        return output.copy()

    def get_regression_data(self) -> np.ndarray:
        if self.regression_data is None:
            raise StateError(f"{self.__class__.__name__}: no prediction has been made yet")
        return self.regression_data.copy()

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["num_output_dimensions"] = self.num_output_dimensions
        return d

    def _restore_state(self, d: dict[str, Any]) -> None:
        super()._restore_state(d)
        if self.trained:
            self.num_output_dimensions = int(d.get("num_output_dimensions", 0))

    def get_model_info(self) -> dict[str, Any]:
        info = super().get_model_info()
        info["num_output_dimensions"] = self.num_output_dimensions
        return info


class Classifier(BaseModel):
    """
    分类模型基类

    predict() 返回预测的类标签；同时更新 class_likelihoods、class_distances、max_likelihood。
    开启 null rejection 时，置信度不足的样本被判为空类（标签 0）。
    """

    dataset_type = ClassificationData

    def __init__(self, use_null_rejection: bool = False, null_rejection_coeff: float = 10.0, **kwargs):
        super().__init__(use_null_rejection=use_null_rejection, null_rejection_coeff=null_rejection_coeff, **kwargs)
        self.use_null_rejection = use_null_rejection
        self.null_rejection_coeff = null_rejection_coeff
        self.class_labels: list[int] = []
        self._reset_prediction()

    def _targets(self, dataset: ClassificationData) -> np.ndarray:
        return dataset.labels

    def _reset_prediction(self) -> None:
        self.predicted_class_label: int | None = None
        self.class_likelihoods: np.ndarray | None = None
        self.class_distances: np.ndarray | None = None
        self.max_likelihood: float | None = None

    def clear(self) -> None:
        super().clear()
        self.class_labels = []

    @property
    def num_classes(self) -> int:
        return len(self.class_labels)

    def enable_null_rejection(self, use_null_rejection: bool = True) -> None:
        self.use_null_rejection = use_null_rejection
        self.config["use_null_rejection"] = use_null_rejection

    def set_null_rejection_coeff(self, null_rejection_coeff: float) -> None:
        """修改 null rejection 系数；已训练的模型会重新计算拒绝阈值。"""
        if null_rejection_coeff < 0:
            raise ValueError("null_rejection_coeff must be non-negative")
        self.null_rejection_coeff = null_rejection_coeff
        self.config["null_rejection_coeff"] = null_rejection_coeff
        if self.trained:
            self.recompute_null_rejection_thresholds()

    def recompute_null_rejection_thresholds(self) -> None:
        """按当前系数重新计算拒绝阈值（不支持 null rejection 的模型无需实现）。"""

    def predict(self, input_vector) -> int:
        label = super().predict(input_vector)
        self.predicted_class_label = int(label)
        return self.predicted_class_label

    def _require_prediction(self, value):
        if value is None:
            raise StateError(f"{self.__class__.__name__}: no prediction has been made yet")
        return value

    def get_predicted_class_label(self) -> int:
        return self._require_prediction(self.predicted_class_label)

    def get_class_likelihoods(self) -> np.ndarray:
        return self._require_prediction(self.class_likelihoods).copy()

    def get_class_distances(self) -> np.ndarray:
        return self._require_prediction(self.class_distances).copy()

    def get_maximum_likelihood(self) -> float:
        return self._require_prediction(self.max_likelihood)

    @staticmethod
    def is_null_label(label: int) -> bool:
        return label == GRT_DEFAULT_NULL_CLASS_LABEL

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["class_labels"] = list(self.class_labels)
        return d

    def _restore_state(self, d: dict[str, Any]) -> None:
        super()._restore_state(d)
        if self.trained:
            self.class_labels = [int(c) for c in d.get("class_labels", [])]

    def get_model_info(self) -> dict[str, Any]:
        info = super().get_model_info()
        info["class_labels"] = list(self.class_labels)
        return info
