"""
GestureRecognitionPipeline

包装一个可训练模型，转发 train / predict / test，并保存测试指标。
保存 / 加载时把 PipelineState 和模型自身的序列化写入同一个 JSON 文件。
"""

from __future__ import annotations

import copy
import time
from pathlib import Path
from typing import Any

import numpy as np

from ..config import logger
from ..engine import Evaluator
from ..errors import GRTIOError, StateError
from ..models import BaseModel, Classifier, Regressifier
from ..utils import load_dict, save_dict
from .state import PIPELINE_FILE_FORMAT, PipelineStage, PipelineState


class GestureRecognitionPipeline:
    """
    Pipeline

    示例：
        pipeline = GestureRecognitionPipeline()
        pipeline.set_regressifier(MultidimensionalRegression(LinearRegression(), use_scaling=True))
        pipeline.train(training_data)
        pipeline.test(test_data)
        pipeline.get_test_rms_error()
    """

    def __init__(self, model: BaseModel | None = None):
        self.model: BaseModel | None = None
        self.metrics: dict[str, Any] = {}
        self.training_time = 0.0
        self.test_time = 0.0
        if model is not None:
            self.set_model(model)

    # ------------------------------------------------------------------
    # 配置
    # ------------------------------------------------------------------

    def set_model(self, model: BaseModel) -> None:
        """按模型类型挂载回归或分类模型。"""
        if isinstance(model, Regressifier):
            self.set_regressifier(model)
        elif isinstance(model, Classifier):
            self.set_classifier(model)
        else:
            raise TypeError(f"Cannot attach a {type(model).__name__} to a pipeline")

    def set_regressifier(self, regressifier: Regressifier) -> None:
        """挂载回归模型（深拷贝，替换已有模型）。"""
        if not isinstance(regressifier, Regressifier):
            raise TypeError(f"Expected a Regressifier, got {type(regressifier).__name__}")
        self._attach(regressifier)

    def set_classifier(self, classifier: Classifier) -> None:
        """挂载分类模型（深拷贝，替换已有模型）。"""
        if not isinstance(classifier, Classifier):
            raise TypeError(f"Expected a Classifier, got {type(classifier).__name__}")
        self._attach(classifier)

    def _attach(self, model: BaseModel) -> None:
        self.model = copy.deepcopy(model)
        self._reset_results()
        logger.debug(f"Attached {self.model.__class__.__name__} to pipeline")

    def _reset_results(self) -> None:
        self.metrics = {}
        self.training_time = 0.0
        self.test_time = 0.0

    def _require_model(self) -> BaseModel:
        if self.model is None:
            raise StateError("No model has been attached to the pipeline")
        return self.model

    @property
    def task_type(self) -> str | None:
        if self.model is None:
            return None
        return "regression" if isinstance(self.model, Regressifier) else "classification"

    @property
    def is_trained(self) -> bool:
        return self.model is not None and self.model.is_trained

    @property
    def stage(self) -> PipelineStage:
        if self.model is None:
            return PipelineStage.UNCONFIGURED
        return PipelineStage.TRAINED if self.model.is_trained else PipelineStage.CONFIGURED

    # ------------------------------------------------------------------
    # 训练 / 测试 / 预测
    # ------------------------------------------------------------------

    def train(self, dataset) -> None:
        """
        训练挂载的模型。

        Raises:
            StateError: 没有挂载模型
            TrainError: 模型训练失败
        """
        model = self._require_model()
        self._reset_results()

        start = time.perf_counter()
        model.train(dataset)
        self.training_time = time.perf_counter() - start
        logger.info(f"Pipeline trained {model.__class__.__name__} on {dataset.num_samples} samples in {self.training_time:.3f}s")

    def test(self, dataset) -> dict[str, Any]:
        """
        在测试集上评估，保存并返回指标。

        Raises:
            StateError: 没有挂载模型或模型未训练
            DimensionMismatchError: 测试集与模型维度不一致
            EvaluationError: 测试集为空
        """
        model = self._require_model()
        evaluator = Evaluator.for_model(model)
        self.metrics = {}
        self.test_time = 0.0

        start = time.perf_counter()
        metrics = evaluator.evaluate(model, dataset)
        self.test_time = time.perf_counter() - start
        self.metrics = metrics

        if self.task_type == "regression":
            logger.info(f"Pipeline test complete: RMS error {metrics['rms_error']:.6f} ({metrics['num_samples']} samples)")
        else:
            logger.info(f"Pipeline test complete: accuracy {metrics['accuracy']:.2f}% ({metrics['num_samples']} samples)")
        return dict(metrics)

    def predict(self, input_vector):
        """
        预测单个输入向量，输出缓存在模型中，可通过 getter 读取。

        Returns:
            回归：输出向量；分类：预测的类标签
        """
        return self._require_model().predict(input_vector)

    def cross_validate(self, dataset, k: int, seed: int | None = None) -> float:
        """
        K 折交叉验证。

        每一折在模型的新拷贝上训练和测试，不改变 pipeline 当前的模型。

        Returns:
            主要指标的平均值（回归：RMS 误差；分类：准确率百分比）
        """
        template = self._require_model()
        evaluator = Evaluator.for_model(template)
        metric = "rms_error" if self.task_type == "regression" else "accuracy"

        scores = []
        for i, (train_data, test_data) in enumerate(dataset.split_into_k_folds(k, seed=seed)):
            model = copy.deepcopy(template)
            model.clear()
            model.train(train_data)
            score = evaluator.evaluate(model, test_data)[metric]
            logger.debug(f"Fold {i + 1}/{k}: {metric} = {score:.6f}")
            scores.append(score)

        mean_score = float(np.mean(scores))
        logger.info(f"{k}-fold cross validation: mean {metric} = {mean_score:.6f}")
        return mean_score

    # ------------------------------------------------------------------
    # 测试结果
    # ------------------------------------------------------------------

    def _get_metric(self, key: str):
        if key not in self.metrics:
            raise StateError(f"No test result for '{key}'; call test() first")
        return self.metrics[key]

    def get_test_results(self) -> dict[str, Any]:
        if not self.metrics:
            raise StateError("The pipeline has not been tested")
        return copy.deepcopy(self.metrics)

    def get_test_rms_error(self) -> float:
        return self._get_metric("rms_error")

    def get_test_sse(self) -> float:
        return self._get_metric("sse")

    def get_test_accuracy(self) -> float:
        return self._get_metric("accuracy")

    def _get_class_metric(self, key: str, class_label: int | None):
        values = self._get_metric(key)
        if class_label is None:
            return list(values)
        labels = self.metrics["class_labels"]
        if class_label not in labels:
            raise KeyError(f"Class label {class_label} was not seen during training")
        return values[labels.index(class_label)]

    def get_test_precision(self, class_label: int | None = None):
        return self._get_class_metric("precision", class_label)

    def get_test_recall(self, class_label: int | None = None):
        return self._get_class_metric("recall", class_label)

    def get_test_f_measure(self, class_label: int | None = None):
        return self._get_class_metric("f_measure", class_label)

    def get_test_confusion_matrix(self) -> np.ndarray:
        return np.asarray(self._get_metric("confusion_matrix"))

    # ------------------------------------------------------------------
    # 预测结果
    # ------------------------------------------------------------------

    def _require_regressifier(self) -> Regressifier:
        model = self._require_model()
        if not isinstance(model, Regressifier):
            raise StateError("The attached model is not a regression model")
        return model

    def _require_classifier(self) -> Classifier:
        model = self._require_model()
        if not isinstance(model, Classifier):
            raise StateError("The attached model is not a classifier")
        return model

    def get_regression_data(self) -> np.ndarray:
        return self._require_regressifier().get_regression_data()

    def get_predicted_class_label(self) -> int:
        return self._require_classifier().get_predicted_class_label()

    def get_class_likelihoods(self) -> np.ndarray:
        return self._require_classifier().get_class_likelihoods()

    def get_class_distances(self) -> np.ndarray:
        return self._require_classifier().get_class_distances()

    def get_maximum_likelihood(self) -> float:
        return self._require_classifier().get_maximum_likelihood()

    # ------------------------------------------------------------------
    # 保存 / 加载
    # ------------------------------------------------------------------

    def get_state(self) -> PipelineState:
        model = self.model
        return PipelineState(
            task_type=self.task_type,
            model_type=model.model_type if model is not None else None,
            trained=self.is_trained,
            metrics=dict(self.metrics) if self.is_trained else {},
            training_time=self.training_time,
            test_time=self.test_time,
        )

    def save(self, path: str | Path) -> None:
        """
        保存 pipeline（状态 + 模型）。已挂载但未训练的模型只保存配置。

        Raises:
            StateError: 没有挂载模型
            GRTIOError: 写文件失败
        """
        model = self._require_model()
        d = self.get_state().to_dict()
        d["model"] = model.to_dict()
        try:
            save_dict(d, str(path))
        except OSError as e:
            raise GRTIOError(f"Failed to save pipeline to {path}: {e}") from e
        logger.info(f"Pipeline saved to {path}")

    @classmethod
    def load(cls, path: str | Path) -> GestureRecognitionPipeline:
        """
        从文件加载 pipeline。

        Raises:
            GRTIOError: 文件不存在、格式错误或状态与模型不一致
        """
        path = Path(path)
        if not path.exists():
            raise GRTIOError(f"Pipeline file not found: {path}")
        try:
            d = load_dict(str(path))
        except (OSError, ValueError) as e:
            raise GRTIOError(f"Failed to read pipeline file {path}: {e}") from e
        if not isinstance(d, dict) or d.get("format") != PIPELINE_FILE_FORMAT:
            raise GRTIOError(f"{path} is not a {PIPELINE_FILE_FORMAT} file")

        state = PipelineState.from_dict(d)
        if not isinstance(d.get("model"), dict):
            raise GRTIOError(f"{path} does not contain a model")
        model = BaseModel.from_dict(d["model"])
        if model.model_type != state.model_type or model.is_trained != state.trained:
            raise GRTIOError(f"Pipeline header in {path} does not match the stored model")

        pipeline = cls()
        pipeline.model = model
        pipeline.metrics = dict(state.metrics) if state.trained else {}
        pipeline.training_time = state.training_time
        pipeline.test_time = state.test_time
        logger.info(f"Pipeline loaded from {path} ({state.stage.value})")
        return pipeline

    # GRT 风格的别名
    def save_pipeline_to_file(self, path: str | Path) -> None:
        self.save(path)

    def load_pipeline_from_file(self, path: str | Path) -> None:
        """把文件中的 pipeline 加载到当前对象。"""
        loaded = type(self).load(path)
        self.model = loaded.model
        self.metrics = loaded.metrics
        self.training_time = loaded.training_time
        self.test_time = loaded.test_time

    @classmethod
    def from_config(cls, config: str | Path | dict[str, Any]) -> GestureRecognitionPipeline:
        """由 YAML 文件或字典（包含 model: {name, params}）构建 pipeline。"""
        from .orchestrator import build_model, load_pipeline_config

        if not isinstance(config, dict):
            config = load_pipeline_config(config)
        if "model" not in config:
            raise ValueError("Pipeline config must contain 'model'")
        return cls(build_model(config["model"]))

    def get_pipeline_info(self) -> dict[str, Any]:
        info = {"stage": self.stage.value, "task_type": self.task_type}
        if self.model is not None:
            info["model"] = self.model.get_model_info()
        return info
