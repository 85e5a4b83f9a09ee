"""
Pipeline Orchestrator

从 pipeline.yaml 构建并运行 pipeline：
- 加载配置（data / model / train）
- 构建数据集（训练集 + 测试集或按比例划分）
- 构建模型并挂载到 GestureRecognitionPipeline

pipeline.yaml 示例：

    task_type: regression
    data:
      train_path: train.txt
      test_path: test.txt        # 可选；省略时按 partition 从训练集划分
      partition: 80
      seed: 42
    model:
      name: multidimensional_regression
      params:
        use_scaling: true
        regressifier:
          name: linear_regression
    train:
      training_log: true
      cross_validation_folds: 0
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..config import logger
from ..data import ClassificationData, RegressionData
from ..models import BaseModel, Regressifier, get_model, get_model_class
from ..utils import save_dict, set_seeds
from .pipeline import GestureRecognitionPipeline


def load_pipeline_config(path: str | Path) -> dict[str, Any]:
    """加载 pipeline.yaml 配置。"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pipeline config not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Pipeline config {path} must be a mapping")
    logger.info(f"Loaded pipeline config from {path}")
    return config


def build_model(model_config: dict[str, Any]) -> BaseModel:
    """
    由 {name, params} 配置构建模型。

    组合模型的子模型同样写成 {name, params}，例如：
        {"name": "multidimensional_regression",
         "params": {"regressifier": {"name": "linear_regression"}}}
    """
    if not model_config:
        raise ValueError("model config must be specified in pipeline.yaml")
    model_name = model_config.get("name")
    if not model_name:
        raise ValueError("model.name must be specified in pipeline.yaml")

    model_kwargs = dict(model_config.get("params") or {})
    model = get_model(model_name, **model_kwargs)
    logger.info(f"Model '{model_name}' created with params: {model_kwargs}")
    return model


class PipelineOrchestrator:
    """
    Pipeline 编排器

    典型使用流程：
    1. setup_data(): 加载训练 / 测试数据
    2. setup_pipeline(): 创建模型并挂载到 pipeline
    3. run(): 训练、（可选）交叉验证、测试并保存结果
    """

    def __init__(self, pipeline_config: str | Path | dict[str, Any]):
        """
        Args:
            pipeline_config: pipeline.yaml 路径或已解析的配置字典
        """
        if isinstance(pipeline_config, dict):
            self.pipeline_config_path = None
            self.config = pipeline_config
        else:
            self.pipeline_config_path = Path(pipeline_config)
            self.config = load_pipeline_config(self.pipeline_config_path)
        self.pipeline: GestureRecognitionPipeline | None = None

    def get_task_type(self) -> str:
        """任务类型：显式配置优先，否则由模型类型推断。"""
        task_type = self.config.get("task_type")
        if task_type is None:
            model_class = get_model_class(self.get_model_config().get("name", ""))
            if model_class is None:
                raise ValueError("task_type is not set and cannot be inferred from model.name")
            task_type = "regression" if issubclass(model_class, Regressifier) else "classification"
        if task_type not in ("classification", "regression"):
            raise ValueError(f"task_type must be 'classification' or 'regression', got {task_type}")
        return task_type

    def get_data_config(self) -> dict[str, Any]:
        return dict(self.config.get("data") or {})

    def get_model_config(self) -> dict[str, Any]:
        return dict(self.config.get("model") or {})

    def get_train_config(self) -> dict[str, Any]:
        return dict(self.config.get("train") or {})

    def _load_dataset(self, path: str | Path):
        data_config = self.get_data_config()
        if self.get_task_type() == "regression":
            dataset = RegressionData()
            kwargs = {}
            if "num_input_dimensions" in data_config:
                kwargs["num_input_dimensions"] = int(data_config["num_input_dimensions"])
            dataset.load(path, **kwargs)
        else:
            dataset = ClassificationData()
            dataset.load(path)
        return dataset

    def setup_data(self, train_path: str | None = None, test_path: str | None = None):
        """
        加载数据。命令行给出的路径覆盖配置中的路径。

        Returns:
            (训练集, 测试集) 元组；没有测试文件且 partition 未配置时测试集为 None
        """
        data_config = self.get_data_config()
        train_path = train_path or data_config.get("train_path")
        test_path = test_path or data_config.get("test_path")
        if not train_path:
            raise ValueError("data.train_path must be specified in pipeline.yaml or on the command line")

        train_data = self._load_dataset(train_path)
        logger.info(f"Loaded {train_data.num_samples} training samples from {train_path}")

        test_data = None
        if test_path:
            test_data = self._load_dataset(test_path)
            logger.info(f"Loaded {test_data.num_samples} test samples from {test_path}")
        elif "partition" in data_config:
            test_data = train_data.partition(
                float(data_config["partition"]),
                use_stratified_sampling=bool(data_config.get("stratified", False)),
                seed=data_config.get("seed"),
            )
            logger.info(f"Partitioned training data: {train_data.num_samples} train / {test_data.num_samples} test")
        return train_data, test_data

    def setup_pipeline(self) -> GestureRecognitionPipeline:
        model = build_model(self.get_model_config())
        train_config = self.get_train_config()
        if "training_log" in train_config:
            model.enable_training_logging(bool(train_config["training_log"]))
        self.pipeline = GestureRecognitionPipeline(model)
        if self.pipeline.task_type != self.get_task_type():
            raise ValueError(f"Model '{model.model_type}' cannot be used for a {self.get_task_type()} task")
        return self.pipeline

    def run(
        self,
        train_path: str | None = None,
        test_path: str | None = None,
        output_dir: str | Path | None = None,
    ) -> dict[str, Any]:
        """
        训练并测试，返回结果摘要。output_dir 不为空时保存 pipeline.json 和 results.json。
        """
        seed = self.get_data_config().get("seed")
        if seed is not None:
            set_seeds(int(seed))

        train_data, test_data = self.setup_data(train_path, test_path)
        pipeline = self.setup_pipeline()
        train_config = self.get_train_config()
        logger.info(f"Pipeline: {pipeline.get_pipeline_info()}")

        results: dict[str, Any] = {"task_type": pipeline.task_type, "model_type": pipeline.model.model_type}

        folds = int(train_config.get("cross_validation_folds", 0) or 0)
        if folds > 1:
            results["cross_validation_folds"] = folds
            results["cross_validation_score"] = pipeline.cross_validate(train_data, folds, seed=seed)

        pipeline.train(train_data)
        results["training_time"] = pipeline.training_time

        if test_data is not None and test_data.num_samples > 0:
            pipeline.test(test_data)
            results["test"] = pipeline.get_test_results()
            results["test_time"] = pipeline.test_time
        else:
            logger.warning("No test data available; skipping test")

        if output_dir is not None:
            output_path = Path(output_dir)
            output_path.mkdir(parents=True, exist_ok=True)
            pipeline.save(output_path / "pipeline.json")
            save_dict(results, str(output_path / "results.json"))
            logger.info(f"Results saved to {output_path}")

        return results
