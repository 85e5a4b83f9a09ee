"""
minigrt: 手势识别 / 回归 / 分类工具集

提供：
- data: RegressionData / ClassificationData 数据集
- models: LinearRegression / MultidimensionalRegression / ANBC
- engine: Evaluator
- pipeline: GestureRecognitionPipeline
"""

__version__ = "0.1.0"

from .data import ClassificationData, RegressionData
from .engine import Evaluator
from .errors import DimensionMismatchError, EvaluationError, GRTError, GRTIOError, PredictError, StateError, TrainError
from .models import ANBC, BaseModel, Classifier, LinearRegression, MultidimensionalRegression, Regressifier, get_model
from .pipeline import GestureRecognitionPipeline, PipelineStage

__all__ = [
    "__version__",
    "RegressionData",
    "ClassificationData",
    "BaseModel",
    "Regressifier",
    "Classifier",
    "LinearRegression",
    "MultidimensionalRegression",
    "ANBC",
    "get_model",
    "Evaluator",
    "GestureRecognitionPipeline",
    "PipelineStage",
    "GRTError",
    "GRTIOError",
    "DimensionMismatchError",
    "TrainError",
    "PredictError",
    "EvaluationError",
    "StateError",
]
