"""
模型模块

提供：
- BaseModel / Regressifier / Classifier: 可训练模型的能力集合
- 模型注册和发现机制
- get_model: 模型工厂函数
"""

from .base import BaseModel, Classifier, Regressifier
from .registry import ModelRegistry, get_model, get_model_class, register_model

# 导入具体模型以触发注册
from . import classification, regression  # noqa: F401, E402
from .classification import ANBC  # noqa: E402
from .regression import LinearRegression, MultidimensionalRegression  # noqa: E402

__all__ = [
    "BaseModel",
    "Regressifier",
    "Classifier",
    "ModelRegistry",
    "get_model",
    "get_model_class",
    "register_model",
    "LinearRegression",
    "MultidimensionalRegression",
    "ANBC",
]
