"""
模型注册表

提供模型注册和发现机制。注册名同时作为模型文件中的 model_type，用于加载时还原具体模型类。
"""

from typing import Dict, Optional, Type

from .base import BaseModel


class ModelRegistry:
    """
    模型注册表（单例）

    用于注册和发现模型类。
    """

    _instance = None
    _registry: Dict[str, Type[BaseModel]] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def register(self, name: str, model_class: Type[BaseModel]):
        """
        注册模型类。

        Args:
            name: 模型名称（用于查找，也写入模型文件）
            model_class: 模型类（必须是 BaseModel 的子类）
        """
        if not issubclass(model_class, BaseModel):
            raise TypeError(f"Model class must be a subclass of BaseModel, got {model_class}")
        existing = self._registry.get(name)
        if existing is not None and existing is not model_class:
            raise ValueError(f"Model name '{name}' is already registered to {existing.__name__}")
        model_class.model_type = name
        self._registry[name] = model_class

    def get(self, name: str) -> Optional[Type[BaseModel]]:
        """
        获取模型类。

        Returns:
            模型类，如果不存在则返回 None
        """
        return self._registry.get(name)

    def list_models(self) -> list:
        """列出所有注册的模型名称。"""
        return sorted(self._registry.keys())


# 全局注册表实例
_registry = ModelRegistry()


def register_model(name: str):
    """
    装饰器：注册模型类。

    Usage:
        @register_model('linear_regression')
        class LinearRegression(Regressifier):
            ...
    """

    def decorator(model_class: Type[BaseModel]):
        _registry.register(name, model_class)
        return model_class

    return decorator


def get_model_class(model_name: str) -> Optional[Type[BaseModel]]:
    """按名称获取模型类，不存在时返回 None。"""
    return _registry.get(model_name)


def get_model(model_name: str, **kwargs) -> BaseModel:
    """
    模型工厂函数：根据名称创建模型实例。

    Args:
        model_name: 模型名称（必须在注册表中）
        **kwargs: 传递给模型构造函数的参数

    Raises:
        ValueError: 如果模型名称不存在
    """
    model_class = _registry.get(model_name)
    if model_class is None:
        available_models = ", ".join(_registry.list_models())
        raise ValueError(f"Model '{model_name}' not found in registry. " f"Available models: {available_models}")

    return model_class(**kwargs)
