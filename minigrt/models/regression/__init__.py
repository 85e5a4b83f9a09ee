"""
回归模型

提供：
- LinearRegression: 一维输出线性回归
- MultidimensionalRegression: 把 N 个一维回归模型组合成 N 维输出
"""

# 导入模型以触发注册装饰器
from .linear_regression import LinearRegression  # noqa: F401
from .multidimensional_regression import MultidimensionalRegression  # noqa: F401

__all__ = [
    "LinearRegression",
    "MultidimensionalRegression",
]
