"""
Engine 模块

提供：
- Evaluator: 评估器
"""
from .evaluator import Evaluator

__all__ = [
    "Evaluator",
]
