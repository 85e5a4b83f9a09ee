"""
分类模型

提供：
- ANBC: 自适应朴素贝叶斯分类器（支持 null rejection）
"""

# 导入模型以触发注册装饰器
from .anbc import ANBC  # noqa: F401

__all__ = [
    "ANBC",
]
