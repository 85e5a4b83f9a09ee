"""
Tasks 子系统

包含：
- regression_example: 多维回归示例
- anbc_example: ANBC 分类示例
- train: 由 pipeline.yaml 配置的训练任务
"""
from .anbc_example import anbc_example_task
from .regression_example import regression_example_task
from .train import train_task

__all__ = ["regression_example_task", "anbc_example_task", "train_task"]
