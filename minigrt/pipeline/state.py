"""
Pipeline State

Pipeline 文件的头部信息：格式标识、任务类型、模型类型、训练状态和最近一次测试的指标。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from ..config import logger
from ..errors import GRTIOError

PIPELINE_FILE_FORMAT = "GRT_PIPELINE_FILE_V1.0"


class PipelineStage(str, Enum):
    """Pipeline 生命周期阶段。predict / test 是 TRAINED 阶段内的瞬时操作。"""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    TRAINED = "trained"


@dataclass
class PipelineState:
    """
    Pipeline 状态

    与模型自身的序列化一起写入同一个 JSON 文件，用于：
    - 加载时校验文件格式与模型类型
    - 恢复测试指标和计时
    """

    task_type: str | None = None
    model_type: str | None = None
    trained: bool = False
    metrics: dict[str, Any] = field(default_factory=dict)
    training_time: float = 0.0
    test_time: float = 0.0
    format: str = PIPELINE_FILE_FORMAT

    def validate(self) -> tuple[bool, list[str]]:
        """
        验证状态一致性。

        Returns:
            tuple[bool, list[str]]: (是否有效, 错误列表)
        """
        errors = []

        if self.format != PIPELINE_FILE_FORMAT:
            errors.append(f"format must be {PIPELINE_FILE_FORMAT}, got {self.format}")

        valid_task_types = ["classification", "regression", None]
        if self.task_type not in valid_task_types:
            errors.append(f"task_type must be one of {valid_task_types}, got {self.task_type}")

        if self.model_type is None:
            if self.task_type is not None or self.trained:
                errors.append("a pipeline without a model cannot have a task_type or be trained")
        if self.metrics and not self.trained:
            logger.warning("Pipeline state has test metrics but is not trained; metrics will be ignored")

        is_valid = len(errors) == 0
        return is_valid, errors

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PipelineState:
        """
        从字典创建状态（忽略未知字段）。

        Raises:
            GRTIOError: 字段类型错误或状态不一致
        """
        known = {k: d[k] for k in cls.__dataclass_fields__ if k in d}
        try:
            state = cls(**known)
        except TypeError as e:
            raise GRTIOError(f"Invalid pipeline state: {e}") from e
        if not isinstance(state.metrics, dict):
            raise GRTIOError("Invalid pipeline state: metrics must be a mapping")

        is_valid, errors = state.validate()
        if not is_valid:
            raise GRTIOError("Invalid pipeline state: " + "; ".join(errors))
        return state

    @property
    def stage(self) -> PipelineStage:
        if self.model_type is None:
            return PipelineStage.UNCONFIGURED
        return PipelineStage.TRAINED if self.trained else PipelineStage.CONFIGURED
