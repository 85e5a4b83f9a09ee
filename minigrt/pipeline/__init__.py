"""
Pipeline 模块

提供：
- GestureRecognitionPipeline: 包装一个模型的 train / test / predict / save / load
- PipelineState / PipelineStage: pipeline 文件头部与生命周期阶段
- PipelineOrchestrator / build_model: 由 pipeline.yaml 构建并运行 pipeline
"""

from .pipeline import GestureRecognitionPipeline
from .state import PIPELINE_FILE_FORMAT, PipelineStage, PipelineState
from .orchestrator import PipelineOrchestrator, build_model, load_pipeline_config

__all__ = [
    "GestureRecognitionPipeline",
    "PipelineState",
    "PipelineStage",
    "PIPELINE_FILE_FORMAT",
    "PipelineOrchestrator",
    "build_model",
    "load_pipeline_config",
]
