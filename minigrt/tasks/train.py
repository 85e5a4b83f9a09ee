"""
训练任务

由 pipeline.yaml 构建 pipeline，训练、测试并保存结果。
"""

from __future__ import annotations

from typing import Any

from ..config import logger
from ..pipeline import PipelineOrchestrator


def train_task(
    pipeline_config_path: str,
    train_data_path: str | None = None,
    test_data_path: str | None = None,
    output_dir: str | None = None,
) -> dict[str, Any]:
    """
    训练任务入口
    """
    orchestrator = PipelineOrchestrator(pipeline_config_path)

    logger.info(f"Running {orchestrator.get_task_type()} pipeline from {pipeline_config_path}")
    results = orchestrator.run(train_path=train_data_path, test_path=test_data_path, output_dir=output_dir)

    test_results = results.get("test", {})
    if "rms_error" in test_results:
        logger.info(f"Test RMS error: {test_results['rms_error']}")
    if "accuracy" in test_results:
        logger.info(f"Test Accuracy: {test_results['accuracy']}%")
    return results
