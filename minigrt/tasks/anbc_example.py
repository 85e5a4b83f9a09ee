"""
ANBC 分类示例任务

读取 ANBCTrainingData.txt，划分 80% 训练 / 20% 测试，训练开启缩放和 null rejection 的 ANBC，
保存并重新加载模型后逐个样本预测，输出测试准确率。
"""

from __future__ import annotations

from pathlib import Path

from ..config import logger
from ..data import ClassificationData
from ..errors import GRTError
from ..models import ANBC

TRAINING_DATA_FILE = "ANBCTrainingData.txt"
MODEL_FILE = "ANBCModel.txt"
NULL_REJECTION_COEFF = 10.0
TRAINING_PERCENT = 80


def anbc_example_task(work_dir: str | Path = ".", seed: int | None = None) -> int:
    """
    运行 ANBC 示例。

    Args:
        work_dir: 数据文件所在目录，模型也保存在这里
        seed: 训练 / 测试划分的随机种子

    Returns:
        进程退出码：0 成功，1 在第一个失败的步骤退出
    """
    work_dir = Path(work_dir)

    anbc = ANBC()
    anbc.set_null_rejection_coeff(NULL_REJECTION_COEFF)
    anbc.enable_scaling(True)
    anbc.enable_null_rejection(True)

    training_data = ClassificationData()
    try:
        training_data.load(work_dir / TRAINING_DATA_FILE)
    except (GRTError, OSError) as e:
        logger.error(f"ERROR: Failed to load training data! {e}")
        return 1

    test_data = training_data.partition(TRAINING_PERCENT, seed=seed)

    try:
        anbc.train(training_data)
    except GRTError as e:
        logger.error(f"ERROR: Failed to train classifier! {e}")
        return 1

    try:
        anbc.save(work_dir / MODEL_FILE)
    except GRTError as e:
        logger.error(f"ERROR: Failed to save the classifier model! {e}")
        return 1
    try:
        anbc = ANBC.load(work_dir / MODEL_FILE)
    except GRTError as e:
        logger.error(f"ERROR: Failed to load the classifier model! {e}")
        return 1

    if test_data.num_samples == 0:
        logger.error("ERROR: The test partition is empty!")
        return 1

    num_correct = 0
    for i, sample in enumerate(test_data):
        try:
            predicted_class_label = anbc.predict(sample.input_vector)
        except GRTError as e:
            logger.error(f"ERROR: Failed to perform prediction for test sample: {i} {e}")
            return 1
        if sample.class_label == predicted_class_label:
            num_correct += 1
        logger.info(f"TestSample: {i} ClassLabel: {sample.class_label} PredictedClassLabel: {predicted_class_label}")

    accuracy = 100.0 * num_correct / test_data.num_samples
    logger.info(f"Test Accuracy: {accuracy}%")
    return 0
