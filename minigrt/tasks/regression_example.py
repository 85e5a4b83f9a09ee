"""
多维回归示例任务

在工作目录中读取固定文件名的训练 / 测试数据，用 MultidimensionalRegression(LinearRegression)
训练 pipeline，保存并重新加载后在测试集上评估，最后写出逐样本的预测结果。
"""

from __future__ import annotations

from pathlib import Path

from ..config import logger
from ..data import RegressionData
from ..errors import GRTError
from ..models import LinearRegression, MultidimensionalRegression
from ..pipeline import GestureRecognitionPipeline

TRAINING_DATA_FILE = "MultidimensionalRegressionTrainingData.txt"
TEST_DATA_FILE = "MultidimensionalRegressionTestData.txt"
PIPELINE_FILE = "Pipeline"
RESULTS_FILE = "MultidimensionalRegressionResultsData.txt"


def write_results(path: Path, outputs, targets) -> None:
    """每个测试样本一行：预测值后接目标值，每个值后跟一个制表符。"""
    with open(path, "w") as fp:
        for output_vector, target_vector in zip(outputs, targets):
            fp.write("".join(f"{v}\t" for v in output_vector))
            fp.write("".join(f"{v}\t" for v in target_vector))
            fp.write("\n")


def regression_example_task(work_dir: str | Path = ".") -> int:
    """
    运行多维回归示例。

    Args:
        work_dir: 数据文件所在目录，结果也写在这里

    Returns:
        进程退出码：0 成功，1 在第一个失败的步骤退出
    """
    work_dir = Path(work_dir)

    training_data = RegressionData()
    test_data = RegressionData()
    try:
        training_data.load(work_dir / TRAINING_DATA_FILE)
    except (GRTError, OSError) as e:
        logger.error(f"ERROR: Failed to load training data! {e}")
        return 1
    try:
        test_data.load(work_dir / TEST_DATA_FILE)
    except (GRTError, OSError) as e:
        logger.error(f"ERROR: Failed to load test data! {e}")
        return 1

    if training_data.num_input_dimensions != test_data.num_input_dimensions:
        logger.error(
            f"ERROR: The number of input dimensions in the training data ({training_data.num_input_dimensions})"
            f" does not match the number of input dimensions in the test data ({test_data.num_input_dimensions})"
        )
        return 1
    if training_data.num_target_dimensions != test_data.num_target_dimensions:
        logger.error(
            f"ERROR: The number of target dimensions in the training data ({training_data.num_target_dimensions})"
            f" does not match the number of target dimensions in the test data ({test_data.num_target_dimensions})"
        )
        return 1

    logger.info("Training and Test datasets loaded")
    logger.info("Training data stats:")
    training_data.print_stats()
    logger.info("Test data stats:")
    test_data.print_stats()

    pipeline = GestureRecognitionPipeline()
    pipeline.set_regressifier(MultidimensionalRegression(LinearRegression(), use_scaling=True, training_log=True))

    logger.info("Training MultidimensionalRegression model...")
    try:
        pipeline.train(training_data)
    except GRTError as e:
        logger.error(f"ERROR: Failed to train MultidimensionalRegression model! {e}")
        return 1
    logger.info("Model trained.")

    try:
        pipeline.save_pipeline_to_file(work_dir / PIPELINE_FILE)
    except GRTError as e:
        logger.error(f"ERROR: Failed to save pipeline! {e}")
        return 1
    try:
        pipeline.load_pipeline_from_file(work_dir / PIPELINE_FILE)
    except GRTError as e:
        logger.error(f"ERROR: Failed to load pipeline! {e}")
        return 1

    logger.info("Testing MultidimensionalRegression model...")
    try:
        pipeline.test(test_data)
    except GRTError as e:
        logger.error(f"ERROR: Failed to test MultidimensionalRegression model! {e}")
        return 1
    logger.info(f"Test complete. Test RMS error: {pipeline.get_test_rms_error()}")

    outputs = []
    for i, sample in enumerate(test_data):
        try:
            pipeline.predict(sample.input_vector)
        except GRTError as e:
            logger.error(f"ERROR: Failed to map test sample {i} {e}")
            return 1
        outputs.append(pipeline.get_regression_data())

    try:
        write_results(work_dir / RESULTS_FILE, outputs, test_data.targets)
    except OSError as e:
        logger.error(f"ERROR: Failed to write results to {RESULTS_FILE}! {e}")
        return 1
    logger.info(f"Results written to {work_dir / RESULTS_FILE}")
    return 0
