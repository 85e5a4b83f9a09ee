#!/usr/bin/env python
"""
多维回归示例

在当前目录读取 MultidimensionalRegressionTrainingData.txt / MultidimensionalRegressionTestData.txt，
训练 MultidimensionalRegression(LinearRegression)，保存 / 加载 pipeline 后测试，
并把逐样本结果写入 MultidimensionalRegressionResultsData.txt。

用法:
    python examples/multidimensional_regression_example.py
"""
import sys

from minigrt.tasks import regression_example_task


def main() -> int:
    return regression_example_task(".")


if __name__ == "__main__":
    sys.exit(main())
