#!/usr/bin/env python
"""
ANBC 分类示例

在当前目录读取 ANBCTrainingData.txt，80% 训练 / 20% 测试，
训练开启缩放和 null rejection（系数 10）的 ANBC，保存 / 加载模型后输出测试准确率。

用法:
    python examples/anbc_example.py
"""
import sys

from minigrt.tasks import anbc_example_task


def main() -> int:
    return anbc_example_task(".")


if __name__ == "__main__":
    sys.exit(main())
