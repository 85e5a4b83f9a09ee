"""
minigrt CLI

使用 Typer 实现命令行接口。
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import logger
from .errors import GRTError
from .tasks import anbc_example_task, regression_example_task, train_task

# 初始化 Typer CLI app
app = typer.Typer(help="minigrt: 手势识别 / 回归 / 分类工具集")


@app.command("regression-example")
def regression_example(
    work_dir: Annotated[str, typer.Option("--work-dir", help="数据文件所在目录")] = ".",
) -> None:
    """运行多维回归示例。

    示例:
        minigrt regression-example --work-dir data/
    """
    logger.info("=" * 80)
    logger.info("minigrt Multidimensional Regression Example")
    logger.info("=" * 80)

    exit_code = regression_example_task(work_dir)
    if exit_code != 0:
        raise typer.Exit(exit_code)


@app.command("anbc-example")
def anbc_example(
    work_dir: Annotated[str, typer.Option("--work-dir", help="数据文件所在目录")] = ".",
    seed: Annotated[Optional[int], typer.Option("--seed", help="训练 / 测试划分的随机种子")] = None,
) -> None:
    """运行 ANBC 分类示例。

    示例:
        minigrt anbc-example --work-dir data/ --seed 42
    """
    logger.info("=" * 80)
    logger.info("minigrt ANBC Example")
    logger.info("=" * 80)

    exit_code = anbc_example_task(work_dir, seed=seed)
    if exit_code != 0:
        raise typer.Exit(exit_code)


@app.command()
def train(
    pipeline_config: Annotated[str, typer.Option("-c", "--config", help="Pipeline 配置文件路径")],
    train_data: Annotated[Optional[str], typer.Option("--train-data", help="训练数据文件（覆盖配置）")] = None,
    test_data: Annotated[Optional[str], typer.Option("--test-data", help="测试数据文件（覆盖配置）")] = None,
    output_dir: Annotated[Optional[str], typer.Option("-o", "--output-dir", help="输出目录")] = None,
) -> None:
    """由 pipeline.yaml 训练并测试模型。

    示例:
        minigrt train -c configs/pipeline.yaml --train-data train.txt --test-data test.txt -o outputs/
    """
    logger.info("=" * 80)
    logger.info("minigrt Train Command")
    logger.info("=" * 80)

    # 验证配置文件存在
    if not Path(pipeline_config).exists():
        logger.error(f"Pipeline config file not found: {pipeline_config}")
        raise typer.Exit(1)

    try:
        train_task(
            pipeline_config_path=pipeline_config,
            train_data_path=train_data,
            test_data_path=test_data,
            output_dir=output_dir,
        )
    except (GRTError, ValueError) as e:
        logger.error(f"Training failed: {e}")
        raise typer.Exit(1)


def main():
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()
