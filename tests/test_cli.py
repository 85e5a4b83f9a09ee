"""
CLI 测试
"""

import yaml
from typer.testing import CliRunner

from minigrt.cli import app

runner = CliRunner()


def test_regression_example_command(regression_example_dir):
    result = runner.invoke(app, ["regression-example", "--work-dir", str(regression_example_dir)])
    assert result.exit_code == 0
    assert (regression_example_dir / "MultidimensionalRegressionResultsData.txt").exists()


def test_regression_example_command_failure(temp_dir):
    result = runner.invoke(app, ["regression-example", "--work-dir", str(temp_dir)])
    assert result.exit_code == 1


def test_anbc_example_command(anbc_example_dir):
    result = runner.invoke(app, ["anbc-example", "--work-dir", str(anbc_example_dir), "--seed", "3"])
    assert result.exit_code == 0
    assert (anbc_example_dir / "ANBCModel.txt").exists()


def test_anbc_example_command_failure(temp_dir):
    result = runner.invoke(app, ["anbc-example", "--work-dir", str(temp_dir)])
    assert result.exit_code == 1


def test_train_command(regression_example_dir):
    config_path = regression_example_dir / "pipeline.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "task_type": "regression",
                "model": {
                    "name": "multidimensional_regression",
                    "params": {"use_scaling": True, "regressifier": {"name": "linear_regression"}},
                },
            }
        )
    )
    output_dir = regression_example_dir / "outputs"
    result = runner.invoke(
        app,
        [
            "train",
            "-c",
            str(config_path),
            "--train-data",
            str(regression_example_dir / "MultidimensionalRegressionTrainingData.txt"),
            "--test-data",
            str(regression_example_dir / "MultidimensionalRegressionTestData.txt"),
            "-o",
            str(output_dir),
        ],
    )
    assert result.exit_code == 0
    assert (output_dir / "pipeline.json").exists()
    assert (output_dir / "results.json").exists()


def test_train_command_missing_config(temp_dir):
    result = runner.invoke(app, ["train", "-c", str(temp_dir / "missing.yaml")])
    assert result.exit_code == 1


def test_train_command_missing_data(temp_dir):
    config_path = temp_dir / "pipeline.yaml"
    config_path.write_text(yaml.safe_dump({"model": {"name": "anbc"}}))
    result = runner.invoke(app, ["train", "-c", str(config_path), "--train-data", str(temp_dir / "missing.txt")])
    assert result.exit_code == 1
