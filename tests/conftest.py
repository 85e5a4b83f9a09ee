"""
pytest 配置和共享 fixtures
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

# 添加项目根目录到路径（以便 conftest 可以导入项目模块）
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.environ["PYTHONPATH"] = str(project_root) + os.pathsep + os.environ.get("PYTHONPATH", "")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from minigrt.data import ClassificationData, RegressionData  # noqa: E402


def make_regression_data(num_samples=60, num_inputs=3, num_targets=2, noise=0.0, seed=0):
    """生成线性关系的回归数据：targets = inputs @ W + b (+ 噪声)。"""
    rng = np.random.default_rng(seed)
    inputs = rng.uniform(-1.0, 1.0, size=(num_samples, num_inputs))
    weights = rng.normal(size=(num_inputs, num_targets))
    bias = rng.normal(size=num_targets)
    targets = inputs @ weights + bias + noise * rng.normal(size=(num_samples, num_targets))
    return RegressionData.from_arrays(inputs, targets, dataset_name="linear"), weights, bias


def make_classification_data(num_per_class=40, num_dims=2, seed=0):
    """生成三个相互分离的高斯类（标签 1, 2, 3）。"""
    rng = np.random.default_rng(seed)
    centers = {1: np.zeros(num_dims), 2: np.full(num_dims, 5.0), 3: np.full(num_dims, -5.0)}
    labels, inputs = [], []
    for label, center in centers.items():
        inputs.append(center + rng.normal(scale=0.5, size=(num_per_class, num_dims)))
        labels.extend([label] * num_per_class)
    return ClassificationData.from_arrays(labels, np.vstack(inputs), dataset_name="blobs")


@pytest.fixture
def temp_dir():
    """创建临时目录。"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def regression_data():
    """3 维输入、2 维目标的线性回归数据。"""
    data, _, _ = make_regression_data()
    return data


@pytest.fixture
def classification_data():
    """三个类、二维输入的分类数据。"""
    return make_classification_data()


@pytest.fixture
def single_target_data():
    """2 维输入、1 维目标的回归数据，以及生成它的权重和偏置。"""
    data, weights, bias = make_regression_data(num_samples=40, num_inputs=2, num_targets=1, seed=3)
    return data, weights[:, 0], bias[0]


@pytest.fixture
def regression_example_dir(temp_dir):
    """写好多维回归示例所需训练 / 测试数据的工作目录。"""
    data, _, _ = make_regression_data(num_samples=50, num_inputs=3, num_targets=2, noise=0.01, seed=5)
    test_data = data.partition(80, seed=5)
    data.save(temp_dir / "MultidimensionalRegressionTrainingData.txt")
    test_data.save(temp_dir / "MultidimensionalRegressionTestData.txt")
    return temp_dir


@pytest.fixture
def anbc_example_dir(temp_dir):
    """写好 ANBC 示例训练数据的工作目录。"""
    make_classification_data(num_per_class=30, num_dims=3, seed=7).save(temp_dir / "ANBCTrainingData.txt")
    return temp_dir
