"""
RegressionData 测试

测试：
1. 样本添加与维度检查
2. 文本格式 / CSV 的保存和加载
3. 格式错误的文件
4. partition / k-fold / merge
"""

import numpy as np
import pytest

from minigrt.data import RegressionData
from minigrt.errors import DimensionMismatchError, GRTIOError


def test_add_sample_sets_dimensions():
    """第一个样本决定维度，之后维度必须一致。"""
    data = RegressionData()
    data.add_sample([1.0, 2.0], [3.0])
    data.add_sample([4.0, 5.0], [6.0])

    assert data.num_samples == 2
    assert data.num_input_dimensions == 2
    assert data.num_target_dimensions == 1
    assert data[1].target_vector.tolist() == [6.0]

    with pytest.raises(DimensionMismatchError):
        data.add_sample([1.0], [3.0])
    with pytest.raises(DimensionMismatchError):
        data.add_sample([1.0, 2.0], [3.0, 4.0])
    assert data.num_samples == 2


def test_save_load_round_trip(temp_dir, regression_data):
    """保存后重新加载，样本顺序和数值完全一致。"""
    path = temp_dir / "regression.txt"
    regression_data.info_text = "linear test data"
    regression_data.save(path)

    loaded = RegressionData()
    loaded.load(path)

    assert loaded.dataset_name == "linear"
    assert loaded.info_text == "linear test data"
    assert loaded.num_input_dimensions == 3
    assert loaded.num_target_dimensions == 2
    np.testing.assert_array_equal(loaded.inputs, regression_data.inputs)
    np.testing.assert_array_equal(loaded.targets, regression_data.targets)


def test_file_format_header(temp_dir):
    """文本文件的头部格式。"""
    data = RegressionData.from_arrays([[1.0, 2.0]], [[0.5]], dataset_name="tiny")
    path = temp_dir / "tiny.txt"
    data.save(path)

    lines = path.read_text().splitlines()
    assert lines[0] == "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0"
    assert lines[1] == "DatasetName: tiny"
    assert lines[3] == "NumInputDimensions: 2"
    assert lines[4] == "NumTargetDimensions: 1"
    assert lines[5] == "TotalNumTrainingExamples: 1"
    assert lines[6] == "RegressionData:"
    assert lines[7].split("\t") == ["1.0", "2.0", "0.5"]


def test_csv_round_trip(temp_dir, regression_data):
    """CSV 需要给出输入维度。"""
    path = temp_dir / "regression.csv"
    regression_data.save(path)

    loaded = RegressionData()
    loaded.load(path, num_input_dimensions=3)
    assert loaded.num_target_dimensions == 2
    np.testing.assert_array_equal(loaded.inputs, regression_data.inputs)
    np.testing.assert_array_equal(loaded.targets, regression_data.targets)

    with pytest.raises(GRTIOError):
        RegressionData().load(path)


def test_load_missing_file(temp_dir):
    data = RegressionData()
    with pytest.raises(GRTIOError):
        data.load(temp_dir / "does_not_exist.txt")
    # GRTIOError 同时是 OSError
    with pytest.raises(OSError):
        data.load(temp_dir / "does_not_exist.txt")


@pytest.mark.parametrize(
    "content",
    [
        "NOT_A_GRT_FILE\n",
        "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0\nDatasetName: x\nInfoText: \nNumInputDimensions: 2\n"
        "NumTargetDimensions: 1\nTotalNumTrainingExamples: 2\nRegressionData:\n1\t2\t3\n1\t2\n",
        "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0\nDatasetName: x\nInfoText: \nNumInputDimensions: 2\n"
        "NumTargetDimensions: 1\nTotalNumTrainingExamples: 3\nRegressionData:\n1\t2\t3\n1\t2\t4\n",
        "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0\nDatasetName: x\nInfoText: \nNumInputDimensions: two\n"
        "NumTargetDimensions: 1\nTotalNumTrainingExamples: 1\nRegressionData:\n1\t2\t3\n",
        "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0\nDatasetName: x\nInfoText: \nNumInputDimensions: 2\n"
        "NumTargetDimensions: 1\nTotalNumTrainingExamples: 1\nRegressionData:\n1\tabc\t3\n",
    ],
    ids=["bad_header", "inconsistent_row_width", "wrong_sample_count", "bad_integer", "non_numeric"],
)
def test_load_malformed_file(temp_dir, content):
    """格式错误的文件抛出 GRTIOError，且不留下部分数据。"""
    path = temp_dir / "bad.txt"
    path.write_text(content)

    data = RegressionData.from_arrays([[0.0]], [[0.0]])
    with pytest.raises(GRTIOError):
        data.load(path)
    assert data.num_samples == 0


def test_partition_sizes_and_disjointness(regression_data):
    """partition 后两部分不相交，大小之和不变，样本集合不变。"""
    original = np.hstack([regression_data.inputs, regression_data.targets])
    n = regression_data.num_samples

    test_data = regression_data.partition(80, seed=1)

    assert regression_data.num_samples == int(n * 80 // 100)
    assert regression_data.num_samples + test_data.num_samples == n
    kept = {tuple(row) for row in np.hstack([regression_data.inputs, regression_data.targets])}
    rest = {tuple(row) for row in np.hstack([test_data.inputs, test_data.targets])}
    assert kept.isdisjoint(rest)
    assert kept | rest == {tuple(row) for row in original}


@pytest.mark.parametrize("percent", [0, 100])
def test_partition_extremes(regression_data, percent):
    n = regression_data.num_samples
    test_data = regression_data.partition(percent, seed=0)
    assert regression_data.num_samples == n * percent // 100
    assert test_data.num_samples == n - regression_data.num_samples


def test_partition_is_deterministic_with_seed(regression_data):
    other = RegressionData.from_arrays(regression_data.inputs, regression_data.targets)
    a = regression_data.partition(50, seed=7)
    b = other.partition(50, seed=7)
    np.testing.assert_array_equal(a.inputs, b.inputs)
    np.testing.assert_array_equal(regression_data.inputs, other.inputs)


def test_partition_out_of_range(regression_data):
    with pytest.raises(ValueError):
        regression_data.partition(101)
    with pytest.raises(ValueError):
        regression_data.partition(-1)


def test_split_into_k_folds(regression_data):
    """每个样本恰好出现在一个测试折中。"""
    folds = regression_data.split_into_k_folds(5, seed=0)
    assert len(folds) == 5

    test_rows = []
    for train_data, test_data in folds:
        assert train_data.num_samples + test_data.num_samples == regression_data.num_samples
        test_rows.extend(tuple(row) for row in test_data.inputs)
    assert sorted(test_rows) == sorted(tuple(row) for row in regression_data.inputs)

    with pytest.raises(ValueError):
        regression_data.split_into_k_folds(1)


def test_merge(regression_data):
    other = RegressionData.from_arrays(np.zeros((2, 3)), np.ones((2, 2)))
    n = regression_data.num_samples
    regression_data.merge(other)
    assert regression_data.num_samples == n + 2
    np.testing.assert_array_equal(regression_data.targets[-1], [1.0, 1.0])

    with pytest.raises(DimensionMismatchError):
        regression_data.merge(RegressionData.from_arrays(np.zeros((1, 3)), np.ones((1, 1))))

    empty = RegressionData()
    empty.merge(other)
    assert empty.num_target_dimensions == 2
    assert empty.num_samples == 2


def test_stats_string(regression_data):
    stats = regression_data.get_stats_as_string()
    assert "Number of Samples:\t60" in stats
    assert "Number of Target Dimensions:\t2" in stats
    assert "Input Dataset Ranges:" in stats
    assert len(regression_data.get_input_ranges()) == 3
    assert len(regression_data.get_target_ranges()) == 2


def test_load_binary_file(temp_dir):
    """无法按文本解码的文件同样抛出 GRTIOError。"""
    path = temp_dir / "binary.txt"
    path.write_bytes(b"GRT_LABELLED\xff\xfe\x00garbage\n")

    data = RegressionData.from_arrays([[0.0]], [[0.0]])
    with pytest.raises(GRTIOError):
        data.load(path)
    assert data.num_samples == 0


def test_dataset_name_from_file(temp_dir):
    """文本格式保留文件中的名称（包括空名称）；CSV 没有名称时使用文件名。"""
    path = temp_dir / "unnamed.txt"
    RegressionData.from_arrays([[1.0, 2.0]], [[0.5]], dataset_name="").save(path)
    assert RegressionData.from_file(path).dataset_name == ""

    csv_path = temp_dir / "unnamed.csv"
    RegressionData.from_arrays([[1.0, 2.0]], [[0.5]]).save(csv_path)
    assert RegressionData.from_file(csv_path, num_input_dimensions=2).dataset_name == "unnamed"
