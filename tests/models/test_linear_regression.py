"""
LinearRegression 与模型注册表测试
"""

import json

import numpy as np
import pytest

from minigrt.data import RegressionData
from minigrt.errors import DimensionMismatchError, GRTIOError, PredictError, StateError, TrainError
from minigrt.models import ANBC, BaseModel, LinearRegression, ModelRegistry, get_model, get_model_class


def test_registry():
    """具体模型在导入时完成注册。"""
    assert {"linear_regression", "multidimensional_regression", "anbc"} <= set(ModelRegistry().list_models())
    assert get_model_class("linear_regression") is LinearRegression
    assert isinstance(get_model("linear_regression", use_scaling=True), LinearRegression)
    assert LinearRegression.model_type == "linear_regression"

    with pytest.raises(ValueError):
        get_model("not_a_model")


@pytest.mark.parametrize("use_scaling", [False, True])
def test_fits_linear_relationship(single_target_data, use_scaling):
    data, weights, bias = single_target_data
    model = LinearRegression(use_scaling=use_scaling)
    model.train(data)

    assert model.is_trained
    assert model.num_input_dimensions == 2
    assert model.num_output_dimensions == 1

    x = np.array([0.25, -0.5])
    y = model.predict(x)
    assert y.shape == (1,)
    np.testing.assert_allclose(y[0], x @ weights + bias, atol=1e-8)
    np.testing.assert_array_equal(model.get_regression_data(), y)


def test_rejects_multiple_targets(regression_data):
    model = LinearRegression()
    with pytest.raises(TrainError):
        model.train(regression_data)
    assert not model.is_trained


def test_rejects_empty_and_wrong_dataset():
    model = LinearRegression()
    with pytest.raises(TrainError):
        model.train(RegressionData())
    with pytest.raises(TypeError):
        model.train([[1.0, 2.0]])


def test_predict_errors(single_target_data):
    data, _, _ = single_target_data
    model = LinearRegression()

    with pytest.raises(StateError):
        model.predict([0.0, 0.0])
    with pytest.raises(StateError):
        model.get_regression_data()

    model.train(data)
    with pytest.raises(DimensionMismatchError):
        model.predict([0.0, 0.0, 0.0])
    with pytest.raises(PredictError):
        model.predict([np.nan, 0.0])


def test_save_load_round_trip(temp_dir, single_target_data):
    """保存后加载的模型对相同输入给出完全相同的预测。"""
    data, _, _ = single_target_data
    model = LinearRegression(use_scaling=True)
    model.train(data)

    path = temp_dir / "linear_regression.json"
    model.save(path)

    loaded = BaseModel.load(path)
    assert isinstance(loaded, LinearRegression)
    assert loaded.use_scaling
    for x in data.inputs[:10]:
        np.testing.assert_array_equal(loaded.predict(x), model.predict(x))

    with open(path) as f:
        assert json.load(f)["format"] == "GRT_MODEL_FILE_V1.0"


def test_save_untrained_model(temp_dir):
    with pytest.raises(StateError):
        LinearRegression().save(temp_dir / "model.json")


def test_load_errors(temp_dir, single_target_data):
    data, _, _ = single_target_data
    with pytest.raises(GRTIOError):
        BaseModel.load(temp_dir / "missing.json")

    bad = temp_dir / "bad.json"
    bad.write_text('{"format": "SOMETHING_ELSE"}')
    with pytest.raises(GRTIOError):
        BaseModel.load(bad)

    not_json = temp_dir / "not_json.json"
    not_json.write_text("GRT_MODEL_FILE_V1.0\n")
    with pytest.raises(GRTIOError):
        BaseModel.load(not_json)

    # 用分类器类加载回归模型文件
    model = LinearRegression()
    model.train(data)
    path = temp_dir / "linear_regression.json"
    model.save(path)
    with pytest.raises(GRTIOError):
        ANBC.load(path)
