"""
GestureRecognitionPipeline 测试

测试：
1. 生命周期阶段与状态检查
2. 回归 / 分类的 train / test / predict
3. 保存 / 加载（已训练与仅配置）
4. 交叉验证与 YAML 配置
"""

import json

import numpy as np
import pytest
import yaml

from minigrt.data import RegressionData
from minigrt.errors import DimensionMismatchError, GRTIOError, StateError
from minigrt.models import ANBC, LinearRegression, MultidimensionalRegression
from minigrt.pipeline import GestureRecognitionPipeline, PipelineOrchestrator, PipelineStage


@pytest.fixture
def regression_pipeline():
    pipeline = GestureRecognitionPipeline()
    pipeline.set_regressifier(MultidimensionalRegression(LinearRegression(), use_scaling=True))
    return pipeline


def test_stages(regression_pipeline, regression_data):
    assert GestureRecognitionPipeline().stage == PipelineStage.UNCONFIGURED
    assert regression_pipeline.stage == PipelineStage.CONFIGURED

    regression_pipeline.train(regression_data)
    assert regression_pipeline.stage == PipelineStage.TRAINED
    assert regression_pipeline.training_time >= 0.0


def test_state_errors(regression_pipeline, regression_data):
    empty = GestureRecognitionPipeline()
    with pytest.raises(StateError):
        empty.train(regression_data)
    with pytest.raises(StateError):
        empty.predict([0.0, 0.0, 0.0])
    with pytest.raises(StateError):
        empty.save("unused.json")

    with pytest.raises(StateError):
        regression_pipeline.predict([0.0, 0.0, 0.0])
    with pytest.raises(StateError):
        regression_pipeline.test(regression_data)
    with pytest.raises(StateError):
        regression_pipeline.get_test_rms_error()
    with pytest.raises(StateError):
        regression_pipeline.get_regression_data()


def test_attach_checks_model_kind():
    pipeline = GestureRecognitionPipeline()
    with pytest.raises(TypeError):
        pipeline.set_regressifier(ANBC())
    with pytest.raises(TypeError):
        pipeline.set_classifier(LinearRegression())


def test_attach_copies_model(regression_data):
    model = MultidimensionalRegression(LinearRegression())
    pipeline = GestureRecognitionPipeline(model)
    pipeline.train(regression_data)

    assert pipeline.is_trained
    assert not model.is_trained


def test_regression_test_and_predict(regression_pipeline, regression_data):
    test_data = regression_data.partition(75, seed=0)
    regression_pipeline.train(regression_data)
    metrics = regression_pipeline.test(test_data)

    assert metrics["rms_error"] == pytest.approx(0.0, abs=1e-8)
    assert regression_pipeline.get_test_rms_error() == metrics["rms_error"]
    assert regression_pipeline.get_test_sse() == pytest.approx(0.0, abs=1e-12)
    with pytest.raises(StateError):
        regression_pipeline.get_test_accuracy()

    sample = test_data[0]
    output = regression_pipeline.predict(sample.input_vector)
    np.testing.assert_allclose(output, sample.target_vector, atol=1e-8)
    np.testing.assert_array_equal(regression_pipeline.get_regression_data(), output)
    with pytest.raises(StateError):
        regression_pipeline.get_predicted_class_label()


def test_classification_test_and_predict(classification_data):
    pipeline = GestureRecognitionPipeline()
    pipeline.set_classifier(ANBC(use_scaling=True, use_null_rejection=True))
    test_data = classification_data.partition(80, use_stratified_sampling=True, seed=0)
    pipeline.train(classification_data)
    pipeline.test(test_data)

    assert pipeline.get_test_accuracy() == pytest.approx(100.0)
    assert len(pipeline.get_test_precision()) == 3
    assert pipeline.get_test_recall(2) == pytest.approx(1.0)
    assert pipeline.get_test_f_measure(3) == pytest.approx(1.0)
    assert pipeline.get_test_confusion_matrix().shape == (4, 4)

    assert pipeline.predict([5.0, 5.0]) == 2
    assert pipeline.get_predicted_class_label() == 2
    assert pipeline.get_class_likelihoods().shape == (3,)
    assert pipeline.get_class_distances().shape == (3,)
    assert 0.0 < pipeline.get_maximum_likelihood() <= 1.0


def test_save_load_trained(temp_dir, regression_pipeline, regression_data):
    """加载后的 pipeline 预测与保存前完全一致，测试指标被保留。"""
    test_data = regression_data.partition(75, seed=0)
    regression_pipeline.train(regression_data)
    regression_pipeline.test(test_data)

    path = temp_dir / "pipeline.json"
    regression_pipeline.save_pipeline_to_file(path)

    with open(path) as f:
        d = json.load(f)
    assert d["format"] == "GRT_PIPELINE_FILE_V1.0"
    assert d["model_type"] == "multidimensional_regression"
    assert d["trained"] is True

    loaded = GestureRecognitionPipeline.load(path)
    assert loaded.stage == PipelineStage.TRAINED
    assert loaded.get_test_rms_error() == regression_pipeline.get_test_rms_error()
    for x in test_data.inputs:
        np.testing.assert_array_equal(loaded.predict(x), regression_pipeline.predict(x))

    other = GestureRecognitionPipeline()
    other.load_pipeline_from_file(path)
    assert other.is_trained


def test_save_load_configured(temp_dir, regression_pipeline):
    """仅挂载了模型的 pipeline 也可以保存，加载后处于 CONFIGURED 阶段。"""
    path = temp_dir / "configured.json"
    regression_pipeline.save(path)

    loaded = GestureRecognitionPipeline.load(path)
    assert loaded.stage == PipelineStage.CONFIGURED
    assert isinstance(loaded.model, MultidimensionalRegression)
    assert loaded.model.use_scaling


def test_load_errors(temp_dir):
    with pytest.raises(GRTIOError):
        GestureRecognitionPipeline.load(temp_dir / "missing.json")

    wrong_format = temp_dir / "wrong_format.json"
    wrong_format.write_text('{"format": "GRT_MODEL_FILE_V1.0"}')
    with pytest.raises(GRTIOError):
        GestureRecognitionPipeline.load(wrong_format)

    no_model = temp_dir / "no_model.json"
    no_model.write_text('{"format": "GRT_PIPELINE_FILE_V1.0", "task_type": "regression", "model_type": "linear_regression"}')
    with pytest.raises(GRTIOError):
        GestureRecognitionPipeline.load(no_model)


def test_cross_validate(classification_data):
    pipeline = GestureRecognitionPipeline(ANBC())
    score = pipeline.cross_validate(classification_data, 4, seed=0)

    assert score == pytest.approx(100.0)
    assert pipeline.stage == PipelineStage.CONFIGURED


def test_from_config(temp_dir):
    config = {
        "model": {
            "name": "multidimensional_regression",
            "params": {"use_scaling": True, "regressifier": {"name": "linear_regression"}},
        }
    }
    pipeline = GestureRecognitionPipeline.from_config(config)
    assert isinstance(pipeline.model, MultidimensionalRegression)
    assert isinstance(pipeline.model.regressifier, LinearRegression)
    assert pipeline.task_type == "regression"

    path = temp_dir / "pipeline.yaml"
    path.write_text(yaml.safe_dump({"model": {"name": "anbc", "params": {"use_null_rejection": True}}}))
    pipeline = GestureRecognitionPipeline.from_config(path)
    assert isinstance(pipeline.model, ANBC)
    assert pipeline.model.use_null_rejection


def test_orchestrator_run(temp_dir, classification_data):
    data_path = temp_dir / "train.txt"
    classification_data.save(data_path)
    config = {
        "data": {"train_path": str(data_path), "partition": 80, "stratified": True, "seed": 1},
        "model": {"name": "anbc", "params": {"use_scaling": True}},
        "train": {"cross_validation_folds": 3},
    }

    output_dir = temp_dir / "outputs"
    results = PipelineOrchestrator(config).run(output_dir=output_dir)

    assert results["task_type"] == "classification"
    assert results["test"]["accuracy"] == pytest.approx(100.0)
    assert "cross_validation_score" in results
    assert (output_dir / "pipeline.json").exists()
    assert (output_dir / "results.json").exists()
    assert GestureRecognitionPipeline.load(output_dir / "pipeline.json").is_trained


def test_orchestrator_rejects_mismatched_task():
    orchestrator = PipelineOrchestrator({"task_type": "classification", "model": {"name": "linear_regression"}})
    with pytest.raises(ValueError):
        orchestrator.setup_pipeline()


def test_failed_test_clears_previous_results(regression_pipeline, regression_data):
    """test 失败后不能再读到上一次的指标。"""
    regression_pipeline.train(regression_data)
    regression_pipeline.test(regression_data)
    assert regression_pipeline.get_test_results()["num_samples"] == regression_data.num_samples

    wrong_inputs = RegressionData.from_arrays(np.zeros((2, 5)), np.zeros((2, 2)))
    with pytest.raises(DimensionMismatchError):
        regression_pipeline.test(wrong_inputs)
    with pytest.raises(StateError):
        regression_pipeline.get_test_rms_error()
    with pytest.raises(StateError):
        regression_pipeline.get_test_results()
    assert regression_pipeline.test_time == 0.0


def test_save_load_configured_keeps_class_weights(temp_dir, classification_data):
    pipeline = GestureRecognitionPipeline(ANBC())
    pipeline.model.set_weights({1: [1.0, 0.0]})
    path = temp_dir / "weighted.json"
    pipeline.save(path)

    loaded = GestureRecognitionPipeline.load(path)
    assert loaded.stage == PipelineStage.CONFIGURED
    loaded.train(classification_data)
    np.testing.assert_array_equal(loaded.model.weights[0], [1.0, 0.0])
