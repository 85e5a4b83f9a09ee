"""
分类数据集

每个样本由一个正整数类标签和 M 维输入向量组成。类标签 0 保留给空类（null class）。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import GRT_DEFAULT_NULL_CLASS_LABEL
from ..errors import GRTIOError
from .base import BaseDataset, expect_header, format_number, parse_int, parse_row


@dataclass(frozen=True)
class ClassificationSample:
    """分类样本。"""

    class_label: int
    input_vector: np.ndarray

    @property
    def sample(self) -> np.ndarray:
        return self.input_vector

    @property
    def num_dimensions(self) -> int:
        return int(self.input_vector.size)


class ClassificationData(BaseDataset):
    """
    分类数据集

    维护一个类计数器（class tracker），记录每个类标签的样本数。

    示例：
        data = ClassificationData()
        data.load("ANBCTrainingData.txt")
        test = data.partition(80, use_stratified_sampling=True, seed=0)
    """

    FILE_HEADER = "GRT_LABELLED_CLASSIFICATION_DATA_FILE_V1.0"

    def __init__(
        self,
        num_dimensions: int = 0,
        dataset_name: str = "NOT_SET",
        info_text: str = "",
        allow_null_gesture_class: bool = True,
    ):
        self.allow_null_gesture_class = allow_null_gesture_class
        self._class_tracker: dict[int, int] = {}
        super().__init__(dataset_name=dataset_name, info_text=info_text)
        if num_dimensions:
            self.set_num_dimensions(num_dimensions)

    def _empty_outputs(self) -> np.ndarray:
        return np.zeros(0, dtype=np.int64)

    def _make_sample(self, index: int) -> ClassificationSample:
        return ClassificationSample(class_label=int(self._outputs[index]), input_vector=self._inputs[index].copy())

    def _on_samples_changed(self) -> None:
        labels, counts = np.unique(self._outputs, return_counts=True)
        self._class_tracker = {int(label): int(count) for label, count in zip(labels, counts)}

    def _strata(self) -> np.ndarray:
        return self._outputs

    # ------------------------------------------------------------------
    # 访问器
    # ------------------------------------------------------------------

    @property
    def num_dimensions(self) -> int:
        return self.num_input_dimensions

    @property
    def num_classes(self) -> int:
        return len(self._class_tracker)

    @property
    def class_labels(self) -> list[int]:
        """排序后的类标签列表。"""
        return sorted(self._class_tracker)

    @property
    def class_tracker(self) -> dict[int, int]:
        """{类标签: 样本数}。"""
        return dict(self._class_tracker)

    @property
    def labels(self) -> np.ndarray:
        view = self._outputs.view()
        view.flags.writeable = False
        return view

    def get_class_data(self, class_label: int) -> ClassificationData:
        """返回只包含某一类样本的新数据集。"""
        return self._subset(np.flatnonzero(self._outputs == class_label))

    # ------------------------------------------------------------------
    # 修改
    # ------------------------------------------------------------------

    @classmethod
    def from_arrays(cls, labels, inputs, dataset_name: str = "NOT_SET") -> ClassificationData:
        """由 (n,) 类标签和 (n, M) 输入矩阵构建数据集。"""
        labels = np.asarray(labels).reshape(-1)
        inputs = np.asarray(inputs, dtype=float)
        if inputs.ndim != 2 or inputs.shape[0] != labels.shape[0]:
            raise ValueError(f"labels/inputs shape mismatch: {labels.shape} vs {inputs.shape}")
        data = cls(inputs.shape[1], dataset_name=dataset_name)
        for label in np.unique(labels):
            data._check_label(label)
        data._set_arrays(inputs.copy(), labels.astype(np.int64))
        return data

    def set_num_dimensions(self, num_dimensions: int) -> None:
        """设置输入维度（会清空已有样本）。"""
        if num_dimensions <= 0:
            raise ValueError("num_dimensions must be positive")
        self.clear()
        self._num_input_dimensions = num_dimensions
        self._inputs = np.zeros((0, num_dimensions), dtype=float)

    def _check_label(self, class_label: int) -> int:
        label = int(class_label)
        if label < 0:
            raise ValueError(f"Class labels must be non-negative, got {label}")
        if label == GRT_DEFAULT_NULL_CLASS_LABEL and not self.allow_null_gesture_class:
            raise ValueError("Class label 0 is reserved for the null class and is not allowed in this dataset")
        return label

    def add_sample(self, class_label: int, input_vector) -> None:
        """添加一个样本。第一个样本决定维度。"""
        label = self._check_label(class_label)
        x = self._check_input_vector(input_vector)
        self._append(x, label)

    def remove_class(self, class_label: int) -> int:
        """删除某个类的所有样本，返回删除数量。"""
        mask = self._outputs == class_label
        removed = int(mask.sum())
        if removed:
            self._set_arrays(self._inputs[~mask], self._outputs[~mask])
        return removed

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def _write_text(self, fp) -> None:
        fp.write(f"{self.FILE_HEADER}\n")
        fp.write(f"DatasetName: {self.dataset_name}\n")
        fp.write(f"InfoText: {self.info_text}\n")
        fp.write(f"NumDimensions: {self.num_dimensions}\n")
        fp.write(f"TotalNumTrainingExamples: {self.num_samples}\n")
        fp.write(f"NumberOfClasses: {self.num_classes}\n")
        fp.write("ClassIDsAndCounters:\n")
        for label in self.class_labels:
            fp.write(f"{label}\t{self._class_tracker[label]}\n")
        fp.write("LabelledTrainingData:\n")
        for label, x in zip(self._outputs, self._inputs):
            fp.write("\t".join([str(int(label))] + [format_number(v) for v in x]) + "\n")

    def _read_text(self, lines: list[str]) -> None:
        if len(lines) < 7 or lines[0].strip() != self.FILE_HEADER:
            raise GRTIOError(f"File does not start with {self.FILE_HEADER}")

        self.dataset_name = expect_header(lines[1], "DatasetName")
        self.info_text = expect_header(lines[2], "InfoText")
        num_dimensions = parse_int(expect_header(lines[3], "NumDimensions"), "NumDimensions")
        total = parse_int(expect_header(lines[4], "TotalNumTrainingExamples"), "TotalNumTrainingExamples")
        num_classes = parse_int(expect_header(lines[5], "NumberOfClasses"), "NumberOfClasses")
        if lines[6].strip() != "ClassIDsAndCounters:":
            raise GRTIOError(f"Expected 'ClassIDsAndCounters:' but found '{lines[6].strip()}'")
        if num_dimensions <= 0:
            raise GRTIOError("NumDimensions must be positive")

        declared: dict[int, int] = {}
        cursor = 7
        for _ in range(num_classes):
            if cursor >= len(lines):
                raise GRTIOError("Unexpected end of file while reading ClassIDsAndCounters")
            tokens = lines[cursor].split()
            if len(tokens) < 2:
                raise GRTIOError(f"Malformed class counter line: '{lines[cursor].strip()}'")
            declared[parse_int(tokens[0], "class label")] = parse_int(tokens[1], "class counter")
            cursor += 1

        if cursor >= len(lines) or lines[cursor].strip() != "LabelledTrainingData:":
            raise GRTIOError("Expected 'LabelledTrainingData:' after the class counters")

        rows = [line for line in lines[cursor + 1:] if line.strip()]
        if len(rows) != total:
            raise GRTIOError(f"Header declares {total} samples but file contains {len(rows)}")

        values = np.asarray([parse_row(row, num_dimensions + 1, i) for i, row in enumerate(rows)], dtype=float)
        values = values.reshape(-1, num_dimensions + 1)
        labels = values[:, 0]
        if np.any(labels != np.round(labels)) or np.any(labels < 0):
            raise GRTIOError("Class labels must be non-negative integers")

        self._num_input_dimensions = num_dimensions
        self._set_arrays(values[:, 1:], labels.astype(np.int64))
        for label in self.class_labels:
            self._check_loaded_label(label)

        if declared != self._class_tracker:
            raise GRTIOError(f"ClassIDsAndCounters {declared} do not match the samples {self._class_tracker}")

    def _check_loaded_label(self, label: int) -> None:
        try:
            self._check_label(label)
        except ValueError as e:
            raise GRTIOError(str(e)) from e

    def _read_csv(self, rows: np.ndarray) -> None:
        """CSV 每行：类标签后接 M 个输入值。"""
        if rows.shape[1] < 2:
            raise GRTIOError("Classification CSV needs a label column and at least one feature column")
        labels = rows[:, 0]
        if np.any(labels != np.round(labels)) or np.any(labels < 0):
            raise GRTIOError("Class labels must be non-negative integers")
        self._num_input_dimensions = int(rows.shape[1] - 1)
        self._set_arrays(rows[:, 1:], labels.astype(np.int64))
        for label in self.class_labels:
            self._check_loaded_label(label)

    def _csv_rows(self) -> np.ndarray:
        return np.hstack([self._outputs.reshape(-1, 1).astype(float), self._inputs])

    # ------------------------------------------------------------------
    # 统计
    # ------------------------------------------------------------------

    def get_stats_as_string(self) -> str:
        lines = [
            f"DatasetName:\t{self.dataset_name}",
            f"DatasetInfo:\t{self.info_text}",
            f"Number of Dimensions:\t{self.num_dimensions}",
            f"Number of Samples:\t{self.num_samples}",
            f"Number of Classes:\t{self.num_classes}",
            "ClassStats:",
        ]
        for label in self.class_labels:
            lines.append(f"ClassLabel:\t{label}\tNumber of Samples:\t{self._class_tracker[label]}")
        lines += self._ranges_lines("Dataset Ranges", self.get_input_ranges())
        return "\n".join(lines)
