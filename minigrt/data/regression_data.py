"""
回归数据集

每个样本由 M 维输入向量和 N 维目标向量组成。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import DimensionMismatchError, GRTIOError
from .base import BaseDataset, expect_header, format_number, parse_int, parse_row
from .preprocess import compute_ranges


@dataclass(frozen=True)
class RegressionSample:
    """回归样本。"""

    input_vector: np.ndarray
    target_vector: np.ndarray

    @property
    def num_input_dimensions(self) -> int:
        return int(self.input_vector.size)

    @property
    def num_target_dimensions(self) -> int:
        return int(self.target_vector.size)


class RegressionData(BaseDataset):
    """
    回归数据集

    示例：
        data = RegressionData()
        data.load("MultidimensionalRegressionTrainingData.txt")
        test = data.partition(80, seed=42)
    """

    FILE_HEADER = "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0"

    def __init__(
        self,
        num_input_dimensions: int = 0,
        num_target_dimensions: int = 0,
        dataset_name: str = "NOT_SET",
        info_text: str = "",
    ):
        self._num_target_dimensions = 0
        super().__init__(dataset_name=dataset_name, info_text=info_text)
        if num_input_dimensions or num_target_dimensions:
            self.set_input_and_target_dimensions(num_input_dimensions, num_target_dimensions)

    def _empty_outputs(self) -> np.ndarray:
        return np.zeros((0, self._num_target_dimensions), dtype=float)

    def _make_sample(self, index: int) -> RegressionSample:
        return RegressionSample(
            input_vector=self._inputs[index].copy(),
            target_vector=self._outputs[index].copy(),
        )

    @property
    def num_target_dimensions(self) -> int:
        return self._num_target_dimensions

    @property
    def targets(self) -> np.ndarray:
        view = self._outputs.view()
        view.flags.writeable = False
        return view

    @classmethod
    def from_arrays(cls, inputs, targets, dataset_name: str = "NOT_SET") -> RegressionData:
        """由 (n, M) 输入矩阵和 (n, N) 目标矩阵构建数据集。"""
        inputs = np.asarray(inputs, dtype=float)
        targets = np.asarray(targets, dtype=float)
        if targets.ndim == 1:
            targets = targets.reshape(-1, 1)
        if inputs.ndim != 2 or inputs.shape[0] != targets.shape[0]:
            raise ValueError(f"inputs/targets shape mismatch: {inputs.shape} vs {targets.shape}")
        data = cls(inputs.shape[1], targets.shape[1], dataset_name=dataset_name)
        data._set_arrays(inputs.copy(), targets.copy())
        return data

    def set_input_and_target_dimensions(self, num_input_dimensions: int, num_target_dimensions: int) -> None:
        """设置维度（会清空已有样本）。"""
        if num_input_dimensions <= 0 or num_target_dimensions <= 0:
            raise ValueError("Input and target dimensions must be positive")
        self.clear()
        self._num_input_dimensions = num_input_dimensions
        self._num_target_dimensions = num_target_dimensions
        self._inputs = np.zeros((0, num_input_dimensions), dtype=float)
        self._outputs = np.zeros((0, num_target_dimensions), dtype=float)

    def clear(self) -> None:
        self._num_target_dimensions = 0
        super().clear()

    def add_sample(self, input_vector, target_vector) -> None:
        """添加一个样本。第一个样本决定维度。"""
        y = np.asarray(target_vector, dtype=float).reshape(-1)
        if self.num_samples == 0 and self._num_target_dimensions == 0:
            x = self._check_input_vector(input_vector)
            self._num_target_dimensions = int(y.size)
            self._outputs = np.zeros((0, y.size), dtype=float)
        else:
            if y.size != self._num_target_dimensions:
                raise DimensionMismatchError("target", self._num_target_dimensions, int(y.size))
            x = self._check_input_vector(input_vector)
        self._inputs = np.vstack([self._inputs, x.reshape(1, -1)])
        self._outputs = np.vstack([self._outputs, y.reshape(1, -1)])
        self._on_samples_changed()

    def _adopt_dimensions(self, other: RegressionData) -> None:
        self._num_target_dimensions = other.num_target_dimensions

    def _check_compatible(self, other: RegressionData) -> None:
        super()._check_compatible(other)
        if other.num_samples and self.num_samples and other.num_target_dimensions != self.num_target_dimensions:
            raise DimensionMismatchError("target", self.num_target_dimensions, other.num_target_dimensions)

    def get_target_ranges(self) -> list[tuple[float, float]]:
        """每个目标维度的 (min, max)。"""
        if self.num_samples == 0:
            return []
        return [(float(lo), float(hi)) for lo, hi in compute_ranges(self._outputs)]

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def _write_text(self, fp) -> None:
        fp.write(f"{self.FILE_HEADER}\n")
        fp.write(f"DatasetName: {self.dataset_name}\n")
        fp.write(f"InfoText: {self.info_text}\n")
        fp.write(f"NumInputDimensions: {self.num_input_dimensions}\n")
        fp.write(f"NumTargetDimensions: {self.num_target_dimensions}\n")
        fp.write(f"TotalNumTrainingExamples: {self.num_samples}\n")
        fp.write("RegressionData:\n")
        for x, y in zip(self._inputs, self._outputs):
            fp.write("\t".join(format_number(v) for v in np.concatenate([x, y])) + "\n")

    def _read_text(self, lines: list[str]) -> None:
        if len(lines) < 7 or lines[0].strip() != self.FILE_HEADER:
            raise GRTIOError(f"File does not start with {self.FILE_HEADER}")

        self.dataset_name = expect_header(lines[1], "DatasetName")
        self.info_text = expect_header(lines[2], "InfoText")
        num_inputs = parse_int(expect_header(lines[3], "NumInputDimensions"), "NumInputDimensions")
        num_targets = parse_int(expect_header(lines[4], "NumTargetDimensions"), "NumTargetDimensions")
        total = parse_int(expect_header(lines[5], "TotalNumTrainingExamples"), "TotalNumTrainingExamples")
        if lines[6].strip() != "RegressionData:":
            raise GRTIOError(f"Expected 'RegressionData:' but found '{lines[6].strip()}'")
        if num_inputs <= 0 or num_targets <= 0:
            raise GRTIOError("NumInputDimensions and NumTargetDimensions must be positive")

        rows = [line for line in lines[7:] if line.strip()]
        if len(rows) != total:
            raise GRTIOError(f"Header declares {total} samples but file contains {len(rows)}")

        width = num_inputs + num_targets
        values = np.asarray([parse_row(row, width, i) for i, row in enumerate(rows)], dtype=float).reshape(-1, width)
        self._num_input_dimensions = num_inputs
        self._num_target_dimensions = num_targets
        self._set_arrays(values[:, :num_inputs], values[:, num_inputs:])

    def _read_csv(self, rows: np.ndarray, num_input_dimensions: int | None = None, num_target_dimensions: int | None = None) -> None:
        """CSV 每行：M 个输入后接 N 个目标。必须给出 num_input_dimensions。"""
        if num_input_dimensions is None:
            raise GRTIOError("Loading regression data from CSV requires num_input_dimensions")
        width = rows.shape[1]
        if num_target_dimensions is None:
            num_target_dimensions = width - num_input_dimensions
        if num_input_dimensions <= 0 or num_target_dimensions <= 0 or num_input_dimensions + num_target_dimensions != width:
            raise GRTIOError(
                f"CSV has {width} columns, which does not match {num_input_dimensions} inputs + {num_target_dimensions} targets"
            )
        self._num_input_dimensions = num_input_dimensions
        self._num_target_dimensions = num_target_dimensions
        self._set_arrays(rows[:, :num_input_dimensions], rows[:, num_input_dimensions:])

    def _csv_rows(self) -> np.ndarray:
        return np.hstack([self._inputs, self._outputs])

    # ------------------------------------------------------------------
    # 统计
    # ------------------------------------------------------------------

    def get_stats_as_string(self) -> str:
        lines = [
            f"DatasetName:\t{self.dataset_name}",
            f"DatasetInfo:\t{self.info_text}",
            f"Number of Samples:\t{self.num_samples}",
            f"Number of Input Dimensions:\t{self.num_input_dimensions}",
            f"Number of Target Dimensions:\t{self.num_target_dimensions}",
        ]
        lines += self._ranges_lines("Input Dataset Ranges", self.get_input_ranges())
        lines += self._ranges_lines("Target Dataset Ranges", self.get_target_ranges())
        return "\n".join(lines)
