"""
数据集基类

定义 RegressionData / ClassificationData 共享的功能：
- 样本存储（输入矩阵 + 输出数组）
- 文本格式 / CSV 的加载与保存入口
- partition / k-fold / merge
- 统计信息
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import numpy as np

from ..config import logger
from ..errors import DimensionMismatchError, GRTIOError
from .preprocess import compute_ranges


def format_number(value: float) -> str:
    """以可精确往返的形式格式化数值。"""
    return repr(float(value))


def expect_header(line: str, key: str) -> str:
    """检查一行是否为 `key: value` 形式并返回 value。"""
    prefix = f"{key}:"
    if not line.startswith(prefix):
        raise GRTIOError(f"Expected '{prefix}' but found '{line.strip()}'")
    return line[len(prefix):].strip()


def parse_int(value: str, key: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise GRTIOError(f"Invalid integer for {key}: '{value}'") from e


def parse_row(line: str, expected: int, row_index: int) -> list[float]:
    """解析一行以空白分隔的数值，并检查列数。"""
    tokens = line.split()
    if len(tokens) != expected:
        raise GRTIOError(f"Row {row_index} has {len(tokens)} values, expected {expected}")
    try:
        return [float(t) for t in tokens]
    except ValueError as e:
        raise GRTIOError(f"Row {row_index} contains a non-numeric value: '{line.strip()}'") from e


class BaseDataset(ABC):
    """
    数据集基类

    子类用两个数组保存样本：
    - _inputs: (n_samples, num_input_dimensions)
    - _outputs: 回归为 (n_samples, num_target_dimensions)，分类为 (n_samples,) 类标签

    维度在第一个样本加入（或加载）时确定，之后所有样本必须一致。
    """

    FILE_HEADER: str = ""

    def __init__(self, dataset_name: str = "NOT_SET", info_text: str = ""):
        self.dataset_name = dataset_name
        self.info_text = info_text
        self._num_input_dimensions = 0
        self._inputs = np.zeros((0, 0), dtype=float)
        self._outputs = self._empty_outputs()

    # ------------------------------------------------------------------
    # 子类需要实现的部分
    # ------------------------------------------------------------------

    @abstractmethod
    def _empty_outputs(self) -> np.ndarray:
        """返回空的输出数组。"""

    @abstractmethod
    def _make_sample(self, index: int) -> Any:
        """把第 index 个样本包装成样本对象。"""

    @abstractmethod
    def _write_text(self, fp) -> None:
        """写入文本格式。"""

    @abstractmethod
    def _read_text(self, lines: list[str]) -> None:
        """解析文本格式。"""

    @abstractmethod
    def _read_csv(self, rows: np.ndarray, **kwargs) -> None:
        """从 CSV 行矩阵构建数据集。"""

    @abstractmethod
    def _csv_rows(self) -> np.ndarray:
        """返回写入 CSV 的行矩阵。"""

    def _strata(self) -> np.ndarray | None:
        """分层抽样用的分组键；None 表示不分层。"""
        return None

    def _on_samples_changed(self) -> None:
        """样本集合变化后的钩子（例如更新类计数）。"""

    # ------------------------------------------------------------------
    # 访问器
    # ------------------------------------------------------------------

    @property
    def num_samples(self) -> int:
        return int(self._inputs.shape[0])

    @property
    def num_input_dimensions(self) -> int:
        return self._num_input_dimensions

    @property
    def inputs(self) -> np.ndarray:
        """输入矩阵的只读视图。"""
        view = self._inputs.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return self.num_samples

    def __getitem__(self, index: int):
        if index < 0:
            index += self.num_samples
        if not 0 <= index < self.num_samples:
            raise IndexError(f"Sample index {index} out of range for dataset of size {self.num_samples}")
        return self._make_sample(index)

    def __iter__(self) -> Iterator:
        for i in range(self.num_samples):
            yield self._make_sample(i)

    def get_input_ranges(self) -> list[tuple[float, float]]:
        """每个输入维度的 (min, max)。"""
        if self.num_samples == 0:
            return []
        return [(float(lo), float(hi)) for lo, hi in compute_ranges(self._inputs)]

    # ------------------------------------------------------------------
    # 修改
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """删除所有样本并重置维度。"""
        self._num_input_dimensions = 0
        self._inputs = np.zeros((0, 0), dtype=float)
        self._outputs = self._empty_outputs()
        self._on_samples_changed()

    def _check_input_vector(self, input_vector) -> np.ndarray:
        x = np.asarray(input_vector, dtype=float).reshape(-1)
        if self.num_samples == 0 and self._num_input_dimensions == 0:
            self._num_input_dimensions = int(x.size)
            self._inputs = np.zeros((0, x.size), dtype=float)
        elif x.size != self._num_input_dimensions:
            raise DimensionMismatchError("input", self._num_input_dimensions, int(x.size))
        return x

    def _append(self, x: np.ndarray, y) -> None:
        self._inputs = np.vstack([self._inputs, x.reshape(1, -1)])
        self._outputs = np.concatenate([self._outputs, np.asarray([y], dtype=self._outputs.dtype)])
        self._on_samples_changed()

    def _set_arrays(self, inputs: np.ndarray, outputs: np.ndarray) -> None:
        self._inputs = np.asarray(inputs, dtype=float)
        self._outputs = np.asarray(outputs, dtype=self._outputs.dtype)
        self._on_samples_changed()

    def _subset(self, indices) -> BaseDataset:
        """用给定索引构建一个新数据集（不修改自身）。"""
        indices = np.asarray(indices, dtype=int)
        other = copy.copy(self)
        other._inputs = self._inputs[indices].copy()
        other._outputs = self._outputs[indices].copy()
        other._on_samples_changed()
        return other

    def _check_compatible(self, other: BaseDataset) -> None:
        if type(other) is not type(self):
            raise TypeError(f"Cannot combine {type(self).__name__} with {type(other).__name__}")
        if other.num_samples and self.num_samples and other.num_input_dimensions != self.num_input_dimensions:
            raise DimensionMismatchError("input", self.num_input_dimensions, other.num_input_dimensions)

    def merge(self, other: BaseDataset) -> None:
        """把另一个同维度数据集的样本追加到本数据集。"""
        self._check_compatible(other)
        if other.num_samples == 0:
            return
        if self.num_samples == 0:
            self._num_input_dimensions = other.num_input_dimensions
            self._adopt_dimensions(other)
            self._set_arrays(other._inputs.copy(), other._outputs.copy())
            return
        self._set_arrays(
            np.vstack([self._inputs, other._inputs]),
            np.concatenate([self._outputs, other._outputs]),
        )

    def _adopt_dimensions(self, other: BaseDataset) -> None:
        """merge 到空数据集时复制子类特有的维度信息。"""

    # ------------------------------------------------------------------
    # 划分
    # ------------------------------------------------------------------

    def partition(self, percent_train: float, use_stratified_sampling: bool = False, seed: int | None = None) -> BaseDataset:
        """
        划分数据集。

        本数据集保留 percent_train% 的样本（向下取整），其余样本作为新数据集返回。
        样本选择由 seed 决定的随机排列给出，两部分内部保持原始顺序。

        Args:
            percent_train: 保留比例，范围 [0, 100]
            use_stratified_sampling: 是否按类分层（仅对有分组键的数据集生效）
            seed: 随机种子

        Returns:
            剩余样本组成的新数据集
        """
        if not 0 <= percent_train <= 100:
            raise ValueError(f"percent_train must be in [0, 100], got {percent_train}")

        rng = np.random.default_rng(seed)
        strata = self._strata() if use_stratified_sampling else None

        if strata is None:
            groups = [np.arange(self.num_samples)]
        else:
            groups = [np.flatnonzero(strata == key) for key in np.unique(strata)]

        keep: list[int] = []
        for group in groups:
            n_keep = int(len(group) * percent_train // 100)
            perm = rng.permutation(group)
            keep.extend(perm[:n_keep].tolist())

        keep_mask = np.zeros(self.num_samples, dtype=bool)
        keep_mask[keep] = True
        remainder = self._subset(np.flatnonzero(~keep_mask))
        kept = self._subset(np.flatnonzero(keep_mask))
        self._set_arrays(kept._inputs, kept._outputs)

        logger.debug(f"Partitioned dataset '{self.dataset_name}': kept {self.num_samples}, split off {remainder.num_samples}")
        return remainder

    def split_into_k_folds(self, k: int, seed: int | None = None) -> list[tuple[BaseDataset, BaseDataset]]:
        """
        K 折划分。

        Returns:
            长度为 k 的列表，每项为 (训练集, 测试集)，均为新数据集
        """
        if k < 2 or k > self.num_samples:
            raise ValueError(f"k must be in [2, {self.num_samples}], got {k}")
        rng = np.random.default_rng(seed)
        folds = np.array_split(rng.permutation(self.num_samples), k)
        result = []
        for i, test_idx in enumerate(folds):
            train_idx = np.concatenate([f for j, f in enumerate(folds) if j != i])
            result.append((self._subset(np.sort(train_idx)), self._subset(np.sort(test_idx))))
        return result

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def load(self, path: str | Path, **kwargs) -> None:
        """
        从文件加载数据集（替换已有样本）。

        `.csv` 文件按 CSV 解析，其余按 GRT 文本格式解析。

        Raises:
            GRTIOError: 文件不存在、不可读或格式错误
        """
        path = Path(path)
        if not path.exists():
            raise GRTIOError(f"Dataset file not found: {path}")

        is_csv = path.suffix.lower() == ".csv"
        self.clear()
        try:
            if is_csv:
                try:
                    rows = np.loadtxt(path, delimiter=",", ndmin=2)
                except ValueError as e:
                    raise GRTIOError(f"Malformed CSV file {path}: {e}") from e
                self._read_csv(rows, **kwargs)
            else:
                with open(path) as fp:
                    lines = [line.rstrip("\r\n") for line in fp]
                self._read_text(lines)
        except GRTIOError:
            self.clear()
            raise
        except DimensionMismatchError as e:
            self.clear()
            raise GRTIOError(f"Inconsistent rows in {path}: {e}") from e
        except UnicodeDecodeError as e:
            self.clear()
            raise GRTIOError(f"{path} is not a text file: {e}") from e
        except OSError as e:
            self.clear()
            raise GRTIOError(f"Failed to read {path}: {e}") from e

        if self.num_samples == 0:
            raise GRTIOError(f"Dataset file {path} contains no samples")

        # CSV 没有 DatasetName 头
        if is_csv and self.dataset_name == "NOT_SET":
            self.dataset_name = path.stem
        logger.debug(f"Loaded {self.num_samples} samples from {path}")

    def save(self, path: str | Path) -> None:
        """保存数据集。`.csv` 写 CSV，其余写 GRT 文本格式。"""
        path = Path(path)
        try:
            if path.parent and not path.parent.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as fp:
                if path.suffix.lower() == ".csv":
                    for row in self._csv_rows():
                        fp.write(",".join(format_number(v) for v in row) + "\n")
                else:
                    self._write_text(fp)
        except OSError as e:
            raise GRTIOError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Saved {self.num_samples} samples to {path}")

    # GRT 风格的别名
    def load_dataset_from_file(self, path: str | Path, **kwargs) -> None:
        self.load(path, **kwargs)

    def save_dataset_to_file(self, path: str | Path) -> None:
        self.save(path)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs):
        dataset = cls()
        dataset.load(path, **kwargs)
        return dataset

    # ------------------------------------------------------------------
    # 统计
    # ------------------------------------------------------------------

    @abstractmethod
    def get_stats_as_string(self) -> str:
        """返回统计信息文本。"""

    def print_stats(self) -> None:
        """输出统计信息（仅用于展示）。"""
        logger.info(self.get_stats_as_string())

    def _ranges_lines(self, title: str, ranges: list[tuple[float, float]]) -> list[str]:
        lines = [f"{title}:"]
        for j, (lo, hi) in enumerate(ranges):
            lines.append(f"\t[{j + 1}] Min:\t{lo}\tMax:\t{hi}")
        return lines
