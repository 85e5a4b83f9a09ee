"""
工具函数模块

提供：
- 随机种子设置
- 字典 I/O
"""

import json
import os
import random
from typing import Any

import numpy as np

__all__ = [
    "set_seeds",
    "load_dict",
    "save_dict",
    "to_jsonable",
]


def set_seeds(seed: int = 42):
    """设置随机种子以确保可复现性。"""
    random.seed(seed)
    np.random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)


def to_jsonable(obj: Any) -> Any:
    """默认序列化器，处理 numpy 类型。"""
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def load_dict(path: str) -> dict:
    """从 JSON 文件加载字典。

    Args:
        path: 文件路径

    Returns:
        Dict: 加载的 JSON 数据
    """
    with open(path) as fp:
        d = json.load(fp)
    return d


def save_dict(d: dict, path: str, cls: Any = None, sortkeys: bool = False) -> None:
    """
    将字典保存到指定位置。

    Args:
        d: 要保存的数据
        path: 保存位置
        cls: 用于编码字典数据的编码器。默认为 None
        sortkeys: 是否按字母顺序排序键。默认为 False
    """
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    with open(path, "w") as fp:
        json.dump(d, indent=2, fp=fp, cls=cls, sort_keys=sortkeys, default=to_jsonable)
        fp.write("\n")
