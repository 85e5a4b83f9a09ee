"""
数据模块日志工具
"""
from minigrt.config import logger as _logger

_warning_counter = {}


def warn_n_times(msg, n=10, logger=_logger):
    """限制警告消息的显示次数。

    Args:
        msg (str): 警告消息。
        n (int): 最多显示次数。默认为 10。
        logger: 日志记录器。
    """
    if msg not in _warning_counter:
        _warning_counter[msg] = 0
    if _warning_counter[msg] < n:
        logger.warning(msg)
    _warning_counter[msg] += 1
