"""
全局配置模块

提供：
- 目录管理
- 日志配置
"""
import logging
import logging.config
import os
import sys
from pathlib import Path

# 目录配置
ROOT_DIR = Path(__file__).parent.parent.absolute()
LOGS_DIR = Path(os.environ.get("MINIGRT_LOGS_DIR", Path(ROOT_DIR, "logs")))
try:
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
except OSError:
    # 安装目录只读时退回到当前工作目录
    LOGS_DIR = Path(Path.cwd(), "logs")
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

# 默认空类标签（null rejection 时输出）
GRT_DEFAULT_NULL_CLASS_LABEL = 0

# 日志配置
logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "minimal": {"format": "%(message)s"},
        "detailed": {
            "format": "%(levelname)s %(asctime)s [%(name)s:%(filename)s:%(funcName)s:%(lineno)d]\n%(message)s\n"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "minimal",
            "level": logging.DEBUG,
        },
        "info": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": Path(LOGS_DIR, "info.log"),
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 10,
            "formatter": "detailed",
            "level": logging.INFO,
        },
        "error": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": Path(LOGS_DIR, "error.log"),
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 10,
            "formatter": "detailed",
            "level": logging.ERROR,
        },
    },
    "loggers": {
        "minigrt": {
            "handlers": ["console", "info", "error"],
            "level": logging.INFO,
            "propagate": False,
        },
    },
}

# 初始化日志
logging.config.dictConfig(logging_config)
logger = logging.getLogger("minigrt")

# 导出常用配置
__all__ = ["logger", "ROOT_DIR", "LOGS_DIR", "GRT_DEFAULT_NULL_CLASS_LABEL"]
