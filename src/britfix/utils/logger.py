"""
日誌與計時工具

britfix 作為函式庫，預設不輸出任何日誌（package logger 掛 NullHandler）。
需要觀察行為時：

    from britfix import enable_debug_logging
    enable_debug_logging()

或直接使用標準 logging：

    import logging
    logging.getLogger("britfix").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Callable, Optional

ROOT_LOGGER_NAME = "britfix"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

TimingCallback = Callable[[str, float], None]

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """
    取得 britfix 命名空間下的 logger

    Args:
        name: 子名稱 (例如 "engine", "units.detector")，None 表示根 logger
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + ".") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler_level: Optional[int] = None,
) -> logging.Logger:
    """
    設定 britfix 根 logger 的輸出

    重複呼叫只會更新等級，不會重複掛 handler。
    handler_level 未指定時與 level 相同；子 logger 自行調低等級時 (例如 britfix.timing)
    需要較低的 handler_level 才會輸出。
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if getattr(h, "_britfix_handler", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler._britfix_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setLevel(level if handler_level is None else handler_level)
    return logger


def enable_debug_logging() -> logging.Logger:
    """開啟 DEBUG 日誌 (包含每一筆替換與計時資訊)"""
    return setup_logger(level=logging.DEBUG)


def enable_timing_logging() -> logging.Logger:
    """
    只開啟計時日誌

    所有 TimingContext (引擎、單位處理器) 在原 logger 未開啟 DEBUG 時，
    改由 britfix.timing 輸出。
    """
    setup_logger(level=logging.INFO, handler_level=logging.DEBUG)
    timing_logger = get_logger("timing")
    timing_logger.setLevel(logging.DEBUG)
    return timing_logger


class TimingContext:
    """
    計時 context manager

    使用方式:
        with TimingContext("BritishEngine.convert", logger, logging.DEBUG):
            ...

    Args:
        operation: 操作名稱
        logger: 輸出用 logger (None 則使用 britfix.timing)
        level: 日誌等級
        callback: (operation, elapsed_seconds) -> None
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.DEBUG,
        callback: Optional[TimingCallback] = None,
    ) -> None:
        self.operation = operation
        self.logger = logger or get_logger("timing")
        self.level = level
        self.callback = callback
        self.elapsed: float = 0.0
        self._start: float = 0.0

    def __enter__(self) -> "TimingContext":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self._start
        message = f"[Timing] {self.operation}: {self.elapsed * 1000:.2f}ms"
        if self.logger.isEnabledFor(self.level):
            self.logger.log(self.level, message)
        else:
            timing_logger = get_logger("timing")
            if timing_logger is not self.logger and timing_logger.isEnabledFor(self.level):
                timing_logger.log(self.level, message)
        if self.callback is not None:
            try:
                self.callback(self.operation, self.elapsed)
            except Exception:
                self.logger.exception("on_timing 回呼執行失敗")


def log_timing(operation: str | None = None, level: int = logging.DEBUG):
    """函式計時裝飾器"""

    def decorator(func):
        name = operation or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with TimingContext(name, level=level):
                return func(*args, **kwargs)

        return wrapper

    return decorator
