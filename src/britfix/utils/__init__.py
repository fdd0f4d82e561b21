"""
工具模組

提供日誌、計時、多模式字串匹配與文字處理等通用工具。
"""

from .aho_corasick import AhoCorasick
from .logger import (
    TimingContext,
    enable_debug_logging,
    enable_timing_logging,
    get_logger,
    log_timing,
    setup_logger,
)
from .text import match_case

__all__ = [
    # 日誌工具
    "get_logger",
    "setup_logger",
    "log_timing",
    "TimingContext",
    "enable_debug_logging",
    "enable_timing_logging",

    # 文字工具
    "AhoCorasick",
    "match_case",
]
