"""
britfix - 美式 → 英式英文轉換器 (American to British English Converter)

核心概念：
- 拼寫: 內建對照表 + 使用者字典，整字替換並保留大小寫
- 上下文敏感詞: license / practice / program / meter ... 依前後文決定是否替換
- 單位: 英制 → 公制 (12 feet → 3.7 metres)，排除慣用語
- 程式碼模式: 只轉換註解與 Markdown 文字

官方入口（穩定 API）：
- `britfix.BritishEngine`
- `britfix.extract_comments`
"""

__version__ = "0.1.0"

# =============================================================================
# Engine 層（官方入口）
# =============================================================================
from britfix.engine import BritishEngine
from britfix.config import EngineConfig

# =============================================================================
# 程式碼感知
# =============================================================================
from britfix.codeaware import extract_comments, tokenize

# =============================================================================
# 資料型別與例外
# =============================================================================
from britfix.core import (
    BritfixError,
    ChangeStats,
    ConfigError,
    ConversionEvent,
    ConversionResult,
    DictionaryLoadError,
    Direction,
    Span,
    SpanKind,
    SpliceError,
)
from britfix.quotes import QuoteStyle

# =============================================================================
# 進階用途
# =============================================================================
from britfix.dictionary import ContextualWord, ContextualWordDetector, SpellingDictionary
from britfix.units import UnitConfig

# =============================================================================
# 日誌工具
# =============================================================================
from britfix.utils.logger import enable_debug_logging, enable_timing_logging, get_logger

__all__ = [
    "__version__",
    # Engine
    "BritishEngine",
    "EngineConfig",
    # Code-aware
    "extract_comments",
    "tokenize",
    # Types
    "BritfixError",
    "ChangeStats",
    "ConfigError",
    "ConversionEvent",
    "ConversionResult",
    "DictionaryLoadError",
    "Direction",
    "QuoteStyle",
    "Span",
    "SpanKind",
    "SpliceError",
    # Advanced
    "ContextualWord",
    "ContextualWordDetector",
    "SpellingDictionary",
    "UnitConfig",
    # Logging
    "get_logger",
    "enable_debug_logging",
    "enable_timing_logging",
]
