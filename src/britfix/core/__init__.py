"""
核心型別、事件與例外
"""

from .errors import BritfixError, ConfigError, DictionaryLoadError, SpliceError
from .events import ConversionEvent, ConversionEventHandler
from .types import ChangeStats, ConversionResult, Direction, Span, SpanKind

__all__ = [
    "BritfixError",
    "ConfigError",
    "DictionaryLoadError",
    "SpliceError",
    "ConversionEvent",
    "ConversionEventHandler",
    "ChangeStats",
    "ConversionResult",
    "Direction",
    "Span",
    "SpanKind",
]
