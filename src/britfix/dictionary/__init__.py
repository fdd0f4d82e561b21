"""
字典模組

- SpellingDictionary: 美式 → 英式拼寫對照表 (內建 + 使用者字典)
- ContextualWordDetector: 上下文敏感詞判斷
- SpellingReplacer: 兩者組合後的整文替換
"""

from .contextual import ContextualMatch, ContextualWord, ContextualWordDetector
from .contextual_config import (
    CONTEXTUAL_CONFIG_FILENAME,
    ContextualConfig,
    load_contextual_config,
    save_contextual_config,
)
from .contextual_rules import BUILTIN_CONTEXTUAL_WORDS
from .replacer import Replacement, SpellingReplacer
from .store import (
    USER_DICTIONARY_FILENAME,
    SpellingDictionary,
    build_dictionary,
    load_builtin_dictionary,
    load_user_dictionary,
)

__all__ = [
    "BUILTIN_CONTEXTUAL_WORDS",
    "CONTEXTUAL_CONFIG_FILENAME",
    "ContextualConfig",
    "ContextualMatch",
    "ContextualWord",
    "ContextualWordDetector",
    "Replacement",
    "SpellingDictionary",
    "SpellingReplacer",
    "USER_DICTIONARY_FILENAME",
    "build_dictionary",
    "load_contextual_config",
    "load_builtin_dictionary",
    "load_user_dictionary",
    "save_contextual_config",
]
