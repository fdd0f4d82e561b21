"""
上下文敏感詞設定

JSON 格式 (所有欄位皆可省略，缺少時使用預設值):

    {
      "enabled": true,
      "wordConfigs": {"license": {"enabled": true}, "dialog": {"enabled": false}},
      "excludePatterns": ["\\bpractice\\s+mode\\b"],
      "customWords": [
        {
          "word": "cozy",
          "replacement": "cosy",
          "excludePatterns": ["\\bcozy\\s+games?\\b"],
          "includePatterns": [],
          "priority": 0
        }
      ]
    }

- enabled=false 或 wordConfigs 中 enabled=false 的字：仍然是上下文敏感詞
  (不走一般字典)，但一律保留原字
- excludePatterns 套用到每一個上下文敏感詞的視窗
- customWords 追加到內建規則之後
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple

from britfix.core.errors import ConfigError
from britfix.utils.logger import get_logger

from .contextual import ContextualWord

logger = get_logger("dictionary.contextual_config")

CONTEXTUAL_CONFIG_FILENAME = "contextual_words.json"


def _patterns(value: Any, name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise ConfigError(f"{name} 必須是字串陣列")
    return tuple(value)


def _custom_word(data: Any) -> ContextualWord:
    if not isinstance(data, Mapping):
        raise ConfigError(f"customWords 的每一項必須是物件，收到 {data!r}")
    word = data.get("word")
    replacement = data.get("replacement")
    if not isinstance(word, str) or not word.strip() or not isinstance(replacement, str) or not replacement.strip():
        raise ConfigError(f"customWords 需要 word 與 replacement: {dict(data)!r}")
    priority = data.get("priority", 0)
    if not isinstance(priority, int) or isinstance(priority, bool):
        raise ConfigError(f"customWords[{word!r}].priority 必須是整數")
    return ContextualWord(
        word=word.strip().lower(),
        replacement=replacement.strip(),
        exclude_patterns=_patterns(data.get("excludePatterns"), f"customWords[{word!r}].excludePatterns"),
        include_patterns=_patterns(data.get("includePatterns"), f"customWords[{word!r}].includePatterns"),
        priority=priority,
        description=str(data.get("description", "")),
    )


@dataclass
class ContextualConfig:
    """使用者可編輯的上下文敏感詞設定"""

    enabled: bool = True
    disabled_words: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=list)
    custom_words: List[ContextualWord] = field(default_factory=list)

    def validate(self) -> "ContextualConfig":
        """檢查 regex，不合法時拋出 ConfigError"""
        patterns = [("excludePatterns", p) for p in self.exclude_patterns]
        for entry in self.custom_words:
            patterns.extend((f"customWords[{entry.word!r}]", p) for p in entry.exclude_patterns)
            patterns.extend((f"customWords[{entry.word!r}]", p) for p in entry.include_patterns)
        for name, pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ConfigError(f"{name} 含無效的 regex {pattern!r}: {exc}") from exc
        return self

    def is_word_enabled(self, word: str) -> bool:
        return self.enabled and word.lower() not in self.disabled_words

    def apply(self, words: Iterable[ContextualWord]) -> List[ContextualWord]:
        """
        將設定套用到規則清單

        停用的字改為「保留原字」規則，全域 excludePatterns 併入每一條規則。
        """
        extra = tuple(self.exclude_patterns)
        result: List[ContextualWord] = []
        kept: Set[str] = set()
        for entry in [*words, *self.custom_words]:
            if not self.is_word_enabled(entry.base_word):
                key = entry.word.lower()
                if key not in kept:
                    kept.add(key)
                    result.append(ContextualWord(key, key, base=entry.base_word, description="disabled"))
                continue
            if extra:
                entry = ContextualWord(
                    word=entry.word,
                    replacement=entry.replacement,
                    exclude_patterns=entry.exclude_patterns + extra,
                    include_patterns=entry.include_patterns,
                    priority=entry.priority,
                    description=entry.description,
                    base=entry.base,
                )
            result.append(entry)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContextualConfig":
        """從 camelCase JSON dict 建立設定，缺少的欄位使用預設值"""
        if not isinstance(data, Mapping):
            raise ConfigError("上下文敏感詞設定必須是 JSON 物件")

        word_configs = data.get("wordConfigs", {})
        if not isinstance(word_configs, Mapping):
            raise ConfigError("wordConfigs 必須是物件")
        disabled = []
        for word, settings in word_configs.items():
            if not isinstance(settings, Mapping):
                raise ConfigError(f"wordConfigs[{word!r}] 必須是物件")
            if not settings.get("enabled", True):
                disabled.append(str(word).lower())

        custom = data.get("customWords", [])
        if not isinstance(custom, list):
            raise ConfigError("customWords 必須是陣列")

        return cls(
            enabled=bool(data.get("enabled", True)),
            disabled_words=sorted(disabled),
            exclude_patterns=list(_patterns(data.get("excludePatterns"), "excludePatterns")),
            custom_words=[_custom_word(item) for item in custom],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "wordConfigs": {word: {"enabled": False} for word in self.disabled_words},
            "excludePatterns": list(self.exclude_patterns),
            "customWords": [
                {
                    "word": entry.word,
                    "replacement": entry.replacement,
                    "excludePatterns": list(entry.exclude_patterns),
                    "includePatterns": list(entry.include_patterns),
                    "priority": entry.priority,
                }
                for entry in self.custom_words
            ],
        }


def load_contextual_config(path: Path | str | None, *, strict: bool = False) -> ContextualConfig:
    """
    讀取上下文敏感詞設定檔 (每次建立引擎時重新讀取)

    - path 為 None 或檔案不存在 → 預設值
    - JSON 錯誤或內容不合法 → strict=False 時記錄 warning 並回傳預設值
    """
    if path is None:
        return ContextualConfig()
    path = Path(path).expanduser()
    if not path.exists():
        return ContextualConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return ContextualConfig.from_dict(raw).validate()
    except (OSError, ValueError, ConfigError) as exc:
        if strict:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"無法讀取上下文敏感詞設定 {path}: {exc}") from exc
        logger.warning(f"上下文敏感詞設定無效，改用預設值: {path} ({exc})")
        return ContextualConfig()


def save_contextual_config(config: ContextualConfig, path: Path | str) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path
