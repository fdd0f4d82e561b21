"""
上下文敏感詞偵測器 (Contextual Word Detector)

對每個出現的上下文敏感詞：
1. 擷取前後各 N 個字的視窗 (不跨句)
2. 依優先序評估該字的規則：exclude 任一命中 → 規則不適用；
   include 非空時須至少命中一條
3. 第一條適用的規則決定替換字 (大小寫保留)；沒有適用規則 → 保留原字

上下文敏感詞永遠不走一般字典查詢。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from britfix.utils.logger import get_logger
from britfix.utils.text import WORD_PATTERN, SentenceIndex, in_spans, match_case, protected_spans

logger = get_logger("dictionary.contextual")

DEFAULT_WINDOW_WORDS = 4
# 視窗向左掃描時每個字最多看的字元數
_MAX_CHARS_PER_WORD = 40

# 看起來像程式碼的鄰接字元 (obj.dialog、#dialog、dialog(、dialog_id ...)
_CODE_PREFIX = re.compile(r"[.#<$@/\\_`]$")
_CODE_SUFFIX = re.compile(r"^(?:\(|_|\.[A-Za-z]|\s*=(?!=)|::|/|`|\[)")


@dataclass(frozen=True)
class ContextualWord:
    word: str
    replacement: str
    exclude_patterns: Tuple[str, ...] = ()
    include_patterns: Tuple[str, ...] = ()
    priority: int = 0
    description: str = ""
    # 同一組字形 (license / licenses) 共用的原形；空字串表示 word 本身
    base: str = ""

    @property
    def keeps_original(self) -> bool:
        return self.word.lower() == self.replacement.lower()

    @property
    def base_word(self) -> str:
        return (self.base or self.word).lower()


@dataclass
class _CompiledRule:
    entry: ContextualWord
    exclude: List[Pattern[str]] = field(default_factory=list)
    include: List[Pattern[str]] = field(default_factory=list)


@dataclass(frozen=True)
class ContextualMatch:
    start: int
    end: int
    original: str
    replacement: str
    rule: ContextualWord


def _compile(patterns: Iterable[str], word: str) -> List[Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as exc:
            logger.warning(f"略過無效的上下文 pattern ({word}): {pattern!r} ({exc})")
    return compiled


class ContextualWordDetector:
    """
    上下文敏感詞偵測器

    使用方式:
        detector = ContextualWordDetector()
        detector.resolve("The TV program starts at 8", 7, 14)   # -> "programme"
        detector.supported_words()                              # -> ["check", "checks", ...]
    """

    def __init__(
        self,
        words: Optional[Iterable[ContextualWord]] = None,
        *,
        window_words: int = DEFAULT_WINDOW_WORDS,
    ) -> None:
        if words is None:
            from .contextual_rules import BUILTIN_CONTEXTUAL_WORDS

            words = BUILTIN_CONTEXTUAL_WORDS

        self.window_words = max(1, int(window_words))
        self._rules: Dict[str, List[_CompiledRule]] = {}
        for entry in words:
            key = entry.word.lower()
            self._rules.setdefault(key, []).append(
                _CompiledRule(
                    entry=entry,
                    exclude=_compile(entry.exclude_patterns, key),
                    include=_compile(entry.include_patterns, key),
                )
            )
        for rules in self._rules.values():
            rules.sort(key=lambda r: r.entry.priority, reverse=True)

        logger.debug(f"ContextualWordDetector: {len(self._rules)} 個上下文敏感詞")

    def supported_words(self) -> List[str]:
        return sorted(self._rules)

    def is_contextual(self, word: str) -> bool:
        return word.lower() in self._rules

    def entries(self) -> List[ContextualWord]:
        return [rule.entry for rules in self._rules.values() for rule in rules]

    def window(
        self, text: str, start: int, end: int, sentences: Optional[SentenceIndex] = None
    ) -> Tuple[int, int]:
        """目標字前後各 window_words 個字，不跨句"""
        if sentences is None:
            sentences = SentenceIndex(text)
        left_bound, right_bound = sentences.bounds(start, end)
        n = self.window_words

        scan_from = max(left_bound, start - n * _MAX_CHARS_PER_WORD)
        left_words = list(WORD_PATTERN.finditer(text, scan_from, start))
        left = left_words[-n].start() if len(left_words) >= n else scan_from

        right = right_bound
        for i, m in enumerate(WORD_PATTERN.finditer(text, end, right_bound)):
            if i == n - 1:
                right = m.end()
                break
        return left, right

    @staticmethod
    def looks_like_code(text: str, start: int, end: int) -> bool:
        before = text[max(0, start - 1):start]
        after = text[end:end + 3]
        return bool(_CODE_PREFIX.search(before) or _CODE_SUFFIX.search(after))

    def _select_rule(
        self, text: str, start: int, end: int, sentences: Optional[SentenceIndex] = None
    ) -> Optional[ContextualWord]:
        rules = self._rules.get(text[start:end].lower())
        if not rules:
            return None
        if self.looks_like_code(text, start, end):
            return None

        w_start, w_end = self.window(text, start, end, sentences)
        context = text[w_start:w_end]

        for rule in rules:
            if any(p.search(context) for p in rule.exclude):
                continue
            if rule.include and not any(p.search(context) for p in rule.include):
                continue
            return rule.entry
        return None

    def resolve(
        self, text: str, start: int, end: int, sentences: Optional[SentenceIndex] = None
    ) -> Optional[str]:
        """
        判斷 text[start:end] 是否應替換

        Args:
            sentences: 同一段文字重複查詢時傳入預先建立的 SentenceIndex

        Returns:
            大小寫調整後的替換字；不替換時回傳 None
        """
        entry = self._select_rule(text, start, end, sentences)
        if entry is None or entry.keeps_original:
            return None
        return match_case(text[start:end], entry.replacement)

    def find_matches(self, text: str, skip: Sequence[Tuple[int, int]] | None = None) -> List[ContextualMatch]:
        """掃描全文，回傳所有應替換的上下文敏感詞"""
        skip_spans = list(skip) if skip is not None else protected_spans(text)
        sentences = SentenceIndex(text)
        matches: List[ContextualMatch] = []
        for m in WORD_PATTERN.finditer(text):
            original = m.group(0)
            if original.lower() not in self._rules or in_spans(m.start(), m.end(), skip_spans):
                continue
            entry = self._select_rule(text, m.start(), m.end(), sentences)
            if entry is None or entry.keeps_original:
                continue
            replacement = match_case(original, entry.replacement)
            if replacement != original:
                matches.append(ContextualMatch(m.start(), m.end(), original, replacement, entry))
        return matches
