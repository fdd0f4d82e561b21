"""
拼寫替換器

以單一預編譯的字詞 regex 掃描文本，逐字查表：
- 上下文敏感詞 → 交給 ContextualWordDetector 判斷
- 其他字 → SpellingDictionary 整字查詢
- URL / e-mail 內的字一律不動

連字號複合字逐段處理 (color-coded → colour-coded)，
所有格 's 保留原樣 (color's → colour's)。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from britfix.utils.logger import get_logger
from britfix.utils.text import WORD_PATTERN, SentenceIndex, in_spans, protected_spans

from .contextual import ContextualWordDetector
from .store import SpellingDictionary

logger = get_logger("dictionary.replacer")


@dataclass(frozen=True)
class Replacement:
    start: int
    end: int
    original: str
    replacement: str
    kind: Literal["spelling", "contextual"]


class SpellingReplacer:
    def __init__(self, dictionary: SpellingDictionary, detector: ContextualWordDetector) -> None:
        self.detector = detector
        # 上下文敏感詞只走上下文路徑
        self.dictionary = dictionary.without(detector.supported_words())

    def find_replacements(self, text: str) -> List[Replacement]:
        skip = protected_spans(text)
        sentences: Optional[SentenceIndex] = None
        found: List[Replacement] = []
        for m in WORD_PATTERN.finditer(text):
            word = m.group(0)
            start, end = m.span()
            if in_spans(start, end, skip):
                continue

            if self.detector.is_contextual(word):
                if sentences is None:
                    sentences = SentenceIndex(text)
                british = self.detector.resolve(text, start, end, sentences)
                kind = "contextual"
            else:
                british = self.dictionary.lookup(word)
                kind = "spelling"

            if british is None or british == word:
                continue
            found.append(Replacement(start, end, word, british, kind))
        return found

    def replace(self, text: str) -> Tuple[str, List[Replacement]]:
        """
        回傳 (替換後文本, 替換清單)

        替換清單的 start/end 為原文 index。
        """
        if not text:
            return text, []

        replacements = self.find_replacements(text)
        if not replacements:
            return text, []

        parts: List[str] = []
        last = 0
        for rep in replacements:
            parts.append(text[last:rep.start])
            parts.append(rep.replacement)
            last = rep.end
            logger.debug(f"  [{rep.kind}] '{rep.original}' -> '{rep.replacement}' @{rep.start}")
        parts.append(text[last:])
        return "".join(parts), replacements
