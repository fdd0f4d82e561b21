"""
文字處理小工具：大小寫保留、URL 區間、句子邊界
"""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from typing import List, Tuple

WORD_PATTERN = re.compile(r"(?<![A-Za-z0-9_])[A-Za-z]+(?![A-Za-z0-9_])")
URL_PATTERN = re.compile(r"(?i)(?:https?://|ftp://|www\.)\S+")
EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
SENTENCE_BOUNDARY = re.compile(r"[.!?]+(?=\s|$)|\n\s*\n")

Span = Tuple[int, int]


def match_case(template: str, replacement: str) -> str:
    """
    依原字的大小寫樣式調整替換字

    - 全大寫且長度 > 1 → 全大寫 (COLOR → COLOUR)
    - 首字大寫 → 首字大寫 (Color → Colour)
    - 其他 → 小寫
    """
    if not template or not replacement:
        return replacement
    if len(template) > 1 and template.isupper():
        return replacement.upper()
    if template[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement.lower()


def protected_spans(text: str) -> List[Span]:
    """URL 與 e-mail 的區間 (start, end)，依 start 排序"""
    spans = [m.span() for m in URL_PATTERN.finditer(text)]
    spans.extend(m.span() for m in EMAIL_PATTERN.finditer(text))
    spans.sort()
    return spans


def in_spans(start: int, end: int, spans: List[Span]) -> bool:
    for s, e in spans:
        if s >= end:
            break
        if max(start, s) < min(end, e):
            return True
    return False


class SentenceIndex:
    """
    全文句子邊界索引

    建立時掃描一次，之後每次查詢都是二分搜尋，
    同一段文字內有大量上下文敏感詞時不會重複掃描。
    """

    def __init__(self, text: str) -> None:
        self.length = len(text)
        self._starts: List[int] = []
        self._ends: List[int] = []
        for m in SENTENCE_BOUNDARY.finditer(text):
            self._starts.append(m.start())
            self._ends.append(m.end())

    def __len__(self) -> int:
        return len(self._starts)

    def bounds(self, start: int, end: int) -> Span:
        """回傳包含 [start, end) 的句子區間"""
        i = bisect_right(self._ends, start)
        left = self._ends[i - 1] if i else 0
        j = bisect_left(self._starts, end)
        right = self._starts[j] if j < len(self._starts) else self.length
        return left, right


def sentence_bounds(text: str, start: int, end: int) -> Span:
    """單次查詢用；同一段文字要查多次時請建立 SentenceIndex"""
    return SentenceIndex(text).bounds(start, end)


def count_words(text: str) -> int:
    return sum(1 for _ in WORD_PATTERN.finditer(text))


def lower_same_length(text: str) -> str:
    """轉小寫且保證長度不變 (index 可直接對回原文)"""
    if text.isascii():
        return text.lower()
    return "".join(ch if len(ch.lower()) != 1 else ch.lower() for ch in text)
