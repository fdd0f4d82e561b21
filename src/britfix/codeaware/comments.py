"""
註解 / 文字區間萃取
"""

from __future__ import annotations

from typing import List, Optional

from britfix.core.types import Span, SpanKind

from .languages import resolve_profile
from .tokenizer import Tokenizer


def strip_delimiters(span: Span) -> str:
    """去掉註解符號並 strip；Markdown 文字區間只做 strip"""
    raw = span.content
    if span.opener and raw.startswith(span.opener):
        raw = raw[len(span.opener):]
    if span.closer and raw.endswith(span.closer) and len(span.content) >= len(span.opener) + len(span.closer):
        raw = raw[: len(raw) - len(span.closer)]
    return raw.strip()


def extract_comments(code: str, language_hint: Optional[str] = None) -> List[Span]:
    """
    萃取可轉換的區間 (行註解、區塊註解、Markdown 文字)

    回傳的 Span 保留原文中的 start / end，content 改為去除符號並 strip 後的內文。
    內文為空的區間 (如單獨的 "//") 不回傳。

    Args:
        code: 原始碼
        language_hint: 副檔名 / 檔名 / 語言名稱，None 時自動偵測
    """
    profile = resolve_profile(code, language_hint)
    extracted: List[Span] = []
    for span in Tokenizer(profile).tokenize(code):
        if not span.kind.convertible:
            continue
        content = strip_delimiters(span)
        if not content:
            continue
        extracted.append(Span(span.start, span.end, span.kind, content, span.opener, span.closer))
    return extracted


def is_comment(span: Span) -> bool:
    return span.kind in (SpanKind.LINE_COMMENT, SpanKind.BLOCK_COMMENT)
