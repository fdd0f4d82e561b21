"""
區間回填

把轉換後的內文放回原文：先在原區間中找到舊內文以取得前後綴 (註解符號與空白)，
找不到時退回以 opener / closer 長度切割。所有編輯由後往前套用，
因此前面區間的 offset 不受後面區間長度變化影響。
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from britfix.core.errors import SpliceError
from britfix.core.types import Span

Edit = Tuple[Span, str]


def rebuild_span(raw: str, span: Span, new_content: str) -> str:
    """以新內文重建單一區間的原文"""
    skip = len(span.opener) if span.opener and raw.startswith(span.opener) else 0
    index = raw.find(span.content, skip) if span.content else -1
    if index >= 0:
        prefix = raw[:index]
        suffix = raw[index + len(span.content):]
    else:
        prefix_len = len(span.opener)
        suffix_len = len(span.closer) if span.closer and raw.endswith(span.closer) else 0
        if prefix_len + suffix_len > len(raw):
            raise SpliceError(
                f"區間 [{span.start}, {span.end}) 無法容納註解符號 {span.opener!r} / {span.closer!r}"
            )
        prefix = raw[:prefix_len]
        suffix = raw[len(raw) - suffix_len:] if suffix_len else ""
    return prefix + new_content + suffix


def _validate(text: str, edits: List[Edit]) -> None:
    previous_end = 0
    for span, _ in edits:
        if span.start < 0 or span.end > len(text) or span.start > span.end:
            raise SpliceError(f"區間 [{span.start}, {span.end}) 超出文件範圍 (長度 {len(text)})")
        if span.start < previous_end:
            raise SpliceError(f"區間 [{span.start}, {span.end}) 與前一個區間重疊或順序錯誤")
        previous_end = span.end


def splice(text: str, edits: Iterable[Edit]) -> str:
    """
    套用多個區間編輯

    Args:
        text: 原文
        edits: (原區間, 新內文)；區間必須依序排列且互不重疊

    Raises:
        SpliceError: 區間越界、重疊或順序錯誤
    """
    edits = list(edits)
    if not edits:
        return text
    _validate(text, edits)

    pieces: List[str] = []
    cursor = len(text)
    for span, new_content in reversed(edits):
        pieces.append(text[span.end:cursor])
        pieces.append(rebuild_span(text[span.start:span.end], span, new_content))
        cursor = span.start
    pieces.append(text[:cursor])
    return "".join(reversed(pieces))
