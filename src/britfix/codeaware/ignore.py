"""
britfix-ignore 指令

在註解中寫入以下指令可跳過轉換：

- britfix-ignore-file: 整個檔案不轉換
- britfix-ignore-next: 跳過下一個區間 (註解或 Markdown 段落)
- britfix-ignore-start / britfix-ignore-end: 跳過兩者之間的所有區間
- britfix-ignore / britfix-ignore-line: 跳過同一行的註解

含指令的註解本身永遠不轉換。
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import List, Sequence, Set

from britfix.core.types import Span
from britfix.utils.logger import get_logger

from .comments import is_comment

logger = get_logger("codeaware.ignore")

IGNORE_FILE = "britfix-ignore-file"
IGNORE_NEXT = "britfix-ignore-next"
IGNORE_START = "britfix-ignore-start"
IGNORE_END = "britfix-ignore-end"

_DIRECTIVE = re.compile(r"britfix-ignore(?:-(?P<mode>file|next|start|end|line))?(?![\w-])")


def _line_starts(text: str) -> List[int]:
    return [0] + [m.end() for m in re.finditer("\n", text)]


def _line_of(line_starts: List[int], offset: int) -> int:
    return bisect_right(line_starts, offset) - 1


def directives_in(content: str) -> Set[str]:
    """回傳內文中出現的指令 ("file" / "next" / "start" / "end" / "line")"""
    return {m.group("mode") or "line" for m in _DIRECTIVE.finditer(content)}


def filter_ignored(text: str, spans: Sequence[Span]) -> List[Span]:
    """
    依指令過濾可轉換區間

    Args:
        text: 原文 (用於計算行號)
        spans: extract_comments() 的結果

    Returns:
        應該轉換的區間
    """
    found = [(span, directives_in(span.content) if is_comment(span) else set()) for span in spans]
    if any("file" in modes for _, modes in found):
        logger.debug("britfix-ignore-file: 略過整個檔案")
        return []

    line_starts = _line_starts(text)
    ignored_lines = {
        _line_of(line_starts, span.start) for span, modes in found if "line" in modes
    }

    kept: List[Span] = []
    in_block = False
    skip_next = False
    for span, modes in found:
        if modes:
            if "start" in modes:
                in_block = True
            if "end" in modes:
                in_block = False
            if "next" in modes:
                skip_next = True
            continue
        if in_block:
            continue
        if ignored_lines and _line_of(line_starts, span.start) in ignored_lines:
            continue
        if skip_next:
            skip_next = False
            continue
        kept.append(span)
    return kept
