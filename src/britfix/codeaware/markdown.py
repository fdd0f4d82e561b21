"""
Markdown / 純文字切分

- 圍欄程式碼區塊 (``` 或 ~~~，至少三個，最多縮排三格) → FENCE
  以相同字元且長度不小於開頭的圍欄關閉；未關閉則延伸到檔尾
- 行內程式碼 (反引號數量需相同)、連結目標 ](...)、<autolink> → CODE
- HTML 註解 <!-- --> → BLOCK_COMMENT
- 其餘 → PROSE
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from britfix.core.types import Span, SpanKind

_FENCE_OPEN = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)$")
_FENCE_CLOSE = re.compile(r"^ {0,3}(?P<fence>`+|~+)[ \t]*$")
_BACKTICKS = re.compile(r"`+")
_LINK_DEST = re.compile(
    r"\]\((?P<dest><[^>\n]*>|[^()\s]*(?:\([^()\s]*\)[^()\s]*)*)(?:\s+(?:\"[^\"\n]*\"|'[^'\n]*'))?\)"
)
_AUTOLINK = re.compile(r"<(?:https?|ftp|mailto):[^>\s]+>|<[\w.+-]+@[\w-]+(?:\.[\w-]+)+>", re.IGNORECASE)
_HTML_COMMENT = re.compile(r"<!--.*?(?:-->|\Z)", re.DOTALL)

Interval = Tuple[int, int, SpanKind]


def fence_blocks(text: str) -> List[Tuple[int, int]]:
    """回傳所有圍欄區塊的 (start, end)，end 為關閉行的行尾 (不含換行)"""
    blocks: List[Tuple[int, int]] = []
    opened: Optional[Tuple[int, str, int]] = None
    pos = 0
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        if opened is None:
            m = _FENCE_OPEN.match(body)
            # 反引號圍欄的 info string 不可再含反引號
            if m and not (m.group("fence")[0] == "`" and "`" in m.group("info")):
                opened = (pos, m.group("fence")[0], len(m.group("fence")))
        else:
            m = _FENCE_CLOSE.match(body)
            if m and m.group("fence")[0] == opened[1] and len(m.group("fence")) >= opened[2]:
                blocks.append((opened[0], pos + len(body)))
                opened = None
        pos += len(line)
    if opened is not None:
        blocks.append((opened[0], len(text)))
    return blocks


def _inline_code(text: str, start: int, end: int) -> List[Interval]:
    found: List[Interval] = []
    pos = start
    while True:
        opening = _BACKTICKS.search(text, pos, end)
        if opening is None:
            break
        width = len(opening.group())
        closing = None
        for candidate in _BACKTICKS.finditer(text, opening.end(), end):
            if len(candidate.group()) == width:
                closing = candidate
                break
        if closing is None:
            # 沒有相同長度的關閉符號：當作一般文字
            pos = opening.end()
            continue
        found.append((opening.start(), closing.end(), SpanKind.CODE))
        pos = closing.end()
    return found


def _overlaps(start: int, end: int, taken: List[Interval]) -> bool:
    return any(start < t_end and t_start < end for t_start, t_end, _ in taken)


def _inline_regions(text: str, start: int, end: int) -> List[Interval]:
    regions = _inline_code(text, start, end)
    extra: List[Interval] = []
    for m in _HTML_COMMENT.finditer(text, start, end):
        extra.append((m.start(), m.end(), SpanKind.BLOCK_COMMENT))
    for m in _LINK_DEST.finditer(text, start, end):
        # 保留 "]" 於文字中，只把 (...) 當作程式碼
        extra.append((m.start() + 1, m.end(), SpanKind.CODE))
    for m in _AUTOLINK.finditer(text, start, end):
        extra.append((m.start(), m.end(), SpanKind.CODE))

    extra.sort(key=lambda r: (r[0], -r[1]))
    for region in extra:
        if not _overlaps(region[0], region[1], regions):
            regions.append(region)
    regions.sort()
    return regions


def _fill(text: str, start: int, end: int, regions: List[Interval], spans: List[Span]) -> None:
    cursor = start
    for r_start, r_end, kind in regions:
        if cursor < r_start:
            spans.append(Span(cursor, r_start, SpanKind.PROSE, text[cursor:r_start]))
        opener, closer = ("<!--", "-->") if kind is SpanKind.BLOCK_COMMENT else ("", "")
        spans.append(Span(r_start, r_end, kind, text[r_start:r_end], opener, closer))
        cursor = r_end
    if cursor < end:
        spans.append(Span(cursor, end, SpanKind.PROSE, text[cursor:end]))


def tokenize_markdown(text: str) -> List[Span]:
    """把 Markdown / 純文字切成完整且不重疊的區間序列"""
    spans: List[Span] = []
    cursor = 0
    for f_start, f_end in fence_blocks(text):
        if cursor < f_start:
            _fill(text, cursor, f_start, _inline_regions(text, cursor, f_start), spans)
        spans.append(Span(f_start, f_end, SpanKind.FENCE, text[f_start:f_end]))
        cursor = f_end
    if cursor < len(text):
        _fill(text, cursor, len(text), _inline_regions(text, cursor, len(text)), spans)
    return spans
