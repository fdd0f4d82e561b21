"""
引號正規化

- STRAIGHT (預設): 彎引號 → 直引號，en/em dash → 連字號
- CURLY: 直引號 → 彎引號 (依前一字元判斷開/關)，撇號 → ’

每個被替換的字元算一次 quote change。
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple


class QuoteStyle(str, Enum):
    STRAIGHT = "straight"
    CURLY = "curly"


SMART_TO_STRAIGHT: Dict[str, str] = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    "–": "-",
    "—": "-",
}

_OPENING_CONTEXT = set(" \t\n\r([{<—–-/")


def _to_straight(text: str) -> Tuple[str, int]:
    changes = 0
    out: List[str] = []
    for ch in text:
        mapped = SMART_TO_STRAIGHT.get(ch)
        if mapped is None:
            out.append(ch)
        else:
            out.append(mapped)
            changes += 1
    return "".join(out), changes


def _to_curly(text: str) -> Tuple[str, int]:
    changes = 0
    out: List[str] = []
    for i, ch in enumerate(text):
        if ch not in ('"', "'"):
            out.append(ch)
            continue

        prev = text[i - 1] if i > 0 else ""
        nxt = text[i + 1] if i + 1 < len(text) else ""
        opening = (prev == "" or prev in _OPENING_CONTEXT) and nxt != "" and not nxt.isspace()

        if ch == '"':
            out.append("“" if opening else "”")
        else:
            out.append("‘" if opening else "’")
        changes += 1
    return "".join(out), changes


def normalise_quotes(text: str, style: QuoteStyle | str = QuoteStyle.STRAIGHT) -> Tuple[str, int]:
    """
    正規化引號

    Returns:
        (處理後文本, 替換字元數)
    """
    if not text:
        return text, 0
    if QuoteStyle(style) is QuoteStyle.CURLY:
        return _to_curly(text)
    return _to_straight(text)
