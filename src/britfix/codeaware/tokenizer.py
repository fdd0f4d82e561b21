"""
程式碼感知的切分器

以有限狀態機 (CODE / IN_STRING / IN_LINE_COMMENT / IN_BLOCK_COMMENT) 掃描原始碼，
輸出完整覆蓋輸入、互不重疊、依序排列的 Span；每個 Span 的 content 為原文切片。

未關閉的字串或區塊註解於檔尾隱式結束。
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from britfix.core.types import Span, SpanKind
from britfix.utils.logger import get_logger

from .languages import LanguageProfile, resolve_profile
from .markdown import tokenize_markdown

logger = get_logger("codeaware.tokenizer")

_CHAR_LITERAL = re.compile(
    r"'(?:\\(?:x[0-9A-Fa-f]{1,4}|u\{?[0-9A-Fa-f]{1,6}\}?|[0-7]{1,3}|[^\n])|[^\\'\n])'"
)
_TRIPLE_QUOTES = ('"""', "'''")


class _State(Enum):
    CODE = "code"
    IN_STRING = "in_string"
    IN_LINE_COMMENT = "in_line_comment"
    IN_BLOCK_COMMENT = "in_block_comment"


class Tokenizer:
    """
    使用方式:
        tokenizer = Tokenizer(get_profile("python"))
        spans = tokenizer.tokenize(source)
        assert "".join(s.content for s in spans) == source
    """

    def __init__(self, profile: LanguageProfile) -> None:
        self.profile = profile
        openers: List[Tuple[str, _State, str]] = []
        for open_, close in profile.block_comments:
            openers.append((open_, _State.IN_BLOCK_COMMENT, close))
        for marker in profile.line_comments:
            openers.append((marker, _State.IN_LINE_COMMENT, ""))
        for delim in (*profile.strings, *profile.raw_strings):
            openers.append((delim, _State.IN_STRING, delim))
        # 長的先比對 (Lua 的 --[[ 先於 --)
        self._openers: Sequence[Tuple[str, _State, str]] = sorted(
            openers, key=lambda o: len(o[0]), reverse=True
        )

    def _comment_allowed(self, text: str, i: int) -> bool:
        return not self.profile.comment_needs_space or i == 0 or text[i - 1].isspace()

    def _is_docstring(self, text: str, i: int) -> bool:
        line_start = text.rfind("\n", 0, i) + 1
        return text[line_start:i].strip() == ""

    def _match_opener(self, text: str, i: int) -> Optional[Tuple[str, _State, str]]:
        for opener, state, closer in self._openers:
            if not text.startswith(opener, i):
                continue
            if state is _State.IN_LINE_COMMENT and not self._comment_allowed(text, i):
                continue
            return opener, state, closer
        return None

    def tokenize(self, text: str) -> List[Span]:
        if self.profile.markdown:
            return tokenize_markdown(text)

        spans: List[Span] = []
        n = len(text)
        state = _State.CODE
        kind = SpanKind.CODE
        opener = closer = ""
        escapes = True
        multiline = False
        token_start = 0
        i = 0

        def emit(end: int) -> None:
            if end > token_start:
                spans.append(Span(token_start, end, kind, text[token_start:end], opener, closer))

        while i < n:
            ch = text[i]

            if state is _State.CODE:
                if self.profile.char_literals and ch == "'":
                    m = _CHAR_LITERAL.match(text, i)
                    if m:
                        emit(i)
                        spans.append(Span(i, m.end(), SpanKind.STRING, m.group(), "'", "'"))
                        i = token_start = m.end()
                        continue
                    # lifetime ('a) 或識別字中的撇號：一般程式碼
                    i += 1
                    continue

                triple = None
                if self.profile.triple_quotes:
                    triple = next((q for q in _TRIPLE_QUOTES if text.startswith(q, i)), None)
                if triple is not None:
                    hit: Optional[Tuple[str, _State, str]] = (triple, _State.IN_STRING, triple)
                else:
                    hit = self._match_opener(text, i)
                if hit is None:
                    i += 1
                    continue

                emit(i)
                token_start = i
                opener, state, closer = hit
                if state is _State.IN_STRING:
                    kind = SpanKind.STRING
                    escapes = opener not in self.profile.raw_strings
                    multiline = opener in self.profile.multiline_strings
                    if triple is not None:
                        multiline = True
                        if self._is_docstring(text, i):
                            kind = SpanKind.BLOCK_COMMENT
                elif state is _State.IN_LINE_COMMENT:
                    kind = SpanKind.LINE_COMMENT
                else:
                    kind = SpanKind.BLOCK_COMMENT
                i += len(opener)
                continue

            if state is _State.IN_STRING:
                if ch == "\\" and escapes:
                    i += 2
                    continue
                if text.startswith(closer, i):
                    i += len(closer)
                elif ch == "\n" and not multiline:
                    # 單行字串未關閉：在換行前隱式結束
                    pass
                else:
                    i += 1
                    continue
            elif state is _State.IN_LINE_COMMENT:
                if ch != "\n":
                    i += 1
                    continue
            else:
                if not text.startswith(closer, i):
                    i += 1
                    continue
                i += len(closer)

            emit(i)
            state, kind, opener, closer = _State.CODE, SpanKind.CODE, "", ""
            token_start = i

        if state is not _State.CODE and token_start < n:
            logger.debug(f"{state.value} 未關閉，於檔尾結束 (offset {token_start})")
        emit(n)
        return spans


def tokenize(text: str, language: Optional[str] = None) -> List[Span]:
    """
    切分原始碼

    Args:
        text: 原始碼
        language: 副檔名 / 檔名 / 語言名稱；None 或無法辨識時自動偵測

    Returns:
        依序排列、完整覆蓋輸入的 Span 清單 (content 為原文切片)
    """
    profile = resolve_profile(text, language)
    return Tokenizer(profile).tokenize(text)
