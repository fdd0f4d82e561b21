"""
Aho-Corasick 多模式字串匹配（無第三方依賴）

用途：
- 一次掃描找出所有慣用語（"cold feet", "go the extra mile" ...）出現位置
- 取代「每個慣用語一條 regex、每次呼叫重跑一遍」的作法

比對本身區分大小寫；需要忽略大小寫時，由呼叫端先把 pattern 與文本都轉小寫
（str.lower() 對 ASCII 不改變長度，index 可直接對回原文）。
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Generic, Iterable, Iterator, List, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class _Node(Generic[T]):
    next: Dict[str, int] = field(default_factory=dict)
    fail: int = 0
    out: List[Tuple[str, T]] = field(default_factory=list)


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class AhoCorasick(Generic[T]):
    def __init__(self) -> None:
        self._nodes: List[_Node[T]] = [_Node()]
        self._built = False
        self._size = 0

    @classmethod
    def from_items(cls, items: Iterable[Tuple[str, T]]) -> "AhoCorasick[T]":
        matcher: AhoCorasick[T] = cls()
        for word, value in items:
            matcher.add(word, value)
        matcher.build()
        return matcher

    def __len__(self) -> int:
        return self._size

    def add(self, word: str, value: T) -> None:
        if self._built:
            raise RuntimeError("AhoCorasick 已 build()，不可再 add()")
        if not word:
            return

        node = 0
        for ch in word:
            nxt = self._nodes[node].next.get(ch)
            if nxt is None:
                nxt = len(self._nodes)
                self._nodes[node].next[ch] = nxt
                self._nodes.append(_Node())
            node = nxt
        self._nodes[node].out.append((word, value))
        self._size += 1

    def build(self) -> None:
        if self._built:
            return

        queue: deque[int] = deque(self._nodes[0].next.values())
        while queue:
            r = queue.popleft()
            for ch, u in self._nodes[r].next.items():
                queue.append(u)

                v = self._nodes[r].fail
                while v != 0 and ch not in self._nodes[v].next:
                    v = self._nodes[v].fail
                target = self._nodes[v].next.get(ch, 0)
                self._nodes[u].fail = target if target != u else 0

                # fail link 的輸出也屬於這個狀態
                self._nodes[u].out.extend(self._nodes[self._nodes[u].fail].out)

        self._built = True

    def iter_matches(self, text: str, *, whole_words: bool = False) -> Iterator[Tuple[int, int, str, T]]:
        """
        逐一輸出 matches（依結束位置遞增）

        Args:
            text: 待搜尋文本
            whole_words: True 時只輸出前後皆為非字元邊界的 match

        Yields:
            (start, end, word, value)
            - start: match 起始 index（含）
            - end: match 結束 index（不含）
        """
        if not self._built:
            self.build()

        state = 0
        n = len(text)
        for i, ch in enumerate(text):
            while state != 0 and ch not in self._nodes[state].next:
                state = self._nodes[state].fail
            state = self._nodes[state].next.get(ch, 0)

            if not self._nodes[state].out:
                continue

            for word, value in self._nodes[state].out:
                start = i - len(word) + 1
                end = i + 1
                if start < 0:
                    continue
                if whole_words:
                    if start > 0 and _is_word_char(text[start - 1]):
                        continue
                    if end < n and _is_word_char(text[end]):
                        continue
                yield start, end, word, value

    def find_spans(self, text: str, *, whole_words: bool = False) -> List[Tuple[int, int, T]]:
        """
        回傳不重疊的 match 區間（leftmost-longest）

        同一起點取最長者；與已接受區間重疊者丟棄。
        """
        matches = sorted(
            self.iter_matches(text, whole_words=whole_words),
            key=lambda m: (m[0], -(m[1] - m[0])),
        )
        spans: List[Tuple[int, int, T]] = []
        last_end = -1
        for start, end, _word, value in matches:
            if start < last_end:
                continue
            spans.append((start, end, value))
            last_end = end
        return spans
