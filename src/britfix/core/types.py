"""
共用資料型別
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum


class Direction(str, Enum):
    """字典方向，明確標記於字典上，不從內容推斷"""

    AMERICAN_TO_BRITISH = "american_to_british"
    BRITISH_TO_AMERICAN = "british_to_american"

    def reversed(self) -> "Direction":
        if self is Direction.AMERICAN_TO_BRITISH:
            return Direction.BRITISH_TO_AMERICAN
        return Direction.AMERICAN_TO_BRITISH


class SpanKind(str, Enum):
    CODE = "code"
    STRING = "string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    PROSE = "prose"
    FENCE = "fence"

    @property
    def convertible(self) -> bool:
        return self in (SpanKind.LINE_COMMENT, SpanKind.BLOCK_COMMENT, SpanKind.PROSE)


@dataclass(frozen=True)
class Span:
    """
    文件中的一段區間

    - start / end: 原文中的字元 index（end 不含）
    - content:
        tokenize() 回傳時為原文切片 text[start:end]；
        extract_comments() 回傳時為去除註解符號並 strip 後的內文
    - opener / closer: 註解符號 (如 "//"、"/*" / "*/")，回填時找不到 content 的備援
    """

    start: int
    end: int
    kind: SpanKind
    content: str
    opener: str = ""
    closer: str = ""

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class ChangeStats:
    """轉換統計，可用 + 累加"""

    total_words: int = 0
    spelling_changes: int = 0
    unit_conversions: int = 0
    quote_changes: int = 0

    def __add__(self, other: "ChangeStats") -> "ChangeStats":
        if not isinstance(other, ChangeStats):
            return NotImplemented
        return ChangeStats(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    def __iadd__(self, other: "ChangeStats") -> "ChangeStats":
        if not isinstance(other, ChangeStats):
            return NotImplemented
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
        return self

    @property
    def total_changes(self) -> int:
        return self.spelling_changes + self.unit_conversions + self.quote_changes

    def to_dict(self) -> dict[str, int]:
        return {
            "totalWords": self.total_words,
            "spellingChanges": self.spelling_changes,
            "unitConversions": self.unit_conversions,
            "quoteChanges": self.quote_changes,
        }


@dataclass(frozen=True)
class ConversionResult:
    text: str
    stats: ChangeStats = field(default_factory=ChangeStats)

    @property
    def changed(self) -> bool:
        return self.stats.total_changes > 0
