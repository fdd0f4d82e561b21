"""
單位偵測器

掃描流程:
1. 找出數字 token (整數、小數、千分位、分數、帶分數、英文數字)
2. 向後最多 maxNumberDistance 個字內尋找單位片語 (最長優先，最多 3 個字)
3. 計算信心分數；低於 minConfidence 者丟棄
4. 慣用語 (Aho-Corasick) 與 excludePatterns 命中候選區間者丟棄

偵測失敗只會「不匹配」，永遠不拋例外。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

import Levenshtein

from britfix.utils.aho_corasick import AhoCorasick
from britfix.utils.logger import get_logger
from britfix.utils.text import in_spans, lower_same_length, protected_spans

from .config import UnitConfig
from .rules import (
    COMMON_RANGES,
    IDIOMS,
    MEASUREMENT_CONTEXT,
    TEMPERATURE_CONTEXT,
    UnitDefinition,
    UnitType,
    build_alias_index,
    fuzzy_targets,
)

logger = get_logger("units.detector")

CONTEXT_WINDOW = 50
MAX_PHRASE_TOKENS = 3

BASE_CONFIDENCE: Dict[str, float] = {
    "symbol": 0.95,
    "name": 0.9,
    "abbr": 0.85,
    "ambiguous": 0.8,
    "fuzzy": 0.6,
}
COMPOUND_CONFIDENCE = 0.85
WRITTEN_NUMBER_CONFIDENCE = 0.8
CONTEXT_BONUS = 0.1
ADJACENCY_BONUS = 0.1
RANGE_BONUS = 0.05
EXTREME_VALUE_PENALTY = 0.2
DISTANCE_PENALTY = 0.15

_NUMBER = re.compile(
    r"(?<![\w.,/])(?P<neg>-(?=\.?\d))?"
    r"(?:(?P<whole>\d+)[ \t]+(?P<fnum>\d+)/(?P<fden>\d+)"
    r"|(?P<num>\d+)/(?P<den>\d+)"
    r"|(?P<dec>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+))"
    r"(?![\d/]|[.,]\d)"
)

_UNITS_WORDS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
    "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
}
_TENS_WORDS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
_MAGNITUDE_WORDS = {"hundred": 100, "thousand": 1000}

_WRITTEN = re.compile(
    r"(?<![\w-])(?:"
    r"(?P<mag_lead>a|one)\s+(?P<mag>hundred|thousand)"
    rf"|(?P<tens>{'|'.join(_TENS_WORDS)})(?:-(?P<unit>{'|'.join(w for w in _UNITS_WORDS if _UNITS_WORDS[w] < 10 and w != 'zero')}))?"
    rf"|(?P<simple>{'|'.join(sorted(_UNITS_WORDS, key=len, reverse=True))})"
    r")(?!\w)",
    re.IGNORECASE,
)

# 數字之後的 token：° 符號單位、字詞 (可帶 ² / 2 / 結尾句點)、其他單一字元
_TAIL = re.compile(
    r"[ \t]*(?:(?P<deg>°[ \t]?[A-Za-z]+)|(?P<word>[A-Za-z]+(?:²|2(?!\d))?\.?)|(?P<other>\S))"
)
_RANGE_BEFORE = re.compile(r"\d\s*(?:-|–|to)\s*$")
_CURRENCY_BEFORE = re.compile(r"[$£€#]\s*$")
# 科學記號的指數 (1e-5) 不是獨立的數字
_EXPONENT_BEFORE = re.compile(r"\d\.?[eE][+-]?$")

# 與單位名稱只差一個字母的常見英文字
_FUZZY_STOPWORDS = frozenset({
    "mills", "miler", "milers", "mikes", "mites", "miley", "inched", "incher", "ounced", "pounder",
    "tonne", "tonnes", "tones", "toned", "yarns", "gallop", "quartz", "quark", "pinto",
})

# 數字與單位之間允許出現的修飾字 (12 more feet、5 extra pounds)
_FILLER_WORDS = frozenset({
    "more", "less", "extra", "additional", "whole", "full", "entire", "nearly", "almost", "about",
    "roughly", "approximately", "over", "under", "odd", "short", "long", "solid", "good", "us", "imperial",
})


@dataclass(frozen=True)
class UnitMatch:
    """
    一次偵測結果 (每次呼叫產生、用完即丟)

    - start/value_end: 數值在原文中的區間
    - unit_start/end: 單位在原文中的區間
    - intervening: 數值與單位之間的字數
    """

    value: float
    raw_value: str
    raw_unit: str
    unit_type: UnitType
    confidence: float
    start: int
    value_end: int
    unit_start: int
    end: int
    definition: UnitDefinition
    is_compound: bool = False
    intervening: int = 0

    @property
    def position(self) -> int:
        return self.start


@dataclass
class _Token:
    start: int
    end: int
    text: str
    kind: str

    @property
    def norm(self) -> str:
        return re.sub(r"\s+", "", self.text).lower().rstrip(".") if self.kind == "deg" else self.text.lower().rstrip(".")


def _parse_number(m: re.Match) -> Optional[float]:
    try:
        if m.group("whole") is not None:
            den = int(m.group("fden"))
            if den == 0:
                return None
            value = int(m.group("whole")) + int(m.group("fnum")) / den
        elif m.group("num") is not None:
            den = int(m.group("den"))
            if den == 0:
                return None
            value = int(m.group("num")) / den
        else:
            value = float(m.group("dec").replace(",", ""))
    except ValueError:
        return None
    return -value if m.group("neg") else value


def _parse_written(m: re.Match) -> float:
    if m.group("mag"):
        return float(_MAGNITUDE_WORDS[m.group("mag").lower()])
    if m.group("tens"):
        value = _TENS_WORDS[m.group("tens").lower()]
        if m.group("unit"):
            value += _UNITS_WORDS[m.group("unit").lower()]
        return float(value)
    return float(_UNITS_WORDS[m.group("simple").lower()])


class UnitDetector:
    """
    單位偵測器

    使用方式:
        detector = UnitDetector(UnitConfig())
        matches = detector.detect("The room is 12 feet wide")
    """

    def __init__(self, config: Optional[UnitConfig] = None) -> None:
        self.config = config or UnitConfig()
        self._aliases = build_alias_index()
        self._fuzzy_targets = fuzzy_targets()
        self._idioms: AhoCorasick[str] = AhoCorasick.from_items((idiom, idiom) for idiom in IDIOMS)
        self._excludes: List[Pattern[str]] = []
        for pattern in self.config.exclude_patterns:
            try:
                self._excludes.append(re.compile(pattern, re.IGNORECASE))
            except re.error as exc:
                logger.warning(f"略過無效的 excludePattern {pattern!r}: {exc}")
        self._measurement_re = re.compile(r"\b(?:%s)\b" % "|".join(MEASUREMENT_CONTEXT), re.IGNORECASE)
        self._temperature_re = re.compile(r"\b(?:%s)\b" % "|".join(TEMPERATURE_CONTEXT), re.IGNORECASE)

    # ------------------------------------------------------------------
    # 數字掃描
    # ------------------------------------------------------------------

    def _numbers(self, text: str) -> List[Tuple[int, int, float, bool]]:
        """(start, end, value, is_written)，依 start 排序且不重疊"""
        found = []
        for m in _NUMBER.finditer(text):
            value = _parse_number(m)
            if value is not None:
                found.append((m.start(), m.end(), value, False))
        if self.config.detection.detect_written_numbers:
            for m in _WRITTEN.finditer(text):
                found.append((m.start(), m.end(), _parse_written(m), True))
        found.sort(key=lambda n: (n[0], -(n[1] - n[0])))

        result: List[Tuple[int, int, float, bool]] = []
        last_end = -1
        for item in found:
            if item[0] >= last_end:
                result.append(item)
                last_end = item[1]
        return result

    def _tail_tokens(self, text: str, pos: int, limit: int) -> List[_Token]:
        tokens: List[_Token] = []
        while len(tokens) < limit:
            m = _TAIL.match(text, pos)
            if m is None:
                break
            kind = m.lastgroup or "other"
            tokens.append(_Token(m.start(kind), m.end(kind), m.group(kind), kind))
            pos = m.end()
            if kind == "other":
                break
        return tokens

    # ------------------------------------------------------------------
    # 單位比對
    # ------------------------------------------------------------------

    def _lookup_phrase(self, tokens: List[_Token]) -> Optional[Tuple[UnitDefinition, str]]:
        phrase = " ".join(t.norm for t in tokens)
        hit = self._aliases.get(phrase)
        if hit is not None:
            return hit
        if len(tokens) == 1 and tokens[0].kind == "word":
            return self._fuzzy_lookup(tokens[0].norm)
        return None

    def _fuzzy_lookup(self, token: str) -> Optional[Tuple[UnitDefinition, str]]:
        if len(token) < 5 or token in _FUZZY_STOPWORDS:
            return None
        for target in self._fuzzy_targets:
            if target[:2] == token[:2] and Levenshtein.distance(token, target) <= 1:
                definition, _ = self._aliases[target]
                return definition, "fuzzy"
        return None

    def _match_unit(
        self, tokens: List[_Token], max_distance: int
    ) -> Optional[Tuple[int, int, UnitDefinition, str]]:
        """回傳 (單位起始 token index, 單位 token 數, 定義, 類別)"""
        for i in range(min(max_distance, len(tokens) - 1) + 1):
            if tokens[i].kind == "other":
                return None
            for length in range(MAX_PHRASE_TOKENS, 0, -1):
                window = tokens[i:i + length]
                if len(window) < length or any(t.kind == "other" for t in window):
                    continue
                hit = self._lookup_phrase(window)
                if hit is not None:
                    return i, length, hit[0], hit[1]
            if tokens[i].norm not in _FILLER_WORDS:
                return None
        return None

    def _compound_unit(self, text: str, end: int) -> Optional[Tuple[_Token, UnitDefinition, str]]:
        """6-foot 形式：數字後緊接連字號與單位"""
        if not self.config.detection.detect_compound_units or text[end:end + 1] != "-":
            return None
        m = re.match(r"[A-Za-z]+", text[end + 1:])
        if m is None:
            return None
        token = _Token(end + 1, end + 1 + m.end(), m.group(0), "word")
        if text[token.end:token.end + 1].isalnum():
            return None
        hit = self._aliases.get(token.norm)
        if hit is None or hit[1] not in ("name", "abbr"):
            return None
        return token, hit[0], hit[1]

    # ------------------------------------------------------------------
    # 信心分數
    # ------------------------------------------------------------------

    def _confidence(
        self,
        text: str,
        start: int,
        end: int,
        value: float,
        definition: UnitDefinition,
        group: str,
        *,
        adjacent: bool,
        compound: bool,
        written: bool,
        intervening: int,
    ) -> float:
        confidence = COMPOUND_CONFIDENCE if compound else BASE_CONFIDENCE[group]
        if written:
            confidence = min(confidence, WRITTEN_NUMBER_CONFIDENCE)

        context = text[max(0, start - CONTEXT_WINDOW):end + CONTEXT_WINDOW]
        if self._measurement_re.search(context):
            confidence += CONTEXT_BONUS
        if adjacent:
            confidence += ADJACENCY_BONUS

        magnitude = abs(value)
        if magnitude > 10000 or 0 < magnitude < 0.001:
            confidence -= EXTREME_VALUE_PENALTY
        low, high = COMMON_RANGES[definition.unit_type]
        if low <= value <= high:
            confidence += RANGE_BONUS

        confidence -= DISTANCE_PENALTY * intervening
        return max(0.0, min(1.0, confidence))

    def _passes_ambiguity_gate(
        self, text: str, start: int, end: int, definition: UnitDefinition, adjacent: bool, followed_by_break: bool
    ) -> bool:
        if definition.unit_type is UnitType.TEMPERATURE:
            context = text[max(0, start - CONTEXT_WINDOW):end + CONTEXT_WINDOW]
            return bool(self._temperature_re.search(context))
        return adjacent or followed_by_break

    # ------------------------------------------------------------------
    # 排除
    # ------------------------------------------------------------------

    def _excluded(self, text: str, start: int, end: int, idiom_spans: List[Tuple[int, int, str]]) -> bool:
        for s, e, _ in idiom_spans:
            if max(s, start) < min(e, end):
                return True
        w_start = max(0, start - CONTEXT_WINDOW)
        window = text[w_start:end + CONTEXT_WINDOW]
        for pattern in self._excludes:
            for m in pattern.finditer(window):
                if max(w_start + m.start(), start) < min(w_start + m.end(), end):
                    return True
        return False

    # ------------------------------------------------------------------
    # 對外 API
    # ------------------------------------------------------------------

    def detect(self, text: str) -> List[UnitMatch]:
        if not text:
            return []

        detection = self.config.detection
        max_distance = detection.max_number_distance
        skip = protected_spans(text)
        idiom_spans = self._idioms.find_spans(lower_same_length(text), whole_words=True)

        matches: List[UnitMatch] = []
        for start, value_end, value, written in self._numbers(text):
            if in_spans(start, value_end, skip):
                continue
            prefix = text[max(0, start - 12):start]
            if (
                _RANGE_BEFORE.search(prefix)
                or _CURRENCY_BEFORE.search(prefix)
                or _EXPONENT_BEFORE.search(prefix)
            ):
                continue

            match = self._build_match(text, start, value_end, value, written, max_distance)
            if match is None:
                continue
            if not self.config.is_type_enabled(match.unit_type):
                continue
            if match.confidence < detection.min_confidence:
                logger.debug(f"  [Unit] 信心不足 {match.confidence:.2f}: '{text[match.start:match.end]}'")
                continue
            if self._excluded(text, match.start, match.end, idiom_spans):
                logger.debug(f"  [Unit] 慣用語排除: '{text[match.start:match.end]}'")
                continue
            matches.append(match)
        return matches

    def _build_match(
        self, text: str, start: int, value_end: int, value: float, written: bool, max_distance: int
    ) -> Optional[UnitMatch]:
        raw_value = text[start:value_end]

        compound = self._compound_unit(text, value_end)
        if compound is not None:
            token, definition, group = compound
            confidence = self._confidence(
                text, start, token.end, value, definition, group,
                adjacent=False, compound=True, written=written, intervening=0,
            )
            return UnitMatch(
                value=value,
                raw_value=raw_value,
                raw_unit=token.text,
                unit_type=definition.unit_type,
                confidence=confidence,
                start=start,
                value_end=value_end,
                unit_start=token.start,
                end=token.end,
                definition=definition,
                is_compound=True,
            )

        tokens = self._tail_tokens(text, value_end, max_distance + MAX_PHRASE_TOKENS + 1)
        if not tokens:
            return None
        hit = self._match_unit(tokens, max_distance)
        if hit is None:
            return None

        index, length, definition, group = hit
        unit_tokens = tokens[index:index + length]
        unit_start = unit_tokens[0].start
        unit_end = unit_tokens[-1].end
        raw_unit = text[unit_start:unit_end]
        # 句尾句點不屬於單位
        if raw_unit.endswith(".") and unit_tokens[-1].kind == "word":
            unit_end -= 1
            raw_unit = raw_unit[:-1]

        adjacent = index == 0 and unit_start == value_end and not written
        following = tokens[index + length] if index + length < len(tokens) else None
        followed_by_break = (
            following is None
            or (following.kind == "other" and not following.text.isalnum())
            or raw_unit != text[unit_start:unit_tokens[-1].end]
        )

        if group == "ambiguous" and not self._passes_ambiguity_gate(
            text, start, unit_end, definition, adjacent, followed_by_break
        ):
            return None

        confidence = self._confidence(
            text, start, unit_end, value, definition, group,
            adjacent=adjacent, compound=False, written=written, intervening=index,
        )
        return UnitMatch(
            value=value,
            raw_value=raw_value,
            raw_unit=raw_unit,
            unit_type=definition.unit_type,
            confidence=confidence,
            start=start,
            value_end=value_end,
            unit_start=unit_start,
            end=unit_end,
            definition=definition,
            intervening=index,
        )
