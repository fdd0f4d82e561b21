"""
單位轉換處理器：偵測 → 換算 → 回填原文
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from britfix.utils.logger import TimingContext, get_logger

from .config import UnitConfig
from .converter import UnitConverter
from .detector import UnitDetector, UnitMatch

logger = get_logger("units.processor")


@dataclass(frozen=True)
class UnitConversion:
    start: int
    end: int
    original: str
    replacement: str
    confidence: float
    match: UnitMatch


class UnitProcessor:
    """
    使用方式:
        processor = UnitProcessor()
        text, conversions = processor.process("The room is 12 feet wide")
        # text == "The room is 3.7 metres wide"
    """

    def __init__(self, config: Optional[UnitConfig] = None) -> None:
        self.config = config or UnitConfig()
        self.detector = UnitDetector(self.config)
        self.converter = UnitConverter(self.config)

    def _replacement_for(self, text: str, match: UnitMatch) -> str:
        converted = self.converter.convert(match)
        if match.intervening == 0:
            return self.converter.render(match, converted)
        # 保留數值與單位之間的字 (12 more feet → 3.7 more metres)
        return converted.number + text[match.value_end:match.unit_start] + converted.unit

    def find_conversions(self, text: str) -> List[UnitConversion]:
        conversions: List[UnitConversion] = []
        last_end = -1
        for match in self.detector.detect(text):
            if match.start < last_end:
                continue
            original = text[match.start:match.end]
            replacement = self._replacement_for(text, match)
            if replacement == original:
                continue
            conversions.append(
                UnitConversion(match.start, match.end, original, replacement, match.confidence, match)
            )
            last_end = match.end
        return conversions

    def process(self, text: str) -> Tuple[str, List[UnitConversion]]:
        """回傳 (轉換後文本, 轉換清單)；未啟用時原樣回傳"""
        if not text or not self.config.enabled:
            return text, []

        with TimingContext("UnitProcessor.process", logger, logging.DEBUG):
            conversions = self.find_conversions(text)
            if not conversions:
                return text, []

            parts: List[str] = []
            last = 0
            for conv in conversions:
                parts.append(text[last:conv.start])
                parts.append(conv.replacement)
                last = conv.end
                logger.debug(
                    f"  [Unit] '{conv.original}' -> '{conv.replacement}' (confidence={conv.confidence:.2f})"
                )
            parts.append(text[last:])
            return "".join(parts), conversions
