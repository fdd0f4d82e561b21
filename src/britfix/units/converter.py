"""
單位換算與數值格式化
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from britfix.utils.logger import get_logger

from .config import UnitConfig
from .detector import UnitMatch
from .rules import ConversionRule, UnitType, resolve_metric_unit, select_rule

logger = get_logger("units.converter")


@dataclass(frozen=True)
class ConvertedValue:
    value: float
    number: str
    unit: str
    unit_type: UnitType

    def render(self, *, space: bool = True, compound: bool = False) -> str:
        if compound:
            return f"{self.number}-{self.unit}"
        if self.unit == "°C":
            return f"{self.number}{self.unit}"
        return f"{self.number} {self.unit}" if space else f"{self.number}{self.unit}"


def _round_half_away(value: float, places: int = 0) -> float:
    scale = 10 ** places
    return math.copysign(math.floor(abs(value) * scale + 0.5) / scale, value)


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) * 5 / 9


class UnitConverter:
    """
    英制 → 公制換算

    - 溫度: (F - 32) × 5/9
    - 其他: 乘上定義中的係數換算到基準單位，再依門檻規則挑選顯示單位
    """

    def __init__(self, config: Optional[UnitConfig] = None) -> None:
        self.config = config or UnitConfig()

    def format_number(self, value: float, unit_type: UnitType) -> str:
        prefs = self.config.preferences
        precision = min(self.config.precision.for_type(unit_type), prefs.max_decimal_places)
        threshold = prefs.rounding_threshold

        if (prefs.prefer_whole_numbers and abs(value - _round_half_away(value)) < threshold) or precision == 0:
            text = f"{_round_half_away(value):.0f}"
        else:
            for places in range(precision):
                rounded = _round_half_away(value, places)
                if abs(value - rounded) < threshold / 10:
                    precision = places
                    value = rounded
                    break
            text = f"{value:.{precision}f}"
            if "." in text:
                text = text.rstrip("0").rstrip(".")

        # 避免 "-0"
        if text.startswith("-") and float(text) == 0:
            text = text[1:]
        return text

    def _rule_for(self, match: UnitMatch, base_value: float) -> ConversionRule:
        definition = match.definition
        mappings = self.config.custom_mappings
        for key in (match.raw_unit.lower(), definition.name, *definition.names):
            target = mappings.get(key)
            if target is None:
                continue
            resolved = resolve_metric_unit(target)
            if resolved is not None and resolved[0] is definition.unit_type:
                return resolved[1]
            logger.debug(f"customMappings[{key!r}] = {target!r} 與單位類別不符，忽略")
        return select_rule(definition.unit_type, base_value, definition.name)

    def convert(self, match: UnitMatch) -> ConvertedValue:
        definition = match.definition

        if definition.unit_type is UnitType.TEMPERATURE:
            celsius = fahrenheit_to_celsius(match.value)
            number = self.format_number(celsius, UnitType.TEMPERATURE)
            label = self.config.preferences.temperature_format
            return ConvertedValue(celsius, number, label, UnitType.TEMPERATURE)

        base_value = match.value * definition.factor
        rule = self._rule_for(match, base_value)
        display = base_value * rule.scale
        number = self.format_number(display, definition.unit_type)
        label = rule.label(single=number in ("1", "-1"), compound=match.is_compound)
        return ConvertedValue(display, number, label, definition.unit_type)

    def render(self, match: UnitMatch, converted: ConvertedValue) -> str:
        return converted.render(
            space=self.config.preferences.use_space_between_value_and_unit,
            compound=match.is_compound,
        )
