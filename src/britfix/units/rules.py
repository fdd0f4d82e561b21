"""
單位定義與轉換規則表

- UNIT_DEFINITIONS: 英制單位、別名、換算到基準單位 (m / kg / L / m²) 的係數
- CONVERSION_RULES: 依「換算後數值」門檻挑選最自然的公制單位
- IDIOMS: 字面上含單位字但不是度量的慣用語
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class UnitType(str, Enum):
    LENGTH = "length"
    MASS = "mass"
    VOLUME = "volume"
    TEMPERATURE = "temperature"
    AREA = "area"


@dataclass(frozen=True)
class UnitDefinition:
    """
    一個英制單位

    Attributes:
        name: 正規名稱 (foot, inch ...)
        unit_type: 類別
        factor: 換算到基準單位的乘數 (溫度不使用)
        names: 完整名稱別名 (feet, foot)
        abbreviations: 縮寫 (ft)
        ambiguous: 需要額外證據才接受的縮寫 (in, pt, mi, f)
    """

    name: str
    unit_type: UnitType
    factor: float
    names: Tuple[str, ...]
    abbreviations: Tuple[str, ...] = ()
    ambiguous: Tuple[str, ...] = ()
    symbols: Tuple[str, ...] = ()


UNIT_DEFINITIONS: Tuple[UnitDefinition, ...] = (
    # length
    UnitDefinition("foot", UnitType.LENGTH, 0.3048, ("feet", "foot"), ("ft",)),
    UnitDefinition("inch", UnitType.LENGTH, 0.0254, ("inches", "inch"), (), ("in",)),
    UnitDefinition("yard", UnitType.LENGTH, 0.9144, ("yards", "yard"), ("yd", "yds")),
    UnitDefinition("mile", UnitType.LENGTH, 1609.344, ("miles", "mile"), (), ("mi",)),
    # mass
    UnitDefinition("pound", UnitType.MASS, 0.45359237, ("pounds", "pound"), ("lbs", "lb")),
    UnitDefinition("ounce", UnitType.MASS, 0.028349523125, ("ounces", "ounce"), ("oz",)),
    UnitDefinition("ton", UnitType.MASS, 907.18474, ("tons", "ton")),
    # volume
    UnitDefinition("gallon", UnitType.VOLUME, 3.785411784, ("gallons", "gallon"), ("gal", "gals")),
    UnitDefinition("quart", UnitType.VOLUME, 0.946352946, ("quarts", "quart"), ("qt", "qts")),
    UnitDefinition("pint", UnitType.VOLUME, 0.473176473, ("pints", "pint"), (), ("pt",)),
    UnitDefinition(
        "fluid ounce",
        UnitType.VOLUME,
        0.0295735295625,
        ("fluid ounces", "fluid ounce"),
        ("fl oz", "floz"),
    ),
    # temperature
    UnitDefinition(
        "fahrenheit",
        UnitType.TEMPERATURE,
        1.0,
        ("degrees fahrenheit", "degree fahrenheit", "fahrenheit"),
        ("deg f",),
        ("f",),
        ("°f",),
    ),
    # area
    UnitDefinition(
        "square foot",
        UnitType.AREA,
        0.09290304,
        ("square feet", "square foot"),
        ("sq ft", "sqft", "ft²", "ft2"),
    ),
    UnitDefinition(
        "square inch",
        UnitType.AREA,
        0.00064516,
        ("square inches", "square inch"),
        ("sq in", "in²", "in2"),
    ),
    UnitDefinition(
        "square mile",
        UnitType.AREA,
        2589988.110336,
        ("square miles", "square mile"),
        ("sq mi", "mi²", "mi2"),
    ),
    UnitDefinition("acre", UnitType.AREA, 4046.8564224, ("acres", "acre")),
)


@dataclass(frozen=True)
class ConversionRule:
    """
    換算後數值 (基準單位) 的絕對值 < threshold 時使用此規則

    顯示值 = 基準值 × scale
    """

    threshold: float
    metric_unit: str
    scale: float
    singular: str = ""
    compound: str = ""

    def label(self, *, single: bool = False, compound: bool = False) -> str:
        if compound and self.compound:
            return self.compound
        if single and self.singular:
            return self.singular
        return self.metric_unit


_MM = ConversionRule(0.01, "mm", 1000.0)
_CM = ConversionRule(1.0, "cm", 100.0)
_M = ConversionRule(1000.0, "metres", 1.0, "metre", "metre")
_KM = ConversionRule(math.inf, "km", 0.001)

CONVERSION_RULES: Dict[UnitType, Tuple[ConversionRule, ...]] = {
    UnitType.LENGTH: (_MM, _CM, _M, _KM),
    UnitType.MASS: (
        ConversionRule(0.001, "mg", 1_000_000.0),
        ConversionRule(1.0, "g", 1000.0),
        ConversionRule(1000.0, "kg", 1.0),
        ConversionRule(math.inf, "tonnes", 0.001, "tonne", "tonne"),
    ),
    UnitType.VOLUME: (
        ConversionRule(1.0, "ml", 1000.0),
        ConversionRule(math.inf, "litres", 1.0, "litre", "litre"),
    ),
    UnitType.AREA: (
        ConversionRule(10000.0, "m²", 1.0),
        ConversionRule(math.inf, "hectares", 0.0001, "hectare", "hectare"),
    ),
}

# 單一來源單位的專屬規則，優先於類別規則
SOURCE_RULES: Dict[str, Tuple[ConversionRule, ...]] = {
    "inch": (_MM, ConversionRule(10.0, "cm", 100.0)),
}

# 數值為 0 時使用基準單位
ZERO_RULES: Dict[UnitType, ConversionRule] = {
    UnitType.LENGTH: _M,
    UnitType.MASS: CONVERSION_RULES[UnitType.MASS][2],
    UnitType.VOLUME: CONVERSION_RULES[UnitType.VOLUME][1],
    UnitType.AREA: CONVERSION_RULES[UnitType.AREA][0],
}


def select_rule(unit_type: UnitType, base_value: float, source: str = "") -> ConversionRule:
    """依換算後數值挑選目標公制單位"""
    magnitude = abs(base_value)
    if magnitude == 0:
        return ZERO_RULES[unit_type]
    for rule in SOURCE_RULES.get(source, ()):
        if magnitude < rule.threshold:
            return rule
    for rule in CONVERSION_RULES[unit_type]:
        if magnitude < rule.threshold:
            return rule
    return CONVERSION_RULES[unit_type][-1]


# customMappings 可指定的公制單位 → (類別, 規則)
_METRIC_UNITS: Dict[str, Tuple[UnitType, ConversionRule]] = {}
for _unit_type, _rules in CONVERSION_RULES.items():
    for _rule in _rules:
        for _name in {_rule.metric_unit, _rule.singular} - {""}:
            _METRIC_UNITS[_name.lower()] = (_unit_type, _rule)
for _alias, _target in {
    "m": "metres", "meter": "metres", "meters": "metres", "metre": "metres",
    "kilometres": "km", "centimetres": "cm", "millimetres": "mm",
    "kilograms": "kg", "grams": "g", "milligrams": "mg", "t": "tonnes",
    "l": "litres", "liter": "litres", "liters": "litres", "millilitres": "ml",
    "m2": "m²", "sq m": "m²", "square metres": "m²", "ha": "hectares",
}.items():
    _METRIC_UNITS[_alias] = _METRIC_UNITS[_target]


def resolve_metric_unit(name: str) -> Optional[Tuple[UnitType, ConversionRule]]:
    if not name:
        return None
    key = name.strip().lower()
    if key in ("°c", "c", "celsius", "degrees celsius"):
        return UnitType.TEMPERATURE, ConversionRule(math.inf, "°C", 1.0)
    return _METRIC_UNITS.get(key)


# 字面上是單位、實際不是度量的慣用語 (小寫、整字比對)
IDIOMS: Tuple[str, ...] = (
    "go the extra mile",
    "going the extra mile",
    "went the extra mile",
    "miles from nowhere",
    "miles and miles",
    "a mile a minute",
    "give an inch",
    "give them an inch",
    "inch closer",
    "inched closer",
    "inch by inch",
    "every inch",
    "within an inch of",
    "cold feet",
    "put your foot down",
    "put my foot down",
    "set foot in",
    "set foot on",
    "put foot in",
    "foot in the door",
    "foot the bill",
    "on the right foot",
    "on the wrong foot",
    "back on their feet",
    "back on my feet",
    "on your feet",
    "pounds of fun",
    "pounds of pressure",
    "pounds of force",
    "pound of flesh",
    "pound sand",
    "pound the pavement",
    "pound the table",
    "tons of fun",
    "tons of people",
    "tons of work",
    "tons of stuff",
    "a ton of",
    "weighs a ton",
    "pounds sterling",
    "pound sterling",
    "fahrenheit scale",
    "fahrenheit thermometer",
)

# 看到這些字時提高「這是度量」的信心
MEASUREMENT_CONTEXT: Tuple[str, ...] = (
    "tall", "high", "long", "wide", "deep", "thick", "heavy", "weighs", "weigh", "weight", "weighed",
    "distance", "length", "width", "height", "depth", "size", "area", "volume", "measures", "measuring",
    "temperature", "temp", "degrees", "capacity", "holds", "contains", "away", "across", "diameter",
    "radius", "span", "run", "ran", "walk", "walked", "drive", "drove", "lot", "plot", "acreage",
)

TEMPERATURE_CONTEXT: Tuple[str, ...] = (
    "temperature", "temp", "degrees", "degree", "weather", "outside", "oven", "heat", "heated", "cold",
    "warm", "hot", "freezing", "boiling", "fever", "thermostat", "preheat", "forecast", "high of", "low of",
)

# 常見數值範圍 (小於等於上限、大於等於下限) 額外加分
COMMON_RANGES: Dict[UnitType, Tuple[float, float]] = {
    UnitType.LENGTH: (1, 1000),
    UnitType.MASS: (1, 500),
    UnitType.VOLUME: (1, 100),
    UnitType.TEMPERATURE: (-40, 500),
    UnitType.AREA: (1, 10000),
}


def build_alias_index() -> Dict[str, Tuple[UnitDefinition, str]]:
    """alias (小寫) → (定義, 類別: name/abbr/ambiguous/symbol)"""
    index: Dict[str, Tuple[UnitDefinition, str]] = {}
    for definition in UNIT_DEFINITIONS:
        for group, aliases in (
            ("name", definition.names),
            ("abbr", definition.abbreviations),
            ("ambiguous", definition.ambiguous),
            ("symbol", definition.symbols),
        ):
            for alias in aliases:
                index[alias.lower()] = (definition, group)
    return index


def fuzzy_targets() -> List[str]:
    """可做模糊比對的完整名稱 (長度 ≥ 4 的單字名稱)"""
    return [
        alias
        for d in UNIT_DEFINITIONS
        for alias in d.names
        if len(alias) >= 4 and " " not in alias
    ]
