"""
英制 → 公制單位轉換

- UnitDetector: 找出「數值 + 單位」並評分
- UnitConverter: 換算與格式化
- UnitProcessor: 兩者組合並回填原文
"""

from .config import UNIT_CONFIG_FILENAME, UnitConfig, load_unit_config, save_unit_config
from .converter import ConvertedValue, UnitConverter, fahrenheit_to_celsius
from .detector import UnitDetector, UnitMatch
from .processor import UnitConversion, UnitProcessor
from .rules import ConversionRule, UnitDefinition, UnitType

__all__ = [
    "UNIT_CONFIG_FILENAME",
    "ConversionRule",
    "ConvertedValue",
    "UnitConfig",
    "UnitConversion",
    "UnitConverter",
    "UnitDefinition",
    "UnitDetector",
    "UnitMatch",
    "UnitProcessor",
    "UnitType",
    "fahrenheit_to_celsius",
    "load_unit_config",
    "save_unit_config",
]
