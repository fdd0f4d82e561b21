"""
單位轉換設定

JSON 格式 (所有欄位皆可省略，缺少時使用預設值):

    {
      "enabled": true,
      "enabledUnitTypes": ["length", "mass", "volume", "temperature", "area"],
      "precision": {"length": 1, "mass": 1, "volume": 1, "temperature": 0, "area": 1},
      "preferences": {
        "preferWholeNumbers": true,
        "maxDecimalPlaces": 2,
        "roundingThreshold": 0.1,
        "temperatureFormat": "°C",
        "useSpaceBetweenValueAndUnit": true
      },
      "detection": {
        "minConfidence": 0.5,
        "maxNumberDistance": 3,
        "detectCompoundUnits": true,
        "detectWrittenNumbers": true
      },
      "excludePatterns": ["cold\\s+feet"],
      "customMappings": {"feet": "cm"}
    }
"""

from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from britfix.core.errors import ConfigError
from britfix.utils.logger import get_logger

from .rules import UnitType, resolve_metric_unit

logger = get_logger("units.config")

UNIT_CONFIG_FILENAME = "unit_config.json"

DEFAULT_EXCLUDE_PATTERNS: List[str] = [
    r"miles?\s+(?:away|apart|from\s+home|ahead)",
    r"inch\s+by\s+inch",
    r"every\s+inch",
    r"tons?\s+of\s+(?:fun|work|stuff|things)",
    r"cold\s+feet",
    r"foot\s+(?:in\s+the\s+door|the\s+bill)",
    r"pound\s+(?:the\s+pavement|the\s+table)",
]

TEMPERATURE_FORMATS = ("°C", "degrees Celsius")


@dataclass
class PrecisionConfig:
    length: int = 1
    mass: int = 1
    volume: int = 1
    temperature: int = 0
    area: int = 1

    def for_type(self, unit_type: UnitType) -> int:
        return int(getattr(self, unit_type.value))


@dataclass
class PreferenceConfig:
    prefer_whole_numbers: bool = True
    max_decimal_places: int = 2
    rounding_threshold: float = 0.1
    temperature_format: str = "°C"
    use_space_between_value_and_unit: bool = True


@dataclass
class DetectionConfig:
    min_confidence: float = 0.5
    max_number_distance: int = 3
    detect_compound_units: bool = True
    detect_written_numbers: bool = True


@dataclass
class UnitConfig:
    enabled: bool = True
    enabled_unit_types: List[UnitType] = field(default_factory=lambda: list(UnitType))
    precision: PrecisionConfig = field(default_factory=PrecisionConfig)
    preferences: PreferenceConfig = field(default_factory=PreferenceConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    custom_mappings: Dict[str, str] = field(default_factory=dict)

    def is_type_enabled(self, unit_type: UnitType) -> bool:
        return unit_type in self.enabled_unit_types

    def copy(self) -> "UnitConfig":
        return copy.deepcopy(self)

    def validate(self) -> "UnitConfig":
        """檢查數值範圍，不合法時拋出 ConfigError"""
        for unit_type in UnitType:
            p = self.precision.for_type(unit_type)
            if not 0 <= p <= 10:
                raise ConfigError(f"precision.{unit_type.value} 必須介於 0 到 10，收到 {p}")
        if not 0 <= self.preferences.max_decimal_places <= 10:
            raise ConfigError(f"preferences.maxDecimalPlaces 必須介於 0 到 10，收到 {self.preferences.max_decimal_places}")
        if not 0 <= self.preferences.rounding_threshold < 1:
            raise ConfigError(f"preferences.roundingThreshold 必須介於 0 到 1，收到 {self.preferences.rounding_threshold}")
        if self.preferences.temperature_format not in TEMPERATURE_FORMATS:
            raise ConfigError(f"preferences.temperatureFormat 不支援: {self.preferences.temperature_format!r}")
        if not 0 <= self.detection.min_confidence <= 1:
            raise ConfigError(f"detection.minConfidence 必須介於 0 到 1，收到 {self.detection.min_confidence}")
        if not 1 <= self.detection.max_number_distance <= 10:
            raise ConfigError(
                f"detection.maxNumberDistance 必須介於 1 到 10，收到 {self.detection.max_number_distance}"
            )
        for pattern in self.exclude_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ConfigError(f"excludePatterns 含無效的 regex {pattern!r}: {exc}") from exc
        for source, target in self.custom_mappings.items():
            if resolve_metric_unit(target) is None:
                raise ConfigError(f"customMappings[{source!r}] 不是已知的公制單位: {target!r}")
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitConfig":
        """從 camelCase JSON dict 建立設定，缺少的欄位使用預設值"""
        if not isinstance(data, Mapping):
            raise ConfigError(f"單位設定必須是 JSON object，收到 {type(data).__name__}")

        config = cls()
        try:
            if "enabled" in data:
                config.enabled = bool(data["enabled"])
            if "enabledUnitTypes" in data:
                config.enabled_unit_types = [UnitType(str(t).lower()) for t in data["enabledUnitTypes"]]

            precision = data.get("precision") or {}
            for unit_type in UnitType:
                if unit_type.value in precision:
                    setattr(config.precision, unit_type.value, int(precision[unit_type.value]))

            prefs = data.get("preferences") or {}
            p = config.preferences
            p.prefer_whole_numbers = bool(prefs.get("preferWholeNumbers", p.prefer_whole_numbers))
            p.max_decimal_places = int(prefs.get("maxDecimalPlaces", p.max_decimal_places))
            p.rounding_threshold = float(prefs.get("roundingThreshold", p.rounding_threshold))
            p.temperature_format = str(prefs.get("temperatureFormat", p.temperature_format))
            p.use_space_between_value_and_unit = bool(
                prefs.get("useSpaceBetweenValueAndUnit", p.use_space_between_value_and_unit)
            )

            detection = data.get("detection") or {}
            d = config.detection
            d.min_confidence = float(detection.get("minConfidence", d.min_confidence))
            d.max_number_distance = int(detection.get("maxNumberDistance", d.max_number_distance))
            d.detect_compound_units = bool(detection.get("detectCompoundUnits", d.detect_compound_units))
            d.detect_written_numbers = bool(detection.get("detectWrittenNumbers", d.detect_written_numbers))

            if "excludePatterns" in data:
                config.exclude_patterns = [str(x) for x in data["excludePatterns"]]
            if "customMappings" in data:
                config.custom_mappings = {str(k).lower(): str(v) for k, v in dict(data["customMappings"]).items()}
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigError(f"單位設定格式錯誤: {exc}") from exc

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "enabledUnitTypes": [t.value for t in self.enabled_unit_types],
            "precision": {t.value: self.precision.for_type(t) for t in UnitType},
            "preferences": {
                "preferWholeNumbers": self.preferences.prefer_whole_numbers,
                "maxDecimalPlaces": self.preferences.max_decimal_places,
                "roundingThreshold": self.preferences.rounding_threshold,
                "temperatureFormat": self.preferences.temperature_format,
                "useSpaceBetweenValueAndUnit": self.preferences.use_space_between_value_and_unit,
            },
            "detection": {
                "minConfidence": self.detection.min_confidence,
                "maxNumberDistance": self.detection.max_number_distance,
                "detectCompoundUnits": self.detection.detect_compound_units,
                "detectWrittenNumbers": self.detection.detect_written_numbers,
            },
            "excludePatterns": list(self.exclude_patterns),
            "customMappings": dict(self.custom_mappings),
        }


def load_unit_config(path: Path | str | None, *, strict: bool = False) -> UnitConfig:
    """
    讀取單位設定檔

    - path 為 None 或檔案不存在 → 預設值
    - JSON 錯誤或數值不合法 → strict=False 時記錄 warning 並回傳預設值
    """
    if path is None:
        return UnitConfig()
    path = Path(path).expanduser()
    if not path.exists():
        return UnitConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return UnitConfig.from_dict(raw).validate()
    except (OSError, ValueError, ConfigError) as exc:
        if strict:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"無法讀取單位設定 {path}: {exc}") from exc
        logger.warning(f"單位設定無效，改用預設值: {path} ({exc})")
        return UnitConfig()


def save_unit_config(config: UnitConfig, path: Path | str) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path
