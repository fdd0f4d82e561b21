"""
英制 → 公制單位轉換測試
"""
import json

import pytest

from britfix import ConfigError
from britfix.units import (
    UnitConfig,
    UnitConverter,
    UnitDetector,
    UnitProcessor,
    UnitType,
    fahrenheit_to_celsius,
    load_unit_config,
    save_unit_config,
)


def convert(text, config=None):
    return UnitProcessor(config).process(text)[0]


class TestUnitConversion:
    """基本換算與格式"""

    def test_feet_to_metres(self):
        """測試 12 ft → 3.7 metres"""
        assert convert("The room is 12 feet wide") == "The room is 3.7 metres wide"
        assert convert("The wall is 12 ft tall") == "The wall is 3.7 metres tall"

    def test_whole_number_preference(self):
        """測試接近整數時取整 (10 ft → 3 metres)"""
        assert convert("A 10 ft pole") == "A 3 metres pole"

    def test_singular_label(self):
        """測試數值為 1 時使用單數"""
        assert convert("The gap is 3.3 feet wide") == "The gap is 1 metre wide"

    def test_inches_to_cm_and_mm(self):
        """測試英吋 → cm / mm"""
        assert convert("The board is 12 inches long") == "The board is 30.5 cm long"
        assert "mm" in convert("A 0.25 inches gap")

    def test_fahrenheit(self):
        """測試華氏 → 攝氏 (無空格)"""
        assert convert("Water freezes at 32°F.") == "Water freezes at 0°C."
        assert convert("Water boils at 212°F.") == "Water boils at 100°C."
        assert convert("It was 98.6 degrees Fahrenheit") == "It was 37°C"
        assert convert("It was -40°F outside") == "It was -40°C outside"

    def test_ambiguous_fahrenheit_needs_context(self):
        """測試單獨的 F 需要溫度語境"""
        assert convert("The oven is at 350 F") == "The oven is at 177°C"
        assert convert("Grade 5 F") == "Grade 5 F"

    def test_mass_volume_area(self):
        assert convert("The bag weighs 10 pounds") == "The bag weighs 4.5 kg"
        assert convert("Add 2 gallons of water") == "Add 7.6 litres of water"
        assert convert("A 500 square feet flat") == "A 46.5 m² flat"
        assert convert("The farm covers 10 acres") == "The farm covers 4 hectares"

    def test_long_distances(self):
        """測試千分位與 km"""
        assert convert("We drove 1,500 miles.") == "We drove 2414 km."

    def test_fractions(self):
        """測試分數與帶分數"""
        assert convert("A 1/2 inch pipe") == "A 1.3 cm pipe"
        assert convert("A 2 1/2 feet board") == "A 76.2 cm board"

    def test_compound_adjective(self):
        """測試 6-foot → 1.8-metre"""
        assert convert("a 6-foot fence") == "a 1.8-metre fence"

    def test_written_numbers(self):
        """測試英文數字"""
        assert convert("It is three feet long") == "It is 91.4 cm long"

    def test_intervening_words_kept(self):
        """測試數值與單位之間的修飾字保留"""
        assert convert("The rope needs 12 more feet") == "The rope needs 3.7 more metres"

    def test_fuzzy_unit(self):
        """測試拼錯的單位 (Levenshtein 距離 1)"""
        assert convert("The wall is 12 feets tall") == "The wall is 3.7 metres tall"


class TestUnitExclusions:
    """不應轉換的情況"""

    def test_idioms(self):
        """測試慣用語"""
        for text in (
            "I'm miles away from home",
            "The town is 5 miles away",
            "It costs 5 pounds sterling",
            "There were 2 tons of fun",
        ):
            assert convert(text) == text

    def test_ambiguous_in(self):
        """測試 in 作為介系詞時不轉換"""
        assert convert("I have 2 in the box") == "I have 2 in the box"
        assert convert("The pipe is 2in wide") == "The pipe is 5 cm wide"

    def test_ranges_skipped(self):
        """測試範圍不轉換"""
        assert convert("It is 3-4 feet deep") == "It is 3-4 feet deep"

    def test_non_unit_words(self):
        """測試數字後面不是單位"""
        assert convert("Chapter 3 covers feet") == "Chapter 3 covers feet"
        assert convert("I have 12 apples") == "I have 12 apples"
        assert convert("We hit 5 milestones and 2 footprints") == "We hit 5 milestones and 2 footprints"

    def test_scientific_notation(self):
        """測試科學記號的指數不被當成數值"""
        assert convert("A 1e-5 miles gap") == "A 1e-5 miles gap"
        assert convert("About 2.5E+3 feet") == "About 2.5E+3 feet"

    def test_urls(self):
        assert convert("See http://example.com/12-feet") == "See http://example.com/12-feet"

    def test_disabled(self):
        assert convert("12 feet", UnitConfig(enabled=False)) == "12 feet"

    def test_disabled_unit_type(self):
        """測試關閉特定類別"""
        config = UnitConfig(enabled_unit_types=[UnitType.LENGTH])
        assert convert("The bag weighs 10 pounds", config) == "The bag weighs 10 pounds"
        assert convert("The room is 12 feet wide", config) == "The room is 3.7 metres wide"

    def test_user_exclude_pattern(self):
        config = UnitConfig()
        config.exclude_patterns.append(r"\d+\s+feet\s+under")
        assert convert("Buried 6 feet under", config) == "Buried 6 feet under"


class TestUnitConfig:
    """單位設定"""

    def test_defaults(self):
        config = UnitConfig()
        assert config.enabled
        assert set(config.enabled_unit_types) == set(UnitType)
        assert config.precision.length == 1
        assert config.precision.temperature == 0
        assert config.detection.min_confidence == 0.5
        assert config.detection.max_number_distance == 3

    def test_from_dict_camel_case(self):
        """測試 camelCase JSON"""
        config = UnitConfig.from_dict(
            {
                "enabledUnitTypes": ["length"],
                "precision": {"length": 2},
                "preferences": {"useSpaceBetweenValueAndUnit": False},
                "customMappings": {"Feet": "cm"},
            }
        )
        assert config.enabled_unit_types == [UnitType.LENGTH]
        assert config.precision.length == 2
        assert config.preferences.use_space_between_value_and_unit is False
        assert config.custom_mappings == {"feet": "cm"}

    @pytest.mark.parametrize(
        "data",
        [
            {"precision": {"length": 11}},
            {"detection": {"minConfidence": 1.5}},
            {"detection": {"maxNumberDistance": 0}},
            {"customMappings": {"feet": "furlongs"}},
            {"excludePatterns": ["("]},
        ],
    )
    def test_validate_rejects(self, data):
        """測試不合法數值拋出 ConfigError"""
        with pytest.raises(ConfigError):
            UnitConfig.from_dict(data).validate()

    def test_unknown_unit_type(self):
        with pytest.raises(ConfigError):
            UnitConfig.from_dict({"enabledUnitTypes": ["weight"]})

    def test_load_and_save(self, tmp_path):
        """測試讀寫設定檔"""
        path = tmp_path / "unit_config.json"
        config = UnitConfig()
        config.precision.mass = 2
        save_unit_config(config, path)
        assert json.loads(path.read_text(encoding="utf-8"))["precision"]["mass"] == 2
        assert load_unit_config(path).precision.mass == 2

    def test_load_missing_and_malformed(self, tmp_path):
        """測試檔案不存在或格式錯誤時回傳預設值"""
        assert load_unit_config(tmp_path / "missing.json") == UnitConfig()
        path = tmp_path / "unit_config.json"
        path.write_text('{"precision": {"length": 99}}', encoding="utf-8")
        assert load_unit_config(path) == UnitConfig()
        with pytest.raises(ConfigError):
            load_unit_config(path, strict=True)

    def test_custom_mapping(self):
        """測試強制目標單位"""
        config = UnitConfig(custom_mappings={"feet": "cm"})
        assert convert("The room is 12 feet wide", config) == "The room is 365.8 cm wide"

    def test_no_space(self):
        config = UnitConfig()
        config.preferences.use_space_between_value_and_unit = False
        assert convert("The room is 12 feet wide", config) == "The room is 3.7metres wide"

    def test_temperature_format(self):
        config = UnitConfig()
        config.preferences.temperature_format = "degrees Celsius"
        assert convert("Water freezes at 32°F.", config) == "Water freezes at 0 degrees Celsius."


class TestDetectorAndConverter:
    """偵測器與換算器"""

    def test_detect_positions(self):
        text = "The room is 12 feet wide"
        (match,) = UnitDetector().detect(text)
        assert text[match.start:match.end] == "12 feet"
        assert match.position == match.start
        assert match.unit_type is UnitType.LENGTH
        assert 0.5 <= match.confidence <= 1.0

    def test_detect_never_raises(self):
        """測試各種怪輸入只會回傳空結果"""
        for text in ("", "1/0 feet", "°F", "12", "feet 12", "°°° 12 °"):
            UnitDetector().detect(text)
        assert UnitDetector().detect("1/0 feet") == []

    def test_format_number(self):
        converter = UnitConverter()
        assert converter.format_number(3.6576, UnitType.LENGTH) == "3.7"
        assert converter.format_number(3.048, UnitType.LENGTH) == "3"
        assert converter.format_number(-0.2, UnitType.TEMPERATURE) == "0"

    def test_fahrenheit_to_celsius(self):
        assert fahrenheit_to_celsius(32) == 0
        assert fahrenheit_to_celsius(212) == 100
