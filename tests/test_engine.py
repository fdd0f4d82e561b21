"""
BritishEngine 測試
"""
import json

import pytest

from britfix import BritishEngine, ChangeStats, EngineConfig, UnitConfig


class TestConvertToBritish:
    """純文字轉換"""

    def test_spelling_and_units(self, engine):
        """測試拼寫 + 單位"""
        result = engine.convert_with_stats("The color of the 12 ft wall")
        assert result.text == "The colour of the 3.7 metres wall"
        assert result.stats.total_words == 6
        assert result.stats.spelling_changes == 1
        assert result.stats.unit_conversions == 1
        assert result.changed

    def test_convert_to_british_returns_text(self, engine):
        assert engine.convert_to_british("We analyze the behavior.") == "We analyse the behaviour."

    def test_case_preserved(self, engine):
        assert engine.convert_to_british("COLOR Color color") == "COLOUR Colour colour"

    def test_contextual_words(self, engine):
        """測試上下文敏感詞經由判斷器處理"""
        assert engine.convert_to_british("The TV program starts at 8.") == "The TV programme starts at 8."
        assert engine.convert_to_british("The program crashes on startup.") == "The program crashes on startup."

    def test_idempotent(self, engine):
        """測試對輸出再轉換一次不會變"""
        once = engine.convert_to_british("The color of the 12 ft wall. We analyze behavior.")
        assert engine.convert_to_british(once) == once

    def test_empty(self, engine):
        result = engine.convert_with_stats("")
        assert result.text == ""
        assert result.stats == ChangeStats()

    def test_smart_quotes(self, engine):
        """測試引號正規化統計"""
        result = engine.convert_with_stats("“color”", normalise_smart_quotes=True)
        assert result.text == '"colour"'
        assert result.stats.quote_changes == 2
        assert result.stats.spelling_changes == 1

    def test_smart_quotes_off_by_default(self, engine):
        assert engine.convert_to_british("“color”") == "“colour”"

    def test_last_stats(self, engine):
        engine.convert_to_british("color and flavor")
        assert engine.last_stats.spelling_changes == 2


class TestUnitToggle:
    """單位轉換開關"""

    def test_engine_toggle(self, engine):
        assert engine.unit_conversion_enabled
        engine.set_unit_conversion_enabled(False)
        assert engine.convert_to_british("A 12 ft wall") == "A 12 ft wall"
        engine.set_unit_conversion_enabled(True)
        assert engine.convert_to_british("A 12 ft wall") == "A 3.7 metres wall"

    def test_per_call_override_wins(self):
        """測試單次呼叫的 convert_units 優先於引擎設定"""
        engine = BritishEngine(unit_config=UnitConfig(enabled=False))
        assert not engine.unit_conversion_enabled
        assert engine.convert_to_british("A 12 ft wall") == "A 12 ft wall"
        assert engine.convert_to_british("A 12 ft wall", convert_units=True) == "A 3.7 metres wall"

        engine.set_unit_conversion_enabled(True)
        assert engine.convert_to_british("A 12 ft wall", convert_units=False) == "A 12 ft wall"

    def test_unit_config_file(self, isolated_config_dir):
        """測試從設定目錄讀取 unit_config.json"""
        isolated_config_dir.mkdir(parents=True, exist_ok=True)
        (isolated_config_dir / "unit_config.json").write_text(json.dumps({"enabled": False}), encoding="utf-8")
        assert not BritishEngine().unit_conversion_enabled

    def test_invalid_unit_config_falls_back(self):
        """測試不合法的單位設定退回預設值並送出 warning 事件"""
        events = []
        engine = BritishEngine(
            on_event=events.append,
            unit_config=UnitConfig.from_dict({"precision": {"length": 11}}),
        )
        assert engine.unit_config == UnitConfig()
        assert [e["source"] for e in events if e["type"] == "warning"] == ["unit_config"]


class TestEvents:
    """事件回呼"""

    def test_replacement_and_unit_events(self):
        events = []
        engine = BritishEngine(on_event=events.append)
        engine.convert_with_stats("The color of the 12 ft wall", trace_id="t-1")

        spelling = [e for e in events if e["type"] == "replacement"]
        units = [e for e in events if e["type"] == "unit_conversion"]
        assert [(e["start"], e["end"], e["original"], e["replacement"]) for e in spelling] == [
            (4, 9, "color", "colour")
        ]
        assert [(e["original"], e["replacement"]) for e in units] == [("12 ft", "3.7 metres")]
        assert {e["trace_id"] for e in events} == {"t-1"}

    def test_trace_id_generated(self):
        events = []
        BritishEngine(on_event=events.append).convert_to_british("color")
        assert len(events) == 1
        assert len(events[0]["trace_id"]) == 32

    def test_code_aware_offsets_refer_to_source(self):
        """測試程式碼模式的事件 offset 指向原文"""
        events = []
        source = "int x; // the color\n"
        BritishEngine(on_event=events.append).process_code_aware(source, language="c")
        (event,) = events
        assert source[event["start"]:event["end"]] == "color"

    def test_quote_event(self):
        events = []
        BritishEngine(on_event=events.append).convert_to_british("“hi”", normalise_smart_quotes=True)
        assert [e["type"] for e in events] == ["quote"]

    def test_handler_errors_do_not_propagate(self, caplog):
        """測試回呼拋出例外時只記錄，不中斷轉換"""

        def boom(event):
            raise RuntimeError("boom")

        engine = BritishEngine(on_event=boom)
        assert engine.convert_to_british("color") == "colour"
        assert any("on_event 回呼執行失敗" in r.getMessage() for r in caplog.records)

    def test_timing_callback(self):
        timings = []
        engine = BritishEngine(on_timing=lambda op, elapsed: timings.append(op))
        engine.convert_to_british("color")
        assert "BritishEngine.__init__" in timings
        assert "BritishEngine.convert_to_british" in timings


class TestProcessCodeAware:
    """程式碼模式"""

    def test_c_comments_only(self, engine):
        source = "// initialize the color\nint color = 0;"
        assert engine.process_code_aware(source, language="c") == "// initialise the colour\nint color = 0;"

    def test_python_docstring_comment_string(self, engine):
        """測試 docstring 與註解轉換，字串保持原樣"""
        source = 'def f():\n    """Return the color."""\n    return "color"  # gray\n'
        assert engine.process_code_aware(source, language="py") == (
            'def f():\n    """Return the colour."""\n    return "color"  # grey\n'
        )

    def test_markdown(self, engine):
        """測試 Markdown 只轉換文字，行內程式碼與圍欄區塊不動"""
        source = "The color is `color`.\n\n```\ncolor\n```\n"
        assert engine.process_code_aware(source, language="md") == (
            "The colour is `color`.\n\n```\ncolor\n```\n"
        )

    def test_units_in_comments(self, engine):
        source = "x = 1  # the wall is 12 ft tall\n"
        assert engine.process_code_aware(source, language="python") == "x = 1  # the wall is 3.7 metres tall\n"

    def test_stats_accumulate(self, engine):
        result = engine.process_code_aware_with_stats("// color\n// gray\nint color;\n", language="c")
        assert result.stats.spelling_changes == 2
        assert result.stats.total_words == 2
        assert engine.last_stats == result.stats

    def test_no_comments(self, engine):
        source = 'int color = 0; char *s = "gray";\n'
        assert engine.process_code_aware(source, language="c") == source

    def test_prose_with_code_tokens_without_hint(self, engine):
        """測試沒有語言提示時，含程式碼符號的英文仍視為純文字"""
        assert engine.process_code_aware("Use x => y to map the color.") == "Use x => y to map the colour."
        assert engine.process_code_aware("The function color() returns the color.") == (
            "The function colour() returns the colour."
        )
        assert engine.process_code_aware("Select the color.\nThen analyze it.") == "Select the colour.\nThen analyse it."

    def test_extract_comments(self, engine):
        spans = engine.extract_comments("int x; // color\n", "c")
        assert [s.content for s in spans] == ["color"]


class TestDictionaryAccess:
    """字典存取與使用者字典"""

    def test_dictionary_is_copy(self, engine):
        d = engine.dictionary()
        assert d["color"] == "colour"
        d["color"] = "changed"
        assert engine.convert_to_british("color") == "colour"

    def test_contextual_words_separate(self, engine):
        words = engine.contextual_words()
        assert "program" in words
        assert "program" not in engine.dictionary()

    def test_user_dictionary_created(self, isolated_config_dir):
        """測試首次啟動建立使用者字典範例檔"""
        BritishEngine()
        path = isolated_config_dir / "american_spellings.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"customize": "customise"}

    def test_user_dictionary_not_created(self, isolated_config_dir):
        BritishEngine(EngineConfig(create_missing_user_dictionary=False))
        assert not (isolated_config_dir / "american_spellings.json").exists()

    def test_user_dictionary_overrides(self, isolated_config_dir):
        """測試使用者字典新增與覆寫條目"""
        isolated_config_dir.mkdir(parents=True, exist_ok=True)
        (isolated_config_dir / "american_spellings.json").write_text(
            json.dumps({"sidewalk": "pavement", "color": "colour"}), encoding="utf-8"
        )
        engine = BritishEngine()
        assert engine.convert_to_british("The sidewalk color") == "The pavement colour"

    def test_contextual_config_file(self, isolated_config_dir):
        """測試從設定目錄讀取 contextual_words.json"""
        isolated_config_dir.mkdir(parents=True, exist_ok=True)
        (isolated_config_dir / "contextual_words.json").write_text(
            json.dumps({"wordConfigs": {"program": {"enabled": False}}}), encoding="utf-8"
        )
        engine = BritishEngine()
        assert engine.convert_to_british("The TV program starts at 8.") == "The TV program starts at 8."
        assert engine.convert_to_british("I advice you to stop.") == "I advise you to stop."

    def test_malformed_contextual_config_falls_back(self, isolated_config_dir):
        isolated_config_dir.mkdir(parents=True, exist_ok=True)
        (isolated_config_dir / "contextual_words.json").write_text("{broken", encoding="utf-8")
        engine = BritishEngine()
        assert engine.convert_to_british("The TV program starts at 8.") == "The TV programme starts at 8."

    def test_user_entry_replaces_builtin(self, isolated_config_dir):
        isolated_config_dir.mkdir(parents=True, exist_ok=True)
        (isolated_config_dir / "american_spellings.json").write_text(
            json.dumps({"color": "colour-custom"}), encoding="utf-8"
        )
        engine = BritishEngine()
        assert engine.convert_to_british("I like this color") == "I like this colour-custom"
        assert engine.convert_to_british("organize") == "organise"


class TestChangeStats:
    def test_add(self):
        total = ChangeStats(1, 2, 3, 4) + ChangeStats(1, 1, 1, 1)
        assert total == ChangeStats(2, 3, 4, 5)
        assert total.total_changes == 12

    def test_to_dict(self):
        assert ChangeStats(6, 1, 1, 0).to_dict() == {
            "totalWords": 6,
            "spellingChanges": 1,
            "unitConversions": 1,
            "quoteChanges": 0,
        }

    def test_add_other_type(self):
        with pytest.raises(TypeError):
            ChangeStats() + 1
