"""
工具模組測試 (AhoCorasick、logger、文字工具)
"""
import logging

import pytest

from britfix import BritishEngine
from britfix.utils import AhoCorasick, TimingContext, enable_timing_logging, get_logger, match_case, setup_logger
from britfix.utils.text import SentenceIndex, count_words, sentence_bounds


class TestAhoCorasick:
    """多模式比對"""

    def test_all_matches(self):
        matcher = AhoCorasick.from_items([("he", 1), ("she", 2), ("hers", 3)])
        found = sorted((s, e, w) for s, e, w, _ in matcher.iter_matches("ushers"))
        assert found == [(1, 4, "she"), (2, 4, "he"), (2, 6, "hers")]

    def test_whole_words(self):
        matcher = AhoCorasick.from_items([("cold feet", "idiom")])
        assert matcher.find_spans("got cold feet today", whole_words=True) == [(4, 13, "idiom")]
        assert matcher.find_spans("got cold feeting", whole_words=True) == []

    def test_leftmost_longest(self):
        """測試同一起點取最長、重疊者丟棄"""
        matcher = AhoCorasick.from_items([("a mile", 1), ("a mile a minute", 2), ("mile a", 3)])
        assert matcher.find_spans("a mile a minute") == [(0, 15, 2)]

    def test_add_after_build(self):
        matcher = AhoCorasick.from_items([("x", 1)])
        with pytest.raises(RuntimeError):
            matcher.add("y", 2)

    def test_empty_pattern_ignored(self):
        matcher = AhoCorasick.from_items([("", 1), ("ab", 2)])
        assert len(matcher) == 1


class TestLogger:
    """日誌工具"""

    def test_get_logger_namespace(self):
        assert get_logger().name == "britfix"
        assert get_logger("engine").name == "britfix.engine"
        assert get_logger("britfix.units").name == "britfix.units"

    def test_setup_logger_idempotent(self):
        """測試重複呼叫不會重複掛 handler"""
        logger = setup_logger(level=logging.WARNING)
        count = len(logger.handlers)
        setup_logger(level=logging.INFO)
        assert len(logger.handlers) == count
        assert logger.level == logging.INFO

        for handler in [h for h in logger.handlers if getattr(h, "_britfix_handler", False)]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_timing_logging_covers_engine(self, caplog):
        """測試只開計時日誌時，引擎與單位處理器的計時都會輸出"""
        root = get_logger()
        timing = get_logger("timing")
        enable_timing_logging()
        try:
            BritishEngine().convert_to_british("The 12 ft wall")
        finally:
            for handler in [h for h in root.handlers if getattr(h, "_britfix_handler", False)]:
                root.removeHandler(handler)
            root.setLevel(logging.NOTSET)
            timing.setLevel(logging.NOTSET)

        messages = [r.getMessage() for r in caplog.records if r.name == "britfix.timing"]
        assert any("BritishEngine.convert_to_british" in m for m in messages)
        assert any("UnitProcessor.process" in m for m in messages)
        assert not [r for r in caplog.records if r.name.startswith("britfix.engine") and r.levelno < logging.INFO]

    def test_timing_context_callback(self):
        calls = []
        with TimingContext("op", callback=lambda op, elapsed: calls.append((op, elapsed))) as timer:
            pass
        assert calls == [("op", timer.elapsed)]
        assert timer.elapsed >= 0

    def test_timing_callback_errors_are_logged(self, caplog):
        """測試計時回呼例外不外拋"""

        def boom(op, elapsed):
            raise RuntimeError("boom")

        with TimingContext("op", callback=boom):
            pass
        assert any("on_timing 回呼執行失敗" in r.getMessage() for r in caplog.records)


class TestTextHelpers:
    def test_match_case(self):
        assert match_case("COLOR", "colour") == "COLOUR"
        assert match_case("Color", "colour") == "Colour"
        assert match_case("color", "Colour") == "colour"

    def test_count_words(self):
        """測試只計算英文字母組成的字"""
        assert count_words("The color of the 12 ft wall") == 6
        assert count_words("") == 0

    def test_sentence_bounds(self):
        text = "First one. The second here. Third."
        start = text.index("second")
        left, right = sentence_bounds(text, start, start + 6)
        assert text[left:right].strip() == "The second here"

    def test_sentence_index(self):
        """測試句子索引的邊界查詢"""
        text = "One. Two here!\n\nThree"
        index = SentenceIndex(text)
        assert len(index) == 3
        assert index.bounds(0, 3) == (0, 3)
        start = text.index("here")
        assert text[slice(*index.bounds(start, start + 4))] == " Two here"
        start = text.index("Three")
        assert index.bounds(start, len(text)) == (start, len(text))
        assert SentenceIndex("").bounds(0, 0) == (0, 0)
