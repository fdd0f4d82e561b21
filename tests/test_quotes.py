"""
引號正規化測試
"""
from britfix import QuoteStyle
from britfix.quotes import normalise_quotes


class TestStraightQuotes:
    """彎引號 → 直引號"""

    def test_smart_quotes_and_dashes(self):
        """測試彎引號與 em dash，每個字元算一次"""
        assert normalise_quotes("“Hi” — ‘there’") == ('"Hi" - \'there\'', 5)

    def test_en_dash(self):
        assert normalise_quotes("pages 3–5") == ("pages 3-5", 1)

    def test_plain_text_untouched(self):
        assert normalise_quotes('He said "no".') == ('He said "no".', 0)

    def test_empty(self):
        assert normalise_quotes("") == ("", 0)


class TestCurlyQuotes:
    """直引號 → 彎引號"""

    def test_double_quotes(self):
        """測試開 / 關引號依前一字元判斷"""
        assert normalise_quotes('"Hi"', QuoteStyle.CURLY) == ("“Hi”", 2)

    def test_apostrophe(self):
        """測試撇號"""
        assert normalise_quotes("don't", "curly") == ("don’t", 1)

    def test_single_quotes_after_space(self):
        assert normalise_quotes("say 'yes'", QuoteStyle.CURLY) == ("say ‘yes’", 2)
