"""
程式碼感知切分測試
"""
import pytest

from britfix import SpanKind, extract_comments, tokenize
from britfix.codeaware import detect_language, fence_blocks, get_profile


def _kinds(spans):
    return [(s.kind, s.content) for s in spans]


class TestPartition:
    """切分結果必須完整覆蓋輸入、依序且不重疊"""

    @pytest.mark.parametrize(
        "source, language",
        [
            ('def f():\n    """Doc."""\n    return "x"  # note\n', "python"),
            ("int a = 1; /* block */ // line\nchar c = '\\'';\n", "c"),
            ("const s = `multi\nline`; // done\n", "js"),
            ("x = 'unterminated\ny = 2 # tail", "python"),
            ("/* never closed", "c"),
            ("# Title\n\nSome `code` and [link](http://x.com).\n\n```\nfenced\n", "md"),
            ("", "python"),
            ("echo $# # count\n", "sh"),
        ],
    )
    def test_partition(self, source, language):
        spans = tokenize(source, language)
        assert "".join(s.content for s in spans) == source
        cursor = 0
        for span in spans:
            assert span.start == cursor
            assert span.end > span.start
            assert source[span.start:span.end] == span.content
            cursor = span.end
        assert cursor == len(source)


class TestTokenizer:
    """各語言的註解與字串規則"""

    def test_python_docstring_string_comment(self):
        """測試 docstring 視為區塊註解，一般字串保持字串"""
        source = 'def f():\n    """Return the color."""\n    s = "color"  # the color\n'
        kinds = _kinds(tokenize(source, "python"))
        assert (SpanKind.BLOCK_COMMENT, '"""Return the color."""') in kinds
        assert (SpanKind.STRING, '"color"') in kinds
        assert (SpanKind.LINE_COMMENT, "# the color") in kinds

    def test_python_triple_quoted_value_is_string(self):
        kinds = _kinds(tokenize('x = """color"""\n', "python"))
        assert (SpanKind.STRING, '"""color"""') in kinds

    def test_comment_marker_inside_string(self):
        """測試字串中的 // 不是註解"""
        spans = tokenize('url = "http://example.com"; // real\n', "c")
        comments = [s.content for s in spans if s.kind is SpanKind.LINE_COMMENT]
        assert comments == ["// real"]

    def test_c_char_literal(self):
        """測試字元常值 '"' 不會開啟字串"""
        kinds = _kinds(tokenize("char q = '\"'; // color\n", "c"))
        assert (SpanKind.STRING, "'\"'") in kinds
        assert (SpanKind.LINE_COMMENT, "// color") in kinds

    def test_js_template_literal(self):
        """測試模板字串可跨行，內部的 // 不是註解"""
        source = "const s = `a\n// not a comment`; // yes\n"
        kinds = _kinds(tokenize(source, "js"))
        assert (SpanKind.STRING, "`a\n// not a comment`") in kinds
        assert [c for k, c in kinds if k is SpanKind.LINE_COMMENT] == ["// yes"]

    def test_single_line_string_ends_at_newline(self):
        """測試未關閉的單行字串在換行前結束"""
        spans = tokenize('s = "open\n# comment\n', "python")
        assert spans[1].kind is SpanKind.STRING
        assert spans[1].content == '"open'
        assert (SpanKind.LINE_COMMENT, "# comment") in _kinds(spans)

    def test_unterminated_block_comment(self):
        """測試未關閉的區塊註解延伸到檔尾"""
        source = "int x; /* color"
        spans = tokenize(source, "c")
        assert spans[-1].kind is SpanKind.BLOCK_COMMENT
        assert spans[-1].content == "/* color"
        assert spans[-1].end == len(source)

    def test_lua_long_comment_before_line_comment(self):
        """測試 --[[ 優先於 --"""
        kinds = _kinds(tokenize("x = 1 --[[ block\ncolor ]] -- line\n", "lua"))
        assert (SpanKind.BLOCK_COMMENT, "--[[ block\ncolor ]]") in kinds
        assert (SpanKind.LINE_COMMENT, "-- line") in kinds

    def test_shell_dollar_hash(self):
        """測試 shell 的 $# 不是註解"""
        spans = tokenize("echo $# items # count\n", "sh")
        assert [s.content for s in spans if s.kind is SpanKind.LINE_COMMENT] == ["# count"]

    def test_html_comment(self):
        spans = tokenize("<p>color</p><!-- color -->", "html")
        assert _kinds(spans) == [
            (SpanKind.CODE, "<p>color</p>"),
            (SpanKind.BLOCK_COMMENT, "<!-- color -->"),
        ]

    def test_unknown_hint_falls_back(self):
        """測試無法辨識的提示改用自動偵測 (預設純文字)"""
        assert _kinds(tokenize("plain color", "nonsense")) == [(SpanKind.PROSE, "plain color")]


class TestMarkdown:
    """Markdown 切分"""

    def test_inline_code_links_and_fences(self):
        source = "Use `color` here and [link](http://x.com/color).\n\n```\ncolor\n```\nThe color."
        assert _kinds(tokenize(source, "md")) == [
            (SpanKind.PROSE, "Use "),
            (SpanKind.CODE, "`color`"),
            (SpanKind.PROSE, " here and [link]"),
            (SpanKind.CODE, "(http://x.com/color)"),
            (SpanKind.PROSE, ".\n\n"),
            (SpanKind.FENCE, "```\ncolor\n```"),
            (SpanKind.PROSE, "\nThe color."),
        ]

    def test_autolink(self):
        kinds = _kinds(tokenize("See <https://example.com/color> now", "md"))
        assert (SpanKind.CODE, "<https://example.com/color>") in kinds

    def test_html_comment_in_markdown(self):
        kinds = _kinds(tokenize("Text <!-- color --> end", "md"))
        assert (SpanKind.BLOCK_COMMENT, "<!-- color -->") in kinds

    def test_inline_code_needs_matching_run(self):
        """測試反引號數量不同時不算行內程式碼"""
        kinds = _kinds(tokenize("a ``b` c", "md"))
        assert kinds == [(SpanKind.PROSE, "a ``b` c")]

    def test_tilde_fence_closed_by_longer_run(self):
        assert fence_blocks("~~~\ncode\n~~~~\nafter") == [(0, 13)]

    def test_shorter_fence_does_not_close(self):
        """測試較短的圍欄不能關閉，未關閉則延伸到檔尾"""
        text = "````\ncode\n```\nmore"
        assert fence_blocks(text) == [(0, len(text))]

    def test_mixed_fence_chars_do_not_close(self):
        text = "```\ncode\n~~~\n"
        assert fence_blocks(text) == [(0, len(text))]

    def test_backtick_info_string(self):
        """測試 info string 含反引號時不是圍欄"""
        assert fence_blocks("``` a`b\ntext\n") == []

    def test_indented_fence(self):
        assert fence_blocks("   ```\nx\n   ```") == [(0, 15)]
        assert fence_blocks("    ```\nx\n```") == [(10, 13)]


class TestExtractComments:
    """註解萃取"""

    def test_strips_delimiters(self):
        """測試去除註解符號並保留原文 offset"""
        source = "int x; // initialize the color\n/* gray\n   area */\n//\n"
        spans = extract_comments(source, "c")
        assert [s.content for s in spans] == ["initialize the color", "gray\n   area"]
        assert source[spans[0].start:spans[0].end] == "// initialize the color"
        assert spans[1].opener == "/*"
        assert spans[1].closer == "*/"

    def test_strings_and_code_not_extracted(self):
        spans = extract_comments('s = "color"\n', "python")
        assert spans == []

    def test_markdown_prose(self):
        spans = extract_comments("The color.\n\n```\ncolor\n```\n", "md")
        assert [s.kind for s in spans] == [SpanKind.PROSE]
        assert spans[0].content == "The color."


class TestLanguageDetection:
    """語言偵測"""

    @pytest.mark.parametrize(
        "hint, name",
        [
            ("py", "python"),
            (".py", "python"),
            ("Python", "python"),
            ("main.go", "go"),
            ("Makefile", "make"),
            ("src/app.tsx", "javascript"),
            ("README.md", "markdown"),
            ("plain", "markdown"),
        ],
    )
    def test_get_profile(self, hint, name):
        assert get_profile(hint).name == name

    def test_get_profile_unknown(self):
        assert get_profile("unknown") is None
        assert get_profile(None) is None
        assert get_profile("  ") is None

    @pytest.mark.parametrize(
        "source, name",
        [
            ("#!/usr/bin/env python3\nprint(1)\n", "python"),
            ("#!/bin/bash\necho hi\n", "shell"),
            ("# comment\ndef f():\n    pass\n", "python"),
            ("#include <stdio.h>\nint main() {}\n", "c"),
            ("# Title\n\nSome text.", "markdown"),
            ("Just some prose.", "markdown"),
            ("Use x => y to map the color.", "markdown"),
            ("The function color() returns the color.", "markdown"),
            ("Select the color you like.\nSELECT a colour.", "markdown"),
            ("const a = 1;\nconst b = 2;\n", "javascript"),
            ("SELECT name FROM users;\n", "sql"),
        ],
    )
    def test_detect_language(self, source, name):
        assert detect_language(source).name == name
