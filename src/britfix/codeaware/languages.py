"""
語言設定表

每個 LanguageProfile 描述一種語言的註解與字串語法，
供 tokenizer 的有限狀態機使用。找不到對應語言時退回 Markdown / 純文字模式。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import islice
from pathlib import PurePath
from typing import Dict, Optional, Tuple

from britfix.utils.logger import get_logger

logger = get_logger("codeaware.languages")


@dataclass(frozen=True)
class LanguageProfile:
    """
    Attributes:
        line_comments: 行註解起始符號 (//, #, --)
        block_comments: 區塊註解 (開, 關)
        strings: 字串分隔符 (支援反斜線跳脫)
        raw_strings: 不處理跳脫的字串分隔符 (Go 的 `、shell 的 ')
        multiline_strings: 可跨行的分隔符；其餘字串遇到換行即隱式結束
        triple_quotes: Python 風格三引號字串；位於行首者視為 docstring
        char_literals: ' 為字元常值 ('a'、'\\n')，不符合格式時當作一般程式碼
        comment_needs_space: 行註解符號前必須是行首或空白 (shell 的 $#、YAML 的 a#b)
        markdown: Markdown / 純文字模式
    """

    name: str
    extensions: Tuple[str, ...] = ()
    line_comments: Tuple[str, ...] = ()
    block_comments: Tuple[Tuple[str, str], ...] = ()
    strings: Tuple[str, ...] = ()
    raw_strings: Tuple[str, ...] = ()
    multiline_strings: Tuple[str, ...] = ()
    triple_quotes: bool = False
    char_literals: bool = False
    comment_needs_space: bool = False
    markdown: bool = False
    filenames: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()


_C_BLOCK = (("/*", "*/"),)

PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile(
        "c",
        ("c", "h", "cpp", "cc", "cxx", "hpp", "hh", "hxx", "cs", "java", "scala", "kt", "kts", "swift", "m", "mm"),
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=('"',),
        char_literals=True,
        aliases=("c++", "cpp", "csharp", "c#", "java", "kotlin", "scala", "swift", "objective-c"),
    ),
    LanguageProfile(
        "javascript",
        ("js", "jsx", "mjs", "cjs", "ts", "tsx", "mts", "cts"),
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=('"', "'", "`"),
        multiline_strings=("`",),
        aliases=("js", "typescript", "ts", "node"),
    ),
    LanguageProfile(
        "go",
        ("go",),
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=('"',),
        raw_strings=("`",),
        multiline_strings=("`",),
        char_literals=True,
        aliases=("golang",),
    ),
    LanguageProfile(
        "rust",
        ("rs",),
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=('"',),
        multiline_strings=('"',),
        char_literals=True,
    ),
    LanguageProfile(
        "php",
        ("php",),
        line_comments=("//", "#"),
        block_comments=_C_BLOCK,
        strings=('"', "'"),
        multiline_strings=('"', "'"),
    ),
    LanguageProfile("css", ("css",), block_comments=_C_BLOCK, strings=('"', "'")),
    LanguageProfile(
        "scss",
        ("scss", "sass", "less"),
        line_comments=("//",),
        block_comments=_C_BLOCK,
        strings=('"', "'"),
        aliases=("less",),
    ),
    LanguageProfile(
        "python",
        ("py", "pyw", "pyi"),
        line_comments=("#",),
        strings=('"', "'"),
        triple_quotes=True,
        aliases=("py", "python3"),
    ),
    LanguageProfile(
        "shell",
        ("sh", "bash", "zsh", "fish", "ksh"),
        line_comments=("#",),
        strings=('"',),
        raw_strings=("'",),
        multiline_strings=('"', "'"),
        comment_needs_space=True,
        filenames=(".bashrc", ".zshrc", ".profile", ".bash_profile"),
        aliases=("bash", "sh", "zsh"),
    ),
    LanguageProfile(
        "ruby",
        ("rb", "rake", "gemspec"),
        line_comments=("#",),
        strings=('"', "'"),
        filenames=("gemfile", "rakefile"),
    ),
    LanguageProfile(
        "perl",
        ("pl", "pm"),
        line_comments=("#",),
        strings=('"', "'"),
        comment_needs_space=True,
    ),
    LanguageProfile("r", ("r",), line_comments=("#",), strings=('"', "'")),
    LanguageProfile(
        "yaml",
        ("yml", "yaml"),
        line_comments=("#",),
        strings=('"', "'"),
        comment_needs_space=True,
    ),
    LanguageProfile("toml", ("toml",), line_comments=("#",), strings=('"', "'"), comment_needs_space=True),
    LanguageProfile(
        "ini",
        ("ini", "cfg", "conf", "properties"),
        line_comments=("#", ";"),
        comment_needs_space=True,
    ),
    LanguageProfile(
        "make",
        ("mk",),
        line_comments=("#",),
        comment_needs_space=True,
        filenames=("makefile", "gnumakefile", "dockerfile", "containerfile"),
        aliases=("makefile", "dockerfile", "docker"),
    ),
    LanguageProfile(
        "sql",
        ("sql",),
        line_comments=("--",),
        block_comments=_C_BLOCK,
        strings=("'", '"'),
        multiline_strings=("'",),
    ),
    LanguageProfile(
        "lua",
        ("lua",),
        line_comments=("--",),
        block_comments=(("--[[", "]]"),),
        strings=('"', "'"),
    ),
    LanguageProfile(
        "haskell",
        ("hs", "lhs", "elm"),
        line_comments=("--",),
        block_comments=(("{-", "-}"),),
        strings=('"',),
        char_literals=True,
        aliases=("elm",),
    ),
    LanguageProfile(
        "html",
        ("html", "htm", "xml", "xhtml", "svg", "vue", "xsl"),
        block_comments=(("<!--", "-->"),),
        aliases=("xml",),
    ),
    LanguageProfile(
        "markdown",
        ("md", "markdown", "mdx", "txt", "text", "rst"),
        markdown=True,
        aliases=("md", "plain", "plaintext", "text"),
    ),
)

MARKDOWN = next(p for p in PROFILES if p.markdown)

_BY_EXTENSION: Dict[str, LanguageProfile] = {ext: p for p in PROFILES for ext in p.extensions}
_BY_NAME: Dict[str, LanguageProfile] = {}
for _profile in PROFILES:
    _BY_NAME[_profile.name] = _profile
    for _alias in _profile.aliases:
        _BY_NAME.setdefault(_alias, _profile)
_BY_FILENAME: Dict[str, LanguageProfile] = {f: p for p in PROFILES for f in p.filenames}


def get_profile(hint: Optional[str]) -> Optional[LanguageProfile]:
    """
    依提示取得語言設定

    hint 可以是副檔名 ("py" / ".py")、檔名 ("main.go"、"Makefile") 或語言名稱 ("python")。
    無法辨識時回傳 None。
    """
    if not hint:
        return None
    key = hint.strip().lower()
    if not key:
        return None

    if key in _BY_FILENAME:
        return _BY_FILENAME[key]
    if key.startswith(".") and key[1:] in _BY_EXTENSION:
        return _BY_EXTENSION[key[1:]]
    if key in _BY_NAME:
        return _BY_NAME[key]
    if key in _BY_EXTENSION:
        return _BY_EXTENSION[key]

    path = PurePath(key)
    if path.name in _BY_FILENAME:
        return _BY_FILENAME[path.name]
    suffix = path.suffix.lstrip(".")
    if suffix in _BY_EXTENSION:
        return _BY_EXTENSION[suffix]
    return None


_SHEBANG = re.compile(r"^#!\s*(?:/usr)?(?:/local)?/bin/(?:env\s+)?(?P<prog>[\w.+-]+)")
_SHEBANG_PROGRAMS = {
    "python": "python", "python3": "python", "python2": "python",
    "bash": "shell", "sh": "shell", "zsh": "shell", "ksh": "shell", "fish": "shell",
    "node": "javascript", "deno": "javascript", "ruby": "ruby", "perl": "perl", "lua": "lua",
}

# (語言, pattern, 最少命中行數)：依序比對，第一個達到門檻者勝出
# 容易出現在一般英文裡的特徵 (JavaScript) 需要多行命中才算數
_SIGNATURES: Tuple[Tuple[str, re.Pattern, int], ...] = (
    ("php", re.compile(r"^\s*<\?php", re.MULTILINE), 1),
    ("html", re.compile(r"^\s*(?:<!DOCTYPE\s+html|<html\b|<\?xml\b)", re.IGNORECASE), 1),
    ("markdown", re.compile(r"^ {0,3}(?:```|~~~)", re.MULTILINE), 1),
    ("go", re.compile(r"^package\s+\w+\s*$.*?^func\s", re.MULTILINE | re.DOTALL), 1),
    ("rust", re.compile(r"^\s*(?:pub\s+)?fn\s+\w+\s*\(.*\)\s*(?:->.*)?\{|^\s*let\s+mut\s+\w+", re.MULTILINE), 1),
    ("c", re.compile(r"^\s*#include\s*[<\"]|^\s*(?:public|private)\s+(?:static\s+)?class\s", re.MULTILINE), 1),
    (
        "python",
        re.compile(
            r"^\s*(?:def\s+\w+\s*\(.*\)\s*(?:->.*)?:\s*$|from\s+[\w.]+\s+import\s|class\s+\w+\s*(?:\(.*\))?\s*:\s*$)",
            re.MULTILINE,
        ),
        1,
    ),
    (
        "javascript",
        re.compile(
            r"^\s*(?:(?:const|let|var)\s+\w+\s*=\s*\S.*;\s*$"
            r"|(?:export\s+)?(?:async\s+)?function\s+\w+\s*\([^)]*\)\s*\{"
            r"|import\s.+\sfrom\s+['\"]"
            r"|module\.exports\s*=)",
            re.MULTILINE,
        ),
        2,
    ),
    # 只認大寫關鍵字與完整語句結構 ("Select the color ..." 是英文)
    ("sql", re.compile(r"^\s*(?:SELECT\s.+\sFROM\s|CREATE\s+TABLE\s|INSERT\s+INTO\s|UPDATE\s+\w+\s+SET\s|DELETE\s+FROM\s)", re.MULTILINE), 1),
    # "# " 開頭在 Python / shell 中是註解，最後才當作 Markdown 標題
    ("markdown", re.compile(r"^#{1,6}[ \t]+\S", re.MULTILINE), 1),
)


def _hits(pattern: re.Pattern, sample: str, needed: int) -> bool:
    return sum(1 for _ in islice(pattern.finditer(sample), needed)) >= needed


def detect_language(text: str) -> LanguageProfile:
    """沒有提示時，以 shebang 與語法特徵猜測語言；猜不到則視為 Markdown / 純文字"""
    m = _SHEBANG.match(text)
    if m:
        prog = re.sub(r"[\d.]+$", "", m.group("prog")) or m.group("prog")
        name = _SHEBANG_PROGRAMS.get(m.group("prog")) or _SHEBANG_PROGRAMS.get(prog)
        if name:
            return _BY_NAME[name]

    sample = text[:8192]
    for name, pattern, needed in _SIGNATURES:
        if _hits(pattern, sample, needed):
            logger.debug(f"偵測語言: {name}")
            return _BY_NAME[name]
    return MARKDOWN


def resolve_profile(text: str, hint: Optional[str]) -> LanguageProfile:
    profile = get_profile(hint)
    if profile is None:
        if hint:
            logger.debug(f"未知的語言提示 {hint!r}，改用自動偵測")
        profile = detect_language(text)
    return profile
