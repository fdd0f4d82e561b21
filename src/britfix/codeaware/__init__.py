"""
程式碼感知處理

只轉換註解與 Markdown 文字，程式碼、字串與圍欄區塊保持原樣。
"""

from .comments import extract_comments, strip_delimiters
from .ignore import IGNORE_END, IGNORE_FILE, IGNORE_NEXT, IGNORE_START, directives_in, filter_ignored
from .languages import PROFILES, LanguageProfile, detect_language, get_profile, resolve_profile
from .markdown import fence_blocks, tokenize_markdown
from .splice import rebuild_span, splice
from .tokenizer import Tokenizer, tokenize

__all__ = [
    "IGNORE_END",
    "IGNORE_FILE",
    "IGNORE_NEXT",
    "IGNORE_START",
    "PROFILES",
    "LanguageProfile",
    "Tokenizer",
    "detect_language",
    "directives_in",
    "extract_comments",
    "fence_blocks",
    "filter_ignored",
    "get_profile",
    "rebuild_span",
    "resolve_profile",
    "splice",
    "strip_delimiters",
    "tokenize",
    "tokenize_markdown",
]
