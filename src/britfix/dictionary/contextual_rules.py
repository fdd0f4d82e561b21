"""
內建上下文敏感詞規則

這些詞在美式與英式中都合法，意義不同時拼法不同
(program / programme、license / licence ...)，
不能靠字典直接替換，必須先通過上下文規則。

格式說明:
    ContextualWord(
        word="program",             # 目標字 (小寫)
        replacement="programme",    # 替換字；與 word 相同表示「保留原字」
        exclude_patterns=(...),     # 視窗內任一命中 → 此規則不適用
        include_patterns=(...),     # 非空時，視窗內至少命中一條才適用
        priority=0,                 # 同一個字有多條規則時，高優先先評估
    )

所有 pattern 皆為 regex，以忽略大小寫方式比對視窗文字。
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .contextual import ContextualWord

_MODALS = r"(?:to|will|shall|must|may|might|can|could|would|should|please|let's|i|we|you|they|don't|didn't|doesn't|won't|never|always|often)"
_THIRD_PERSON = r"(?:he|she|it|who|which|that|company|vendor|university)"
_DETERMINERS = r"(?:a|an|the|this|that|these|those|my|your|his|her|its|our|their|no|any|every|valid|new)"

# --- license / licence -----------------------------------------------------

_LICENSE_EXCLUDE = (
    # 授權條款名稱 (MIT License、Apache 2.0 license ...)
    r"\b(?:mit|bsd|gpl|lgpl|agpl|apache|mozilla|mpl|isc|eclipse|artistic|zlib|creative\s+commons|open[\s-]source|software|unlicense)\b"
    r"(?:[\s-]+v?\d+(?:\.\d+)*)?[\s-]+licen[sc]es?\b",
    r"\blicen[sc]es?\s*[-:]\s*(?:mit|bsd|gpl|apache|isc)\b",
    # 檔名
    r"\blicen[sc]es?\.(?:txt|md|rst)\b",
    r"(?-i:\bLICENSES?\b)",
    # 動詞用法
    rf"\b{_MODALS}\s+(?:not\s+)?license\b",
    rf"\b{_THIRD_PERSON}\s+licenses\b",
    r"\blicense\s+(?:it|them|this|these|those|the|a|an|our|your|their|its|his|her|my|all|each|every)\b",
    r"\blicense\s+plates?\b",
)

# --- practice / practise ---------------------------------------------------

_PRACTICE_INCLUDE = (
    rf"\b{_MODALS}\s+(?:not\s+)?practice\b",
    rf"\b{_THIRD_PERSON}\s+practices\b",
    r"\bpractice\s+(?:it|them|this|that|daily|regularly|every\s+day|more|hard|what)\b",
)
_PRACTICE_EXCLUDE = (
    rf"\b{_DETERMINERS}\s+practices?\b",
    r"\b(?:best|good|bad|common|standard|medical|legal|private|general|clinical|in|into|out\s+of)\s+practices?\b",
    r"\bpractices?\s+(?:session|sessions|test|tests|exam|round|match|area|room|makes\s+perfect)\b",
)

# --- program / programme ---------------------------------------------------

_PROGRAM_EXCLUDE = (
    r"\b(?:computer|software|c|c\+\+|python|java|rust|go|sample|test|simple|executable|running|compiled?|"
    r"installed|written|debugged|main|binary|cli|command[\s-]line|console|terminal)\s+programs?\b",
    r"\bprograms?\s+(?:code|files?|crash(?:es|ed)?|runs?|ran|executes?|exits?|output|counter|flow|logic|source|"
    r"listing|binary|terminates?|calls?)\b",
    r"\b(?:code|coding|software|compiler|compile|execute|execution|runtime|debug(?:ger)?|function|variable|"
    r"binary|script|algorithm|api|cpu|memory|stdout|stdin|exit\s+code|source\s+code|install)\b",
    r"\b(?:to|will|can|could|would|should|must|i|we|you|they)\s+program\b",
)

# --- check / cheque --------------------------------------------------------

_CHECK_INCLUDE = (
    r"\b(?:bank|banks|cash|cashed|cashing|deposit(?:ed|ing)?|bounced?|payable|payee|paid|pay|"
    r"endorse[ds]?|chequebook|checkbook|overdraft|traveller'?s|traveler'?s|certified|cashier'?s)\b",
    r"\bchecks?\s+(?:for|of)\s+[$£€]\s?\d",
    r"\b(?:write|wrote|written|writing|sign|signed|blank|personal)\s+(?:a\s+|the\s+|me\s+a\s+)?checks?\b",
)
_CHECK_EXCLUDE = (
    rf"\b{_MODALS}\s+(?:not\s+)?(?:double[\s-])?check\b",
    r"\bchecks?\s+(?:in|out|up|on|if|whether|that|the\s+(?:code|logs?|status|result|output|box|value))\b",
    r"\b(?:spell|sanity|health|type|null|bounds|background|security|fact|reality|spot|rain|status|unit|"
    r"lint|quality)[\s-]+checks?\b",
    r"\bcheck\s*(?:box|list|mark|point|sum)\b",
)

# --- advice / advise -------------------------------------------------------

_ADVICE_INCLUDE = (
    rf"\b{_MODALS}\s+(?:not\s+)?(?:strongly\s+)?advice\b",
    rf"\b{_THIRD_PERSON}\s+advices\b",
    r"\badvices?\s+(?:him|her|them|us|me|against)\b",
)
_ADVICE_EXCLUDE = (
    rf"\b{_DETERMINERS}\s+advice\b",
    r"\b(?:some|much|more|good|bad|sound|expert|legal|medical|financial|professional|of|for|on|with|without)\s+advice\b",
    r"\b(?:give|gives|gave|given|giving|offer|offered|need|needs|want|take|took|ask|asked|seek|get|got)\s+(?:\w+\s+)?advice\b",
)

# --- tire / tyre -----------------------------------------------------------

_TIRE_EXCLUDE = (
    r"\btires?\s+(?:of|out|easily|quickly|soon)\b",
    rf"\b{_MODALS}\s+(?:not\s+)?tire\b",
    rf"\b{_THIRD_PERSON}\s+tires\b",
)

# --- curb / kerb -----------------------------------------------------------

_CURB_INCLUDE = (
    r"\b(?:on|off|onto|along|against|at|to|from|over|near|by|beside)\s+the\s+curbs?\b",
    r"\b(?:street|road|sidewalk|pavement|gutter|parked|parking|car|bus|pedestrian|crossing|driveway)\b",
)
_CURB_EXCLUDE = (
    rf"\b{_MODALS}\s+(?:not\s+)?curb\b",
    r"\bcurbs?\s+(?:the|their|its|our|your|his|her)\s+(?:spending|growth|inflation|enthusiasm|appetite|use|power|impact)\b",
    r"\bcurb\s+appeal\b",
)

# --- meter / metre ---------------------------------------------------------

_METER_DEVICE = (
    r"\b(?:gas|water|electric|electricity|parking|smart|light|exposure|flow|power|taxi|utility|volt|amp|"
    r"pressure|pedometer|speed|sound|level|moisture|ph|dose|radiation)\s+meters?\b",
    r"\bmeters?\s+(?:reading|readings|reader|readers|box|maid|man|cupboard)\b",
    r"\b(?:read|install|installed|check|checked|replace|replaced|fit|fitted)\s+(?:the|a|your|our)\s+meters?\b",
)

# --- story / storey --------------------------------------------------------

_NUMBER_WORDS = r"(?:\d+|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|twenty|thirty|forty|fifty|multi|single|double)"
_STOREY_INCLUDE = (
    rf"\b{_NUMBER_WORDS}[\s-]+stor(?:y|ies)\s+(?:building|house|home|tower|block|structure|apartment|"
    r"office|car\s+park|garage|hotel|mansion|townhouse|extension)\b",
    rf"\b{_NUMBER_WORDS}\s+stories\s+(?:tall|high|up|above|below|underground)\b",
    r"\b(?:top|upper|ground|first|second|third|fourth|fifth|lower|bottom)\s+stor(?:y|ies)\s+(?:of\s+the\s+"
    r"(?:building|house|tower|block)|window|flat|apartment|office)\b",
)

# --- dialog / dialogue -----------------------------------------------------

_DIALOG_EXCLUDE = (
    r"\b(?:modal|popup|pop-up|file|open|save|print|confirmation|confirm|alert|settings|preferences|options|"
    r"about|error|warning|login|system|custom|native|dismissable|dismissible)\s+dialogs?\b",
    r"\bdialogs?\s+(?:box|boxes|window|windows|component|components|element|button|buttons|title|class|api|"
    r"widget|ref|props?|state|handler|service|opens?|closes?)\b",
    r"\b(?:show|open|close|display|render|dismiss|hide|toggle)(?:s|ed|ing)?\s+(?:the\s+|a\s+|this\s+)?dialogs?\b",
    r"<\s*/?\s*dialog\b",
)


def _forms(
    pairs: Sequence[Tuple[str, str]],
    *,
    exclude: Tuple[str, ...] = (),
    include: Tuple[str, ...] = (),
    priority: int = 0,
    description: str = "",
) -> List[ContextualWord]:
    """同一組規則套用到單複數等多個字形"""
    return [
        ContextualWord(
            word=word,
            replacement=replacement,
            base=pairs[0][0],
            exclude_patterns=exclude,
            include_patterns=include,
            priority=priority,
            description=description,
        )
        for word, replacement in pairs
    ]


BUILTIN_CONTEXTUAL_WORDS: Tuple[ContextualWord, ...] = tuple(
    _forms([("license", "licence"), ("licenses", "licences")], exclude=_LICENSE_EXCLUDE, description="noun")
    + _forms([("practice", "practise"), ("practices", "practises")], include=_PRACTICE_INCLUDE,
             exclude=_PRACTICE_EXCLUDE, description="verb")
    + _forms([("program", "programme"), ("programs", "programmes")], exclude=_PROGRAM_EXCLUDE,
             description="broadcast / scheme")
    + _forms([("check", "cheque"), ("checks", "cheques")], include=_CHECK_INCLUDE, exclude=_CHECK_EXCLUDE,
             description="payment")
    + _forms([("advice", "advise"), ("advices", "advises")], include=_ADVICE_INCLUDE, exclude=_ADVICE_EXCLUDE,
             description="verb")
    + _forms([("tire", "tyre"), ("tires", "tyres")], exclude=_TIRE_EXCLUDE, description="wheel")
    + _forms([("curb", "kerb"), ("curbs", "kerbs")], include=_CURB_INCLUDE, exclude=_CURB_EXCLUDE,
             description="road edge")
    + _forms([("meter", "meter"), ("meters", "meters")], include=_METER_DEVICE, priority=10,
             description="measuring device")
    + _forms([("meter", "metre"), ("meters", "metres")], exclude=(r"\bmeters?\s*[=(\[]",),
             description="unit of length")
    + _forms([("story", "storey"), ("stories", "storeys")], include=_STOREY_INCLUDE, description="building level")
    + _forms([("dialog", "dialogue"), ("dialogs", "dialogues")], exclude=_DIALOG_EXCLUDE, description="conversation")
)
