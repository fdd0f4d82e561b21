"""
拼寫字典 (Dictionary Store)

負責：
- 載入內建的美式 → 英式拼寫對照表 (data/american_spellings.json)
- 合併使用者字典 (使用者條目在 key 衝突時優先)
- 提供大小寫不敏感、大小寫保留的整字查詢

字典方向以 Direction 明確標記，不從內容推斷。
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from britfix.core.errors import DictionaryLoadError
from britfix.core.types import Direction
from britfix.utils.logger import get_logger, log_timing
from britfix.utils.text import match_case

logger = get_logger("dictionary")

BUILTIN_RESOURCE = "american_spellings.json"
USER_DICTIONARY_FILENAME = "american_spellings.json"
USER_DICTIONARY_EXAMPLE = {"customize": "customise"}


class SpellingDictionary:
    """
    不可變的拼寫對照表

    使用方式:
        d = SpellingDictionary({"color": "colour"})
        d.lookup("Color")   # -> "Colour"
        d.lookup("COLOR")   # -> "COLOUR"
        d.lookup("table")   # -> None
    """

    def __init__(
        self,
        mapping: Mapping[str, str],
        direction: Direction = Direction.AMERICAN_TO_BRITISH,
    ) -> None:
        self._entries: Dict[str, str] = {k.lower(): v for k, v in mapping.items() if k and v}
        self._direction = direction

    @property
    def direction(self) -> Direction:
        return self._direction

    def lookup(self, word: str) -> Optional[str]:
        """
        整字查詢

        Returns:
            依原字大小寫調整後的替換字；找不到回傳 None
        """
        if not word:
            return None
        target = self._entries.get(word.lower())
        if target is None:
            return None
        return match_case(word, target)

    def get(self, key: str) -> Optional[str]:
        """不做大小寫調整的原始查詢"""
        return self._entries.get(key.lower())

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterable[Tuple[str, str]]:
        return self._entries.items()

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def merged(self, overrides: Mapping[str, str]) -> "SpellingDictionary":
        """回傳合併後的新字典 (overrides 優先)"""
        combined = dict(self._entries)
        combined.update({k.lower(): v for k, v in overrides.items() if k and v})
        return SpellingDictionary(combined, self._direction)

    def without(self, words: Iterable[str]) -> "SpellingDictionary":
        excluded = {w.lower() for w in words}
        return SpellingDictionary(
            {k: v for k, v in self._entries.items() if k not in excluded},
            self._direction,
        )

    def inverted(self) -> "SpellingDictionary":
        """
        反向字典 (英式 → 美式)

        多個 key 對到同一個值時，保留字母序最前的 key。
        """
        reverse: Dict[str, str] = {}
        for american, british in sorted(self._entries.items()):
            reverse.setdefault(british.lower(), american)
        return SpellingDictionary(reverse, self._direction.reversed())

    def __repr__(self) -> str:
        return f"SpellingDictionary(direction={self._direction.value}, entries={len(self._entries)})"


def _parse_mapping(raw: object, source: object, *, strict: bool) -> Dict[str, str]:
    if not isinstance(raw, dict):
        raise DictionaryLoadError(source, f"頂層必須是 JSON object，收到 {type(raw).__name__}")

    mapping: Dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(key, str) and isinstance(value, str) and key.strip() and value.strip():
            mapping[key.strip().lower()] = value.strip()
            continue
        if strict:
            raise DictionaryLoadError(source, f"條目 {key!r} 的值必須是非空字串")
        logger.warning(f"略過不合法的字典條目 {key!r} -> {value!r} ({source})")
    return mapping


@lru_cache(maxsize=1)
@log_timing("load_builtin_dictionary")
def _load_builtin_mapping() -> Tuple[Tuple[str, str], ...]:
    try:
        payload = resources.files("britfix.dictionary.data").joinpath(BUILTIN_RESOURCE).read_text(encoding="utf-8")
        raw = json.loads(payload)
    except (OSError, ValueError) as exc:
        raise DictionaryLoadError(BUILTIN_RESOURCE, str(exc)) from exc
    return tuple(_parse_mapping(raw, BUILTIN_RESOURCE, strict=True).items())


def load_builtin_dictionary() -> SpellingDictionary:
    """載入內建字典 (結果快取，檔案只解析一次)"""
    return SpellingDictionary(dict(_load_builtin_mapping()))


def load_user_dictionary(
    path: Path | str,
    *,
    create_if_missing: bool = True,
    strict: bool = False,
) -> Dict[str, str]:
    """
    讀取使用者字典

    - 檔案不存在：create_if_missing=True 時建立範例檔 ({"customize": "customise"})
    - 檔案格式錯誤：strict=False 時記錄 warning 並回傳空 dict；strict=True 時拋出 DictionaryLoadError

    Args:
        path: JSON 檔路徑
        create_if_missing: 是否自動建立範例檔
        strict: 是否在格式錯誤時拋出例外

    Returns:
        dict: 小寫 key 的 american -> british 映射
    """
    path = Path(path).expanduser()

    if not path.exists():
        if create_if_missing:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(json.dumps(USER_DICTIONARY_EXAMPLE, indent=2) + "\n", encoding="utf-8")
                logger.info(f"已建立使用者字典範例檔: {path}")
            except OSError as exc:
                if strict:
                    raise DictionaryLoadError(path, str(exc)) from exc
                logger.warning(f"無法建立使用者字典 {path}: {exc}")
                return {}
            return dict(USER_DICTIONARY_EXAMPLE)
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return _parse_mapping(raw, path, strict=strict)
    except (OSError, ValueError, DictionaryLoadError) as exc:
        if strict:
            if isinstance(exc, DictionaryLoadError):
                raise
            raise DictionaryLoadError(path, str(exc)) from exc
        logger.warning(f"使用者字典無法解析，僅使用內建字典: {path} ({exc})")
        return {}


def build_dictionary(
    user_path: Path | str | None = None,
    *,
    create_if_missing: bool = True,
) -> SpellingDictionary:
    """內建字典 + 使用者字典 (使用者條目優先)"""
    dictionary = load_builtin_dictionary()
    if user_path is None:
        return dictionary

    overrides = load_user_dictionary(user_path, create_if_missing=create_if_missing)
    if overrides:
        logger.debug(f"合併使用者字典 {len(overrides)} 筆")
        dictionary = dictionary.merged(overrides)
    return dictionary
