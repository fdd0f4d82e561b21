"""
英式英文轉換引擎 (BritishEngine)

負責持有共享的字典、上下文判斷器與單位處理器，
並依序執行：引號正規化 → 拼寫替換 (含上下文判斷) → 單位轉換。

程式碼模式下只轉換註解與 Markdown 文字，再以 offset 回填原文。
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Optional

from britfix.codeaware import extract_comments as _extract_comments
from britfix.codeaware import filter_ignored, splice
from britfix.config import EngineConfig
from britfix.core.errors import ConfigError
from britfix.core.events import ConversionEvent
from britfix.core.types import ChangeStats, ConversionResult, Span
from britfix.dictionary import (
    BUILTIN_CONTEXTUAL_WORDS,
    ContextualWord,
    ContextualWordDetector,
    Replacement,
    SpellingDictionary,
    SpellingReplacer,
    build_dictionary,
    load_contextual_config,
)
from britfix.quotes import QuoteStyle, normalise_quotes
from britfix.units import UnitConfig, UnitConversion, UnitProcessor, load_unit_config
from britfix.utils.logger import TimingContext, get_logger, setup_logger
from britfix.utils.text import count_words


class BritishEngine:
    """
    美式 → 英式英文轉換引擎

    生命週期:
    - Engine 應在應用程式啟動時建立一次 (字典與設定檔只讀取一次)
    - 之後的每次轉換互不影響，只有 last_stats 會被更新

    使用方式:
        engine = BritishEngine()
        engine.convert_to_british("The color of the 12 ft wall")
        # -> "The colour of the 3.7 metres wall"

        engine.process_code_aware("// initialize the color\\nint color = 0;", language="c")
        # -> "// initialise the colour\\nint color = 0;"
    """

    _engine_name = "british"

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        verbose: bool = False,
        on_timing=None,
        on_event=None,
        dictionary: Optional[SpellingDictionary] = None,
        contextual_words: Optional[Iterable[ContextualWord]] = None,
        unit_config: Optional[UnitConfig] = None,
        quote_style: QuoteStyle | str = QuoteStyle.STRAIGHT,
    ):
        """
        初始化引擎

        Args:
            config: 引擎配置；未提供時以 verbose / on_timing / on_event 建立
            dictionary: 直接指定字典 (不讀取使用者字典)
            contextual_words: 自訂上下文敏感詞規則 (取代內建規則，不讀取設定檔)
            unit_config: 直接指定單位設定 (不讀取設定檔)
            quote_style: normalise_smart_quotes=True 時使用的引號樣式
        """
        if config is None:
            config = EngineConfig(verbose=verbose, on_timing=on_timing, on_event=on_event)
        self.config = config
        self._init_logger(verbose=config.verbose, on_timing=config.on_timing)
        self._on_event = config.on_event
        self.quote_style = QuoteStyle(quote_style)
        self.last_stats = ChangeStats()

        with self._log_timing("BritishEngine.__init__"):
            if dictionary is None:
                dictionary = build_dictionary(
                    config.user_dictionary_path,
                    create_if_missing=config.create_missing_user_dictionary,
                )
            self._dictionary = dictionary
            if contextual_words is None:
                contextual_words = load_contextual_config(config.contextual_config_path).apply(
                    BUILTIN_CONTEXTUAL_WORDS
                )
            self._detector = ContextualWordDetector(contextual_words, window_words=config.context_window_words)
            self._replacer = SpellingReplacer(dictionary, self._detector)

            self._unit_config = self._resolve_unit_config(unit_config)
            self._units_enabled = self._unit_config.enabled
            active = self._unit_config.copy()
            active.enabled = True
            self._units = UnitProcessor(active)

            self._logger.info(
                f"BritishEngine initialized ({len(dictionary)} 筆拼寫, "
                f"{len(self._detector.supported_words())} 個上下文敏感詞, "
                f"單位轉換={'on' if self._units_enabled else 'off'})"
            )

    # ------------------------------------------------------------------
    # logging
    # ------------------------------------------------------------------

    def _init_logger(self, verbose: bool = False, on_timing=None) -> None:
        self._verbose = verbose
        self._timing_callback = on_timing
        if verbose:
            setup_logger(level=logging.DEBUG)
        self._logger = get_logger(f"engine.{self._engine_name}")

    def _log_timing(self, operation: str) -> TimingContext:
        return TimingContext(
            operation=operation,
            logger=self._logger,
            level=logging.DEBUG,
            callback=self._timing_callback,
        )

    def _resolve_unit_config(self, unit_config: Optional[UnitConfig]) -> UnitConfig:
        if unit_config is None:
            return load_unit_config(self.config.unit_config_path)
        try:
            return unit_config.validate()
        except ConfigError as exc:
            self._logger.warning(f"單位設定無效，改用預設值: {exc}")
            self._emit({"type": "warning", "message": str(exc), "source": "unit_config"})
            return UnitConfig()

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------

    def _emit(self, event: ConversionEvent) -> None:
        try:
            if self._on_event is not None:
                self._on_event(event)
        except Exception:
            self._logger.exception("on_event 回呼執行失敗")

    def _emit_replacement(self, rep: Replacement, *, offset: int, trace_id: str) -> None:
        self._emit(
            {
                "type": "replacement",
                "trace_id": trace_id,
                "start": rep.start + offset,
                "end": rep.end + offset,
                "original": rep.original,
                "replacement": rep.replacement,
                "kind": rep.kind,
                "confidence": 1.0,
            }
        )

    def _emit_unit(self, conv: UnitConversion, *, offset: int, trace_id: str) -> None:
        self._emit(
            {
                "type": "unit_conversion",
                "trace_id": trace_id,
                "start": conv.start + offset,
                "end": conv.end + offset,
                "original": conv.original,
                "replacement": conv.replacement,
                "kind": "unit",
                "confidence": conv.confidence,
            }
        )
        self._logger.debug(f"[單位轉換] '{conv.original}' -> '{conv.replacement}' ({conv.confidence:.2f})")

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    @property
    def unit_conversion_enabled(self) -> bool:
        return self._units_enabled

    @property
    def unit_config(self) -> UnitConfig:
        return self._unit_config

    def set_unit_conversion_enabled(self, enabled: bool) -> None:
        self._units_enabled = bool(enabled)
        self._logger.debug(f"單位轉換: {'on' if self._units_enabled else 'off'}")

    def dictionary(self) -> Dict[str, str]:
        """目前生效的拼寫對照表 (內建 + 使用者字典) 的副本"""
        return self._dictionary.as_dict()

    def contextual_words(self) -> List[str]:
        """需要上下文判斷的字 (不會走整字查表)"""
        return self._detector.supported_words()

    def extract_comments(self, code: str, language_hint: Optional[str] = None) -> List[Span]:
        return _extract_comments(code, language_hint)

    # ------------------------------------------------------------------
    # conversion
    # ------------------------------------------------------------------

    def _convert(
        self,
        text: str,
        *,
        normalise_smart_quotes: bool,
        convert_units: bool,
        trace_id: str,
        offset: int = 0,
    ) -> ConversionResult:
        stats = ChangeStats(total_words=count_words(text))
        if not text:
            return ConversionResult(text, stats)

        if normalise_smart_quotes:
            text, stats.quote_changes = normalise_quotes(text, self.quote_style)
            if stats.quote_changes:
                self._emit(
                    {
                        "type": "quote",
                        "trace_id": trace_id,
                        "kind": "quote",
                        "message": f"{stats.quote_changes} 個引號 / 破折號已正規化",
                    }
                )

        text, replacements = self._replacer.replace(text)
        stats.spelling_changes = len(replacements)
        for rep in replacements:
            self._emit_replacement(rep, offset=offset, trace_id=trace_id)

        if convert_units:
            text, conversions = self._units.process(text)
            stats.unit_conversions = len(conversions)
            for conv in conversions:
                self._emit_unit(conv, offset=offset, trace_id=trace_id)

        return ConversionResult(text, stats)

    def _units_for_call(self, convert_units: Optional[bool]) -> bool:
        return self._units_enabled if convert_units is None else bool(convert_units)

    def convert_with_stats(
        self,
        text: str,
        normalise_smart_quotes: bool = False,
        *,
        convert_units: Optional[bool] = None,
        trace_id: Optional[str] = None,
    ) -> ConversionResult:
        """
        轉換一段純文字並回傳統計

        Args:
            text: 輸入文本
            normalise_smart_quotes: 是否先做引號正規化
            convert_units: 覆寫本次呼叫的單位轉換開關 (None 表示沿用引擎設定)
            trace_id: 事件追蹤 ID，未提供時自動產生
        """
        with self._log_timing("BritishEngine.convert_to_british"):
            result = self._convert(
                text,
                normalise_smart_quotes=normalise_smart_quotes,
                convert_units=self._units_for_call(convert_units),
                trace_id=trace_id or uuid.uuid4().hex,
            )
        self.last_stats = result.stats
        return result

    def convert_to_british(
        self,
        text: str,
        normalise_smart_quotes: bool = False,
        *,
        convert_units: Optional[bool] = None,
    ) -> str:
        return self.convert_with_stats(text, normalise_smart_quotes, convert_units=convert_units).text

    def process_code_aware_with_stats(
        self,
        text: str,
        normalise_smart_quotes: bool = False,
        *,
        language: Optional[str] = None,
        convert_units: Optional[bool] = None,
        trace_id: Optional[str] = None,
    ) -> ConversionResult:
        """
        只轉換註解 / 文字區間，程式碼與字串保持原樣

        Args:
            language: 副檔名 / 檔名 / 語言名稱，None 時自動偵測

        Raises:
            SpliceError: 回填區間不一致 (程式錯誤，不會默默破壞文件)
        """
        trace_id = trace_id or uuid.uuid4().hex
        units = self._units_for_call(convert_units)
        stats = ChangeStats()

        with self._log_timing("BritishEngine.process_code_aware"):
            spans = filter_ignored(text, _extract_comments(text, language))
            edits = []
            for span in spans:
                raw = text[span.start:span.end]
                skip = len(span.opener) if raw.startswith(span.opener) else 0
                offset = span.start + max(raw.find(span.content, skip), 0)
                result = self._convert(
                    span.content,
                    normalise_smart_quotes=normalise_smart_quotes,
                    convert_units=units,
                    trace_id=trace_id,
                    offset=offset,
                )
                stats += result.stats
                if result.text != span.content:
                    edits.append((span, result.text))

            converted = splice(text, edits)
            self._logger.debug(f"程式碼模式: {len(spans)} 個區間, {len(edits)} 個有變更")

        self.last_stats = stats
        return ConversionResult(converted, stats)

    def process_code_aware(
        self,
        text: str,
        normalise_smart_quotes: bool = False,
        *,
        language: Optional[str] = None,
        convert_units: Optional[bool] = None,
    ) -> str:
        return self.process_code_aware_with_stats(
            text, normalise_smart_quotes, language=language, convert_units=convert_units
        ).text
