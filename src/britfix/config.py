"""
全域配置模組

提供統一的配置類別，控制日誌、計時、設定檔位置等行為。

使用方式:
    from britfix import BritishEngine

    # 簡單開啟 verbose 模式
    engine = BritishEngine(verbose=True)

    # 進階: 使用標準 logging 控制
    import logging
    logging.getLogger("britfix").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from britfix.core.events import ConversionEventHandler
from britfix.dictionary.contextual import DEFAULT_WINDOW_WORDS
from britfix.dictionary.contextual_config import CONTEXTUAL_CONFIG_FILENAME
from britfix.dictionary.store import USER_DICTIONARY_FILENAME
from britfix.units.config import UNIT_CONFIG_FILENAME
from britfix.utils.logger import setup_logger

CONFIG_DIR_ENV = "BRITFIX_CONFIG_DIR"


def configure_logging(verbose: bool = False) -> None:
    """
    根據 verbose 設定配置 logging

    verbose=False 時不主動設定，讓使用者透過標準 logging 控制。
    """
    if verbose:
        setup_logger(level=logging.DEBUG)


def default_config_dir() -> Path:
    """$BRITFIX_CONFIG_DIR，未設定時為 ~/.config/britfix"""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "britfix"


@dataclass
class EngineConfig:
    """
    引擎配置類別 (進階用途)

    一般使用者只需要 BritishEngine(verbose=True) 即可。

    屬性:
        verbose: 是否開啟詳細日誌
        on_timing: 計時回呼函數 (operation: str, elapsed: float) -> None
        on_event: 每次替換的事件回呼
        config_dir: 使用者設定目錄
        user_dictionary_file / unit_config_file / contextual_config_file: 設定目錄下的檔名
        create_missing_user_dictionary: 使用者字典不存在時是否建立範例檔
        context_window_words: 上下文敏感詞左右各看幾個字
    """

    verbose: bool = False
    on_timing: Optional[Callable[[str, float], None]] = None
    on_event: Optional[ConversionEventHandler] = None

    config_dir: Path = field(default_factory=default_config_dir)
    user_dictionary_file: str = USER_DICTIONARY_FILENAME
    unit_config_file: str = UNIT_CONFIG_FILENAME
    contextual_config_file: str = CONTEXTUAL_CONFIG_FILENAME
    create_missing_user_dictionary: bool = True

    context_window_words: int = DEFAULT_WINDOW_WORDS

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir).expanduser()
        configure_logging(self.verbose)

    @property
    def user_dictionary_path(self) -> Path:
        return self.config_dir / self.user_dictionary_file

    @property
    def unit_config_path(self) -> Path:
        return self.config_dir / self.unit_config_file

    @property
    def contextual_config_path(self) -> Path:
        return self.config_dir / self.contextual_config_file
