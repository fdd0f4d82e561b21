"""
britfix 例外階層

錯誤分類：
- 設定錯誤 (ConfigError)：使用者字典 / 單位設定檔無法解析或數值越界。
  Engine 建構時會記錄 warning 並退回預設值，不會中斷。
- 偵測放棄：無法辨識的單位、未通過上下文檢查的字等，直接跳過，不是錯誤。
- 程式錯誤 (SpliceError)：回填區間越界或重疊，必須大聲失敗，不可默默破壞文件。
"""

from __future__ import annotations


class BritfixError(Exception):
    """britfix 所有例外的基底類別"""


class ConfigError(BritfixError):
    """設定值不合法"""


class DictionaryLoadError(ConfigError):
    """字典檔讀取或解析失敗"""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"無法載入字典 {path}: {reason}")
        self.path = path
        self.reason = reason


class SpliceError(BritfixError, ValueError):
    """區間回填失敗 (越界、重疊或順序錯誤)"""
