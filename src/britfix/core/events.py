"""
事件模型（Event Model）

Engine 預設不直接輸出到 stdout。
若需要取得「本次替換了哪些片段」等資訊，請使用事件回呼（event handler）。
回呼拋出的例外只會被記錄，不會中斷轉換。
"""

from __future__ import annotations

from typing import Callable, Literal, TypedDict


class ConversionEvent(TypedDict, total=False):
    type: Literal["replacement", "unit_conversion", "quote", "warning"]
    trace_id: str

    # replacement / unit_conversion / quote
    start: int
    end: int
    original: str
    replacement: str
    kind: Literal["spelling", "contextual", "unit", "quote"]
    confidence: float

    # warning
    message: str
    source: str


ConversionEventHandler = Callable[[ConversionEvent], None]
