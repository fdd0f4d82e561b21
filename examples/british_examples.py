"""
純文字轉換範例
展示 BritishEngine 的拼寫、上下文敏感詞、單位與引號處理
"""

from britfix import BritishEngine, UnitConfig


def example_1_basic():
    """範例 1: 拼寫 + 單位"""
    print("=" * 60)
    print("範例 1: 拼寫 + 單位")
    print("=" * 60)

    engine = BritishEngine()

    test_cases = [
        "The color of the 12 ft wall",
        "We analyze the behavior of the center.",
        "Water freezes at 32°F.",
        "The bag weighs 10 pounds",
    ]

    for text in test_cases:
        result = engine.convert_with_stats(text)
        print(f"原句: {text}")
        print(f"結果: {result.text}")
        print(f"統計: {result.stats.to_dict()}")
    print()


def example_2_contextual_words():
    """範例 2: 上下文敏感詞 (program / license / check ...)"""
    print("=" * 60)
    print("範例 2: 上下文敏感詞")
    print("=" * 60)

    engine = BritishEngine()

    test_cases = [
        "The TV program starts at 8.",
        "The program crashes on startup.",
        "You need a driving license.",
        "Released under the MIT License.",
        "She deposited the check at the bank.",
        "Please check the logs.",
        "I advice you to stop.",
    ]

    for text in test_cases:
        print(f"原句: {text}")
        print(f"結果: {engine.convert_to_british(text)}")
    print()


def example_3_unit_options():
    """範例 3: 關閉單位轉換 / 單次覆寫"""
    print("=" * 60)
    print("範例 3: 單位轉換開關")
    print("=" * 60)

    engine = BritishEngine(unit_config=UnitConfig(enabled=False))
    text = "A 6-foot fence around 10 acres"

    print(f"原句: {text}")
    print(f"關閉: {engine.convert_to_british(text)}")
    print(f"覆寫: {engine.convert_to_british(text, convert_units=True)}")
    print()


def example_4_smart_quotes():
    """範例 4: 引號正規化"""
    print("=" * 60)
    print("範例 4: 引號正規化")
    print("=" * 60)

    engine = BritishEngine()
    text = "“Which color?” — she asked."
    result = engine.convert_with_stats(text, normalise_smart_quotes=True)
    print(f"原句: {text}")
    print(f"結果: {result.text}")
    print(f"引號變更: {result.stats.quote_changes}")
    print()


def example_5_events():
    """範例 5: 事件回呼 (取得每一筆替換)"""
    print("=" * 60)
    print("範例 5: 事件回呼")
    print("=" * 60)

    def on_event(event):
        if event["type"] in ("replacement", "unit_conversion"):
            print(f"  [{event['kind']}] {event['original']} -> {event['replacement']} @ {event['start']}")

    engine = BritishEngine(on_event=on_event)
    engine.convert_to_british("The color of the 12 ft wall is gray.")
    print()


if __name__ == "__main__":
    example_1_basic()
    example_2_contextual_words()
    example_3_unit_options()
    example_4_smart_quotes()
    example_5_events()

    print("=" * 60)
    print("✅ 所有範例執行完成!")
    print("=" * 60)
