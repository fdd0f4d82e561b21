"""
程式碼模式與計時範例

只轉換註解與 Markdown 文字，程式碼、字串與圍欄區塊保持原樣。
"""

from britfix import BritishEngine, enable_timing_logging, extract_comments

C_SOURCE = """\
// initialize the color buffer
int color = 0; /* gray by default */
char *name = "color";
"""

PYTHON_SOURCE = '''\
def paint(color):
    """Apply the color to the 12 ft wall."""
    return "color"  # britfix-ignore
'''

MARKDOWN_SOURCE = """\
# Colors

The `color` option sets the default color.

```python
color = "gray"
```
"""


def demo_code_aware():
    print("=" * 60)
    print("範例 1: 程式碼模式")
    print("=" * 60)

    engine = BritishEngine()
    for language, source in (("c", C_SOURCE), ("python", PYTHON_SOURCE), ("md", MARKDOWN_SOURCE)):
        print(f"--- {language} ---")
        print(engine.process_code_aware(source, language=language))
        print(f"統計: {engine.last_stats.to_dict()}")
    print()


def demo_extract_comments():
    print("=" * 60)
    print("範例 2: 萃取註解")
    print("=" * 60)

    for span in extract_comments(C_SOURCE, "c"):
        print(f"  [{span.kind.value}] {span.start}-{span.end}: {span.content!r}")
    print()


def demo_timing():
    """使用 on_timing 回呼收集計時資訊"""
    print("=" * 60)
    print("範例 3: 計時")
    print("=" * 60)

    timing_data = []
    engine = BritishEngine(on_timing=lambda op, elapsed: timing_data.append((op, elapsed)))
    engine.process_code_aware(C_SOURCE, language="c")

    for operation, elapsed in timing_data:
        print(f"  {operation}: {elapsed:.4f}s")

    # 也可以直接開啟計時日誌
    enable_timing_logging()
    print()


if __name__ == "__main__":
    demo_code_aware()
    demo_extract_comments()
    demo_timing()
