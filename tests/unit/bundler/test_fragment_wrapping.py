from __future__ import annotations

from header_bundle.bundler import wrap_fragment

RULE = "// " + "=" * 78


def test_wrap_fragment_with_line_directive() -> None:
    wrapped = wrap_fragment("src/cpu/public.h", "int x;\n")

    assert wrapped == "\n".join(
        [
            RULE,
            "// src/cpu/public.h start",
            RULE,
            "",
            '#line 1 "./src/cpu/public.h"',
            "int x;\n",
            "",
            RULE,
            "// src/cpu/public.h end",
            RULE,
            "",
        ]
    )


def test_wrap_fragment_without_line_directive() -> None:
    wrapped = wrap_fragment("src/pit/pit.c", "int y;", with_line_directive=False)

    assert "#line" not in wrapped
    assert wrapped.startswith(f"{RULE}\n// src/pit/pit.c start\n{RULE}\n\nint y;\n")
    assert wrapped.endswith(f"{RULE}\n// src/pit/pit.c end\n{RULE}\n")


def test_wrap_fragment_names_file_exactly_twice() -> None:
    wrapped = wrap_fragment("src/dma/dma.c", "", with_line_directive=False)

    assert wrapped.count("// src/dma/dma.c start") == 1
    assert wrapped.count("// src/dma/dma.c end") == 1
