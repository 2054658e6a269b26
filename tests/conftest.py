from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

CPU_PUBLIC_H = "#ifndef YAX86_CPU_PUBLIC_H\n#define YAX86_CPU_PUBLIC_H\nint RunMainLoop(void);\n#endif\n"
CPU_C = '#include "public.h"\nint RunMainLoop(void) { return 0; }\n'
COMMON_H = "#define YAX86_PRIVATE static\n"

WriteModuleFn = Callable[..., Path]


@pytest.fixture
def write_module(tmp_path: Path) -> WriteModuleFn:
    """Create src/<name>/ with the given files and a bundle.json listing them."""

    def write(
        name: str,
        files: dict[str, str],
        public: list[str],
        private: list[str],
        extra: dict[str, object] | None = None,
    ) -> Path:
        directory = tmp_path / "src" / name
        directory.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            target = directory / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8", newline="")
        payload: dict[str, object] = {"public": public, "private": private}
        payload.update(extra or {})
        (directory / "bundle.json").write_text(json.dumps(payload), encoding="utf-8")
        return directory

    return write


@pytest.fixture
def cpu_module(tmp_path: Path, write_module: WriteModuleFn) -> Path:
    (tmp_path / "src").mkdir(exist_ok=True)
    (tmp_path / "src" / "common.h").write_text(COMMON_H, encoding="utf-8")
    return write_module(
        "cpu",
        {"public.h": CPU_PUBLIC_H, "cpu.c": CPU_C},
        public=["public.h"],
        private=["../common.h", "cpu.c"],
    )
