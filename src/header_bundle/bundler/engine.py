"""Deterministic single-header bundle assembly engine."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TextIO

from header_bundle.bundler.models import BundleResult, Module, WrappedFragment
from header_bundle.config import (
    BANNER_WIDTH,
    FRAGMENT_BANNER_CHAR,
    GeneratorConfig,
    banner_title,
    default_output_path,
    include_guard,
    load_bundle_config,
    module_dir,
)
from header_bundle.paths import display_path, resolve_fragment_path, resolve_module_dir

MAX_READ_WORKERS = 16


def _banner(text: str) -> list[str]:
    rule = f"// {FRAGMENT_BANNER_CHAR * BANNER_WIDTH}"
    return [rule, f"// {text}", rule]


def line_directive(path: str) -> str:
    """Return a directive mapping following lines back to line 1 of path."""
    return f'#line 1 "./{path}"'


def wrap_fragment(path: str, content: str, *, with_line_directive: bool = True) -> str:
    """Frame file content with start/end banners naming its path."""
    lines = [*_banner(f"{path} start"), ""]
    if with_line_directive:
        lines.append(line_directive(path))
    lines.extend([content, "", *_banner(f"{path} end"), ""])
    return "\n".join(lines)


def load_module(config: GeneratorConfig, module_name: str) -> Module:
    """Load the module definition used for one generator run."""
    bundle_config = load_bundle_config(config.root, module_name)
    directory = module_dir(config.root, module_name)
    if bundle_config.dir is not None:
        directory = resolve_module_dir(config.root, bundle_config.dir)
    return Module(
        name=module_name,
        directory=directory.resolve(),
        public=bundle_config.public,
        private=bundle_config.private,
    )


def _read_text(path: Path) -> str:
    # newline="" keeps line endings exactly as found on disk.
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def _resolve_all(root: Path, directory: Path, file_names: Sequence[str]) -> list[Path]:
    return [resolve_fragment_path(root, directory, name) for name in file_names]


def _submit_reads(executor: ThreadPoolExecutor, paths: Sequence[Path]) -> list[Future[str]]:
    return [executor.submit(_read_text, path) for path in paths]


def _collect_fragments(
    config: GeneratorConfig,
    paths: Sequence[Path],
    futures: Sequence[Future[str]],
    err_stream: TextIO,
) -> list[WrappedFragment]:
    """Gather read results back in declared order, failing on the first error."""
    fragments: list[WrappedFragment | None] = [None] * len(paths)
    for index, (path, future) in enumerate(zip(paths, futures, strict=True)):
        try:
            content = future.result()
        except (OSError, UnicodeDecodeError) as error:
            print(f'Error reading file "{path}": {error}', file=err_stream)
            for pending in futures:
                pending.cancel()
            raise
        shown = display_path(config.root, path)
        fragments[index] = WrappedFragment(
            display_path=shown,
            source_path=path,
            content=content,
            wrapped=wrap_fragment(shown, content, with_line_directive=config.line_directives),
        )
    return [fragment for fragment in fragments if fragment is not None]


def read_fragments(
    config: GeneratorConfig,
    directory: Path,
    file_names: Sequence[str],
    *,
    err_stream: TextIO | None = None,
) -> list[WrappedFragment]:
    """Read and wrap files concurrently, returning them in declared order."""
    stream = err_stream if err_stream is not None else sys.stderr
    paths = _resolve_all(config.root, directory, file_names)
    with ThreadPoolExecutor(max_workers=MAX_READ_WORKERS) as executor:
        futures = _submit_reads(executor, paths)
        return _collect_fragments(config, paths, futures, stream)


def read_module_fragments(
    config: GeneratorConfig,
    module: Module,
    *,
    err_stream: TextIO | None = None,
) -> tuple[list[WrappedFragment], list[WrappedFragment]]:
    """Read public and private groups concurrently with each other."""
    stream = err_stream if err_stream is not None else sys.stderr
    public_paths = _resolve_all(config.root, module.directory, module.public)
    private_paths = _resolve_all(config.root, module.directory, module.private)
    paths = [*public_paths, *private_paths]
    with ThreadPoolExecutor(max_workers=MAX_READ_WORKERS) as executor:
        futures = _submit_reads(executor, paths)
        fragments = _collect_fragments(config, paths, futures, stream)
    split = len(public_paths)
    return fragments[:split], fragments[split:]


def render_header_bundle(
    module_name: str,
    public: Sequence[WrappedFragment],
    private: Sequence[WrappedFragment],
    config: GeneratorConfig,
) -> str:
    """Render the complete bundle text from already wrapped fragments."""
    guard = include_guard(module_name, config.project_prefix)
    macro = config.implementation_macro
    lines = [
        *_banner(banner_title(module_name, config.project_prefix)),
        "",
        f"#ifndef {guard}",
        f"#define {guard}",
        "",
    ]
    if config.extern_c:
        lines.extend(["#ifdef __cplusplus", 'extern "C" {', "#endif  // __cplusplus", ""])
    lines.extend(
        [
            "\n".join(fragment.wrapped for fragment in public),
            "",
            f"#ifdef {macro}",
            "",
            "\n".join(fragment.wrapped for fragment in private),
            "",
            f"#endif  // {macro}",
            "",
        ]
    )
    if config.extern_c:
        lines.extend(["#ifdef __cplusplus", '}  // extern "C"', "#endif  // __cplusplus", ""])
    lines.extend([f"#endif  // {guard}", ""])
    return "\n".join(lines)


def build_header_bundle(
    config: GeneratorConfig,
    module: Module,
    *,
    err_stream: TextIO | None = None,
) -> tuple[str, list[WrappedFragment], list[WrappedFragment]]:
    """Read every fragment and render the bundle in memory without writing."""
    public, private = read_module_fragments(config, module, err_stream=err_stream)
    return render_header_bundle(module.name, public, private, config), public, private


def write_header_bundle(path: Path, content: str) -> None:
    """Replace path with content, never leaving a partially written file."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def summarize_bundle(
    config: GeneratorConfig,
    module: Module,
    output_path: Path,
    content: str,
    public: Sequence[WrappedFragment],
    private: Sequence[WrappedFragment],
) -> BundleResult:
    """Describe a bundle that has been written to output_path."""
    return BundleResult(
        module=module.name,
        output_path=output_path,
        include_guard=include_guard(module.name, config.project_prefix),
        public=tuple(fragment.display_path for fragment in public),
        private=tuple(fragment.display_path for fragment in private),
        bytes_written=len(content.encode("utf-8")),
    )


def generate_header_bundle(
    config: GeneratorConfig,
    module: Module,
    output_path: Path | None = None,
    *,
    err_stream: TextIO | None = None,
) -> BundleResult:
    """Build a module bundle and write it to output_path.

    Library entry point; the command line runs the same build, write and
    summarize steps separately so it can classify read and write failures.
    """
    target = output_path or default_output_path(config.root, module.name)
    content, public, private = build_header_bundle(config, module, err_stream=err_stream)
    write_header_bundle(target, content)
    return summarize_bundle(config, module, target, content, public, private)
