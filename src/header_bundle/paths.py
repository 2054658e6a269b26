"""Path resolution helpers for root-scoped fragment access."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a declared path resolves outside the source root."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def _normalize_relative_input(candidate: str) -> tuple[str, bool]:
    """Normalize path separators and detect absolute-style inputs."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, False


def _resolve_under_root(root: Path, base: Path, candidate: str, kind: str) -> Path:
    normalized, is_absolute_style = _normalize_relative_input(candidate)
    if not normalized:
        raise PathBlockedError(
            reason=f"{kind} path is empty.",
            hint="Declare a path relative to the module directory such as 'public.h'.",
        )
    if is_absolute_style:
        raise PathBlockedError(
            reason=f"Absolute {kind.lower()} path is not allowed: {candidate}",
            hint="Declare paths relative to the module directory.",
        )

    # normpath collapses '..' lexically; symlinks are resolved afterwards.
    joined = Path(os.path.normpath(base / Path(*normalized.split("/"))))
    resolved = joined.resolve(strict=False)
    if not resolved.is_relative_to(root.resolve()):
        raise PathBlockedError(
            reason=f"{kind} path escapes the source root: {candidate}",
            hint="Keep declared files under the directory passed as --root.",
        )
    return resolved


def resolve_module_dir(root: Path, candidate: str) -> Path:
    """Resolve a bundle.json 'dir' override against the source root."""
    return _resolve_under_root(root, root.resolve(), candidate, kind="Module directory")


def resolve_fragment_path(root: Path, module_dir: Path, file_name: str) -> Path:
    """Resolve one declared file name against its module directory."""
    return _resolve_under_root(root, module_dir, file_name, kind="Fragment")


def display_path(root: Path, path: Path) -> str:
    """Return the root-relative POSIX path used in banners and #line directives."""
    return path.resolve(strict=False).relative_to(root.resolve()).as_posix()
