"""Typed models for generated header bundles."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Module:
    """One library module and its declared fragment order."""

    name: str
    directory: Path
    public: tuple[str, ...]
    private: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class WrappedFragment:
    """Content of one input file framed by start/end banners."""

    display_path: str
    source_path: Path
    content: str
    wrapped: str


@dataclass(slots=True, frozen=True)
class BundleResult:
    """Outcome of one successful generator run."""

    module: str
    output_path: Path
    include_guard: str
    public: tuple[str, ...]
    private: tuple[str, ...]
    bytes_written: int
