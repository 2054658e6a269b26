"""Header bundle assembly interfaces."""

from .engine import (
    build_header_bundle,
    generate_header_bundle,
    load_module,
    read_fragments,
    read_module_fragments,
    render_header_bundle,
    summarize_bundle,
    wrap_fragment,
    write_header_bundle,
)
from .models import BundleResult, Module, WrappedFragment

__all__ = [
    "BundleResult",
    "Module",
    "WrappedFragment",
    "build_header_bundle",
    "generate_header_bundle",
    "load_module",
    "read_fragments",
    "read_module_fragments",
    "render_header_bundle",
    "summarize_bundle",
    "wrap_fragment",
    "write_header_bundle",
]
