"""Naming conventions, generator configuration and bundle.json loading."""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Final

PROJECT_PREFIX = "YAX86"
IMPLEMENTATION_MACRO = "YAX86_IMPLEMENTATION"
INCLUDE_GUARD_SUFFIX = "_BUNDLE_H"

BANNER_WIDTH = 78
FRAGMENT_BANNER_CHAR = "="

SOURCE_DIRNAME = "src"
BUNDLE_CONFIG_FILENAME = "bundle.json"
GENERATOR_CONFIG_FILENAME = "header_bundle.toml"

IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
MODULE_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[a-z0-9_]+")


@dataclass(slots=True, frozen=True)
class GeneratorConfig:
    """Fully merged generator configuration."""

    root: Path
    project_prefix: str
    implementation_macro: str
    line_directives: bool
    extern_c: bool

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for audit metadata."""
        return {
            "root": str(self.root),
            "project_prefix": self.project_prefix,
            "implementation_macro": self.implementation_macro,
            "line_directives": self.line_directives,
            "extern_c": self.extern_c,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    line_directives: bool | None = None
    extern_c: bool | None = None


@dataclass(slots=True, frozen=True)
class BundleConfig:
    """Parsed contents of one module's bundle.json."""

    public: tuple[str, ...]
    private: tuple[str, ...]
    dir: str | None = None


def validate_module_name(module_name: str) -> str:
    """Return the module name if it can form a C identifier fragment."""
    if not MODULE_NAME_PATTERN.fullmatch(module_name):
        raise ValueError(
            f"Module name '{module_name}' must contain only lowercase letters, digits "
            "and underscores."
        )
    return module_name


def include_guard(module_name: str, prefix: str = PROJECT_PREFIX) -> str:
    """Return the include guard token for a module bundle."""
    return f"{prefix}_{validate_module_name(module_name).upper()}{INCLUDE_GUARD_SUFFIX}"


def banner_title(module_name: str, prefix: str = PROJECT_PREFIX) -> str:
    """Return the banner line naming a module bundle."""
    return f"{prefix} {module_name.upper()} MODULE - GENERATED SINGLE HEADER BUNDLE"


def module_dir(root: Path, module_name: str) -> Path:
    """Return the default source directory for a module."""
    return root / SOURCE_DIRNAME / module_name


def bundle_config_path(root: Path, module_name: str) -> Path:
    """Return the path of a module's bundle.json."""
    return module_dir(root, module_name) / BUNDLE_CONFIG_FILENAME


def default_output_path(root: Path, module_name: str) -> Path:
    """Return the default bundle output path for a module."""
    return root / f"{module_name}.h"


def default_config(root: Path) -> GeneratorConfig:
    """Build default config for a given source root."""
    return GeneratorConfig(
        root=root.resolve(),
        project_prefix=PROJECT_PREFIX,
        implementation_macro=IMPLEMENTATION_MACRO,
        line_directives=True,
        extern_c=True,
    )


def load_generator_config_file(root: Path) -> dict[str, object]:
    """Load optional header_bundle.toml from the source root."""
    config_path = root / GENERATOR_CONFIG_FILENAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{GENERATOR_CONFIG_FILENAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_identifier(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not IDENTIFIER_PATTERN.fullmatch(value):
        raise ValueError(f"Config field '{name}' must be a C identifier.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def merge_config(
    base: GeneratorConfig, payload: dict[str, object], overrides: CliOverrides
) -> GeneratorConfig:
    """Merge defaults, header_bundle.toml, then CLI overrides."""
    bundle_payload = _get_table(payload, "bundle")
    merged = GeneratorConfig(
        root=base.root,
        project_prefix=_optional_identifier(
            bundle_payload.get("project_prefix"), "bundle.project_prefix", base.project_prefix
        ),
        implementation_macro=_optional_identifier(
            bundle_payload.get("implementation_macro"),
            "bundle.implementation_macro",
            base.implementation_macro,
        ),
        line_directives=_optional_bool(
            bundle_payload.get("line_directives"), "bundle.line_directives", base.line_directives
        ),
        extern_c=_optional_bool(bundle_payload.get("extern_c"), "bundle.extern_c", base.extern_c),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: GeneratorConfig, overrides: CliOverrides) -> GeneratorConfig:
    """Apply startup overrides at highest precedence."""
    return GeneratorConfig(
        root=config.root,
        project_prefix=config.project_prefix,
        implementation_macro=config.implementation_macro,
        line_directives=(
            overrides.line_directives
            if overrides.line_directives is not None
            else config.line_directives
        ),
        extern_c=overrides.extern_c if overrides.extern_c is not None else config.extern_c,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> GeneratorConfig:
    """Load effective config using merge order defaults -> toml file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_generator_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _tuple_of_strings(value: object, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"{BUNDLE_CONFIG_FILENAME} field '{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(
                f"{BUNDLE_CONFIG_FILENAME} field '{field}' must contain only strings."
            )
        output.append(item)
    return tuple(output)


def parse_bundle_config(payload: object) -> BundleConfig:
    """Validate a decoded bundle.json payload."""
    if not isinstance(payload, dict):
        raise ValueError(f"{BUNDLE_CONFIG_FILENAME} must contain a top-level object.")
    for field in ("public", "private"):
        if field not in payload:
            raise ValueError(f"{BUNDLE_CONFIG_FILENAME} is missing required field '{field}'.")
    dir_value = payload.get("dir")
    if dir_value is not None and (not isinstance(dir_value, str) or not dir_value):
        raise ValueError(f"{BUNDLE_CONFIG_FILENAME} field 'dir' must be a non-empty string.")
    return BundleConfig(
        public=_tuple_of_strings(payload["public"], "public"),
        private=_tuple_of_strings(payload["private"], "private"),
        dir=dir_value,
    )


def load_bundle_config(root: Path, module_name: str) -> BundleConfig:
    """Read and validate src/<module>/bundle.json under the root."""
    config_path = bundle_config_path(root, validate_module_name(module_name))
    with config_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return parse_bundle_config(payload)
