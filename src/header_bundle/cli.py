"""Command-line entrypoint for generate-header-bundle."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from header_bundle.bundler import (
    BundleResult,
    build_header_bundle,
    load_module,
    summarize_bundle,
    write_header_bundle,
)
from header_bundle.config import (
    GENERATOR_CONFIG_FILENAME,
    CliOverrides,
    GeneratorConfig,
    bundle_config_path,
    default_output_path,
    load_effective_config,
    validate_module_name,
)
from header_bundle.logging import BuildEvent, JsonlAuditLogger, utc_timestamp
from header_bundle.paths import PathBlockedError

PROG = "generate-header-bundle"
USAGE = f"Usage: {PROG} <module-name>"


class GeneratorArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports malformed invocations with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.exit(1, f"{USAGE}\n{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for generator invocation."""
    parser = GeneratorArgumentParser(
        prog=PROG,
        description="Bundle a module's public and private sources into one header.",
    )
    parser.add_argument("module", nargs="?", default=None)
    parser.add_argument("--root", required=False, default=".")
    parser.add_argument("--output", required=False, default=None)
    parser.add_argument("--no-line-directives", action="store_true")
    parser.add_argument("--no-extern-c", action="store_true")
    parser.add_argument("--audit-log", required=False, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser


class GenerationFailed(Exception):
    """Raised when a run fails; carries the audit error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    return CliOverrides(
        line_directives=False if args.no_line_directives else None,
        extern_c=False if args.no_extern_c else None,
    )


def run(args: argparse.Namespace, metadata: dict[str, object]) -> BundleResult:
    """Generate one bundle, filling metadata for the audit log."""
    module_name: str = args.module
    root = Path(args.root)
    try:
        validate_module_name(module_name)
    except ValueError as error:
        raise GenerationFailed("CONFIG_ERROR", str(error)) from error
    try:
        config: GeneratorConfig = load_effective_config(root, _overrides_from_args(args))
    except (OSError, ValueError) as error:
        toml_path = root.resolve() / GENERATOR_CONFIG_FILENAME
        raise GenerationFailed(
            "CONFIG_ERROR", f'Error loading generator configuration "{toml_path}": {error}'
        ) from error
    try:
        module = load_module(config, module_name)
    except PathBlockedError as error:
        raise GenerationFailed("PATH_BLOCKED", f"{error.reason} {error.hint}") from error
    except (OSError, ValueError) as error:
        config_path = bundle_config_path(config.root, module_name)
        raise GenerationFailed(
            "CONFIG_ERROR", f'Error loading bundle configuration "{config_path}": {error}'
        ) from error
    metadata["config"] = config.to_public_dict()

    output_path = (
        Path(args.output).resolve()
        if args.output is not None
        else default_output_path(config.root, module_name)
    )
    try:
        content, public, private = build_header_bundle(config, module)
    except PathBlockedError as error:
        raise GenerationFailed("PATH_BLOCKED", f"{error.reason} {error.hint}") from error
    except (OSError, UnicodeDecodeError) as error:
        raise GenerationFailed(
            "READ_ERROR", f"Failed to read sources for module '{module_name}': {error}"
        ) from error
    try:
        write_header_bundle(output_path, content)
    except OSError as error:
        raise GenerationFailed(
            "WRITE_ERROR", f'Error writing file "{output_path}": {error}'
        ) from error
    result = summarize_bundle(config, module, output_path, content, public, private)
    metadata["public_count"] = len(result.public)
    metadata["private_count"] = len(result.private)
    metadata["bytes_written"] = result.bytes_written
    return result


def _record(logger: JsonlAuditLogger | None, event: BuildEvent) -> None:
    if logger is None:
        return
    try:
        logger.append(event)
    except OSError as error:
        print(f'Warning: could not append audit log "{logger.path}": {error}', file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the header bundle generator process."""
    parser = build_arg_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exit_request:
        # --help exits cleanly; every other parser exit is a usage error.
        return 0 if exit_request.code in (0, None) else 1
    if args.module is None:
        print(USAGE, file=sys.stderr)
        return 1

    logger = JsonlAuditLogger(Path(args.audit_log)) if args.audit_log is not None else None
    metadata: dict[str, object] = {}
    try:
        result = run(args, metadata)
    except GenerationFailed as failure:
        print(failure.message, file=sys.stderr)
        _record(
            logger,
            BuildEvent(
                timestamp=utc_timestamp(),
                module=args.module,
                ok=False,
                error_code=failure.code,
                output_path=None,
                metadata=metadata,
            ),
        )
        return 1

    if args.verbose:
        print(
            f"Wrote {result.output_path} ({len(result.public)} public, "
            f"{len(result.private)} private fragments)"
        )
    _record(
        logger,
        BuildEvent(
            timestamp=utc_timestamp(),
            module=args.module,
            ok=True,
            error_code=None,
            output_path=str(result.output_path),
            metadata=metadata,
        ),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
