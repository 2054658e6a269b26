from __future__ import annotations

from pathlib import Path

import pytest

from header_bundle.config import CliOverrides, load_effective_config


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.project_prefix == "YAX86"
    assert config.implementation_macro == "YAX86_IMPLEMENTATION"
    assert config.line_directives is True
    assert config.extern_c is True


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "header_bundle.toml").write_text(
        "\n".join(
            [
                "[bundle]",
                'project_prefix = "ACME"',
                'implementation_macro = "ACME_IMPLEMENTATION"',
                "line_directives = false",
                "extern_c = true",
            ]
        ),
        encoding="utf-8",
    )

    config = load_effective_config(tmp_path, CliOverrides(extern_c=False))

    assert config.project_prefix == "ACME"
    assert config.implementation_macro == "ACME_IMPLEMENTATION"
    assert config.line_directives is False
    assert config.extern_c is False


def test_cli_override_reenables_line_directives(tmp_path: Path) -> None:
    (tmp_path / "header_bundle.toml").write_text(
        "[bundle]\nline_directives = false\n", encoding="utf-8"
    )

    config = load_effective_config(tmp_path, CliOverrides(line_directives=True))

    assert config.line_directives is True


def test_invalid_bool_field_raises_value_error(tmp_path: Path) -> None:
    (tmp_path / "header_bundle.toml").write_text(
        '[bundle]\nline_directives = "no"\n', encoding="utf-8"
    )

    with pytest.raises(ValueError, match="bundle.line_directives"):
        load_effective_config(tmp_path)


def test_invalid_section_type_raises_value_error(tmp_path: Path) -> None:
    (tmp_path / "header_bundle.toml").write_text('bundle = "not-a-table"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="section 'bundle'"):
        load_effective_config(tmp_path)


def test_non_identifier_prefix_raises_value_error(tmp_path: Path) -> None:
    (tmp_path / "header_bundle.toml").write_text(
        '[bundle]\nproject_prefix = "1-bad"\n', encoding="utf-8"
    )

    with pytest.raises(ValueError, match="bundle.project_prefix"):
        load_effective_config(tmp_path)


@pytest.mark.parametrize("field", ["project_prefix", "implementation_macro"])
def test_identifier_with_trailing_newline_is_rejected(tmp_path: Path, field: str) -> None:
    (tmp_path / "header_bundle.toml").write_text(
        f'[bundle]\n{field} = "ACME\\n"\n', encoding="utf-8"
    )

    with pytest.raises(ValueError, match=f"bundle.{field}"):
        load_effective_config(tmp_path)
