from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, ShimConfig, load_config, resolve_output_dir
from shim.generate import GenerationOptions


def _write_config(root: Path, toml_content: str) -> None:
    (root / "shimgen.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == ShimConfig()
    assert config.output_dir == ".shim"
    assert config.header_suffix == ".shim.h"
    assert config.signature_comments is True


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_section_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
enabled = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "output_dir = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
output_dir = "include/shim"
exclude = ["vendor/**"]
function_prefix = "vz_"
skip_completion_handlers = true
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.output_dir == "include/shim"
    assert config.exclude == ["vendor/**"]
    assert GenerationOptions.from_config(config) == GenerationOptions(
        function_prefix="vz_",
        skip_completion_handlers=True,
        signature_comments=True,
    )


@pytest.mark.parametrize("prefix", ["9lives", "has space", "dash-ed"])
def test_function_prefix_must_be_identifier(tmp_path: Path, prefix: str) -> None:
    _write_config(tmp_path, f'function_prefix = "{prefix}"')

    with pytest.raises(ConfigError, match="function_prefix"):
        load_config(tmp_path)


@pytest.mark.parametrize("suffix", [".txt", "/x.h", "sub\\\\x.h"])
def test_header_suffix_must_be_plain_header_name(tmp_path: Path, suffix: str) -> None:
    _write_config(tmp_path, f'header_suffix = "{suffix}"')

    with pytest.raises(ConfigError, match="header_suffix"):
        load_config(tmp_path)


def test_resolve_output_dir_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="escapes the root"):
        resolve_output_dir(tmp_path, "../outside")


@pytest.mark.parametrize("output_dir", ["", "~/shim", "/abs/shim"])
def test_resolve_output_dir_rejects_non_relative(
    tmp_path: Path, output_dir: str
) -> None:
    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path, output_dir)


def test_resolve_output_dir_inside_root(tmp_path: Path) -> None:
    assert resolve_output_dir(tmp_path, ".shim") == (tmp_path / ".shim").resolve()
