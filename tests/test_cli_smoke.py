from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from cli import main
from contract.artifacts import MANIFEST_JSON
from model.load import load_symbol_model
from rules.config import load_config
from shim.generate import render_header

FIXTURE_MODELS = Path(__file__).parent / "fixtures" / "models"

_UNRESOLVED_MODEL = {
    "module": "Broken",
    "symbols": [
        {
            "identity": "c:Engine",
            "name": "Engine",
            "kind": "class",
            "members": [
                {
                    "kind": "method",
                    "name": "connect",
                    "returns": {"symbol": "c:Session"},
                }
            ],
        }
    ],
}


def _copy_fixture_models(root: Path) -> None:
    shutil.copytree(FIXTURE_MODELS, root)


def test_cli_generate_smoke(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)

    out_dir = tmp_path / "artifacts"
    exit_code = main(["generate", str(root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    assert (out_dir / "Virtualization.shim.h").is_file()
    manifest = json.loads((out_dir / MANIFEST_JSON).read_text(encoding="utf-8"))
    assert manifest["schema_version"] == 1
    assert manifest["headers"] == [
        {
            "function_count": 16,
            "header": "Virtualization.shim.h",
            "module": "Virtualization",
            "source": "virtualization.symbols.json",
            "type_count": 8,
        }
    ]


def test_generate_default_output_dir(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)

    assert not (root / ".shim").exists(), "output dir must not pre-exist"
    exit_code = main(["generate", str(root)])

    assert exit_code == 0
    assert (root / ".shim" / "Virtualization.shim.h").is_file()


def test_generate_honours_config_output_dir(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    (root / "shimgen.toml").write_text(
        'output_dir = "include"\nheader_suffix = ".h"\n', encoding="utf-8"
    )

    exit_code = main(["generate", str(root)])

    assert exit_code == 0
    assert (root / "include" / "Virtualization.h").is_file()


def test_render_writes_header_to_stdout(
    capsys: pytest.CaptureFixture[str],
) -> None:
    model_path = FIXTURE_MODELS / "virtualization.symbols.json"

    exit_code = main(["render", str(model_path)])

    assert exit_code == 0
    assert capsys.readouterr().out == render_header(load_symbol_model(model_path))


def test_render_writes_header_to_file(tmp_path: Path) -> None:
    model_path = FIXTURE_MODELS / "virtualization.symbols.json"
    output = tmp_path / "out" / "vz.h"

    exit_code = main(["render", str(model_path), "--output", str(output)])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8").startswith(
        "#ifndef VIRTUALIZATION_SHIM_H\n"
    )


def test_generate_unresolved_reference_writes_nothing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "broken.symbols.json").write_text(
        json.dumps(_UNRESOLVED_MODEL), encoding="utf-8"
    )

    out_dir = tmp_path / "artifacts"
    exit_code = main(["generate", str(root), "--out-dir", str(out_dir)])

    assert exit_code == 1
    assert not out_dir.exists()
    err = capsys.readouterr().err
    assert "error: Engine.connect: type reference 'c:Session'" in err


def test_render_invalid_json_exits_with_input_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    model_path = tmp_path / "bad.symbols.json"
    model_path.write_text("{", encoding="utf-8")

    exit_code = main(["render", str(model_path)])

    assert exit_code == 2
    assert "Invalid JSON" in capsys.readouterr().err


def test_generate_invalid_config_exits_with_input_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "shimgen.toml").write_text("nope = 1\n", encoding="utf-8")

    exit_code = main(["generate", str(tmp_path)])

    assert exit_code == 2
    assert "Invalid config" in capsys.readouterr().err


def test_cli_validate_after_generate(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    assert main(["generate", str(root)]) == 0

    assert main(["validate", str(root)]) == 0


def test_cli_verify_after_generate(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    assert main(["generate", str(root)]) == 0

    assert main(["verify", str(root)]) == 0


def test_cli_verify_reports_mismatch(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    assert main(["generate", str(root)]) == 0
    header = root / ".shim" / "Virtualization.shim.h"
    header.write_text(header.read_text(encoding="utf-8") + "\n", encoding="utf-8")

    exit_code = main(["verify", str(root)])

    assert exit_code == 1
    assert "mismatches: Virtualization.shim.h" in capsys.readouterr().err


def test_cli_validate_default_artifacts_dir_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    default_artifacts_dir = (root / load_config(root).output_dir).resolve()

    monkeypatch.chdir(root)
    exit_code = main(["validate"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{default_artifacts_dir}:" in captured.err
    assert "Artifacts directory does not exist." in captured.err


def test_cli_validate_includes_path_and_message(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    artifacts_dir = tmp_path / "missing-artifacts"

    exit_code = main(["validate", str(tmp_path), "--artifacts-dir", str(artifacts_dir)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{artifacts_dir}:" in captured.err
    assert "Artifacts directory does not exist." in captured.err


def test_cli_verify_missing_artifacts_dir_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)

    artifacts_dir = tmp_path / "missing-artifacts"
    exit_code = main(["verify", str(root), "--artifacts-dir", str(artifacts_dir)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"artifacts-dir: {artifacts_dir}" in captured.err
    assert "Artifacts directory does not exist" in captured.err


def test_render_io_error_exits_with_input_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    model_path = FIXTURE_MODELS / "virtualization.symbols.json"
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    exit_code = main(["render", str(model_path), "--output", str(blocker / "out.h")])

    assert exit_code == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_generate_io_error_exits_with_input_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "root"
    _copy_fixture_models(root)
    out_dir = tmp_path / "taken"
    out_dir.write_text("", encoding="utf-8")

    exit_code = main(["generate", str(root), "--out-dir", str(out_dir)])

    assert exit_code == 2
    assert "error: " in capsys.readouterr().err
