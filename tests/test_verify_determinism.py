from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from shim.write import generate_all_headers
from verify.verify import DeterminismResult, verify_determinism

FIXTURE_MODELS = Path(__file__).parent / "fixtures" / "models"


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    root = tmp_path / "root"
    shutil.copytree(FIXTURE_MODELS, root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(root=root, artifacts_dir=missing_dir)


def test_verify_determinism_rejects_file(tmp_path: Path) -> None:
    path = tmp_path / "artifacts"
    path.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_determinism(root=tmp_path, artifacts_dir=path)


def test_generated_headers_are_byte_identical(tmp_path: Path) -> None:
    root = tmp_path / "root"
    shutil.copytree(FIXTURE_MODELS, root)

    first = tmp_path / "first"
    second = tmp_path / "second"
    generate_all_headers(root=root, out_dir=first)
    generate_all_headers(root=root, out_dir=second)

    for name in ("Virtualization.shim.h", "shim_manifest.json"):
        assert (first / name).read_bytes() == (second / name).read_bytes()
    assert verify_determinism(root=root, artifacts_dir=first) == DeterminismResult(
        ok=True
    )


def test_verify_determinism_relative_paths_and_sorted_mismatches(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "root"
    root.mkdir()

    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    for rel_path, content in (
        ("b.shim.h", "b-original"),
        ("a.shim.h", "a-original"),
        ("stale.shim.h", "stale"),
    ):
        path = artifacts_dir / rel_path
        path.write_text(content, encoding="utf-8")

    def _fake_generate_all_headers(*, root: Path, out_dir: Path) -> dict[str, object]:
        (out_dir / "a.shim.h").write_text("a-original", encoding="utf-8")
        (out_dir / "b.shim.h").write_text("b-regenerated", encoding="utf-8")
        (out_dir / "new.shim.h").write_text("new", encoding="utf-8")
        return {"artifacts": [str(out_dir / "a.shim.h"), str(out_dir / "b.shim.h")]}

    monkeypatch.setattr(
        "verify.verify.generate_all_headers",
        _fake_generate_all_headers,
    )

    result = verify_determinism(root=root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False,
        mismatches=("b.shim.h",),
        missing=("stale.shim.h",),
        extra=("new.shim.h",),
    )
