"""Tests for artifact collection and the manifest."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from vips_mxe_build.options import BuildOptions
from vips_mxe_build.settings import BuildSettings
from vips_mxe_build.stages.package_stage import (
    MANIFEST_NAME,
    artifact_name,
    clean_packaging_dir,
    collect_artifacts,
    package_outputs,
)
from vips_mxe_build.stages.resolve_stage import resolve_plan


@pytest.mark.parametrize(
    ("variant", "with_hevc", "expected"),
    [
        ("vips-web", False, "vips-web"),
        ("vips-web", True, "vips-web-hevc"),
        ("vips-all", True, "vips-all-hevc"),
    ],
)
def test_artifact_name(variant: str, with_hevc: bool, expected: str) -> None:
    assert artifact_name(variant, with_hevc) == expected


def test_collect_artifacts_only_zips_sorted(tmp_path: Path) -> None:
    (tmp_path / "b.zip").write_bytes(b"b")
    (tmp_path / "a.ZIP").write_bytes(b"a")
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "dir.zip").mkdir()

    assert [p.name for p in collect_artifacts(tmp_path)] == ["a.ZIP", "b.zip"]


def test_collect_artifacts_missing_dir(tmp_path: Path) -> None:
    assert collect_artifacts(tmp_path / "nope") == []


def test_package_outputs_writes_manifest(tmp_path: Path) -> None:
    zip_path = tmp_path / "vips-dev-w64-web.zip"
    zip_path.write_bytes(b"PK\x03\x04payload")
    plan = resolve_plan(BuildOptions(with_hevc=True), BuildSettings())

    manifest = package_outputs(plan, tmp_path, progress=False)

    assert manifest == tmp_path / MANIFEST_NAME
    data = json.loads(manifest.read_text(encoding="utf-8"))
    assert data["artifact"] == "vips-web-hevc"
    assert data["hevc"] is True
    assert data["contains_gpl_libs"] is True
    assert data["targets"] == list(plan.targets)
    assert data["files"] == [
        {
            "name": "vips-dev-w64-web.zip",
            "size": zip_path.stat().st_size,
            "sha256": hashlib.sha256(zip_path.read_bytes()).hexdigest(),
        },
    ]


def test_package_outputs_without_zips(tmp_path: Path) -> None:
    plan = resolve_plan(BuildOptions(), BuildSettings())
    assert package_outputs(plan, tmp_path, progress=False) is None
    assert not (tmp_path / MANIFEST_NAME).exists()


def test_clean_packaging_dir_removes_only_zips_and_manifest(tmp_path: Path) -> None:
    (tmp_path / "old.zip").write_bytes(b"old")
    (tmp_path / MANIFEST_NAME).write_text("{}", encoding="utf-8")
    (tmp_path / "README.txt").write_text("keep", encoding="utf-8")

    removed = clean_packaging_dir(tmp_path)

    assert sorted(p.name for p in removed) == [MANIFEST_NAME, "old.zip"]
    assert [p.name for p in tmp_path.iterdir()] == ["README.txt"]


def test_clean_packaging_dir_missing_dir(tmp_path: Path) -> None:
    assert clean_packaging_dir(tmp_path / "nope") == []
