"""RU: Сбор zip-архивов, которые контейнер оставляет в packaging/.

Имена и структура файлов задаются шагом упаковки внутри контейнера; этот модуль
лишь находит архивы и записывает рядом их контрольные суммы.

EN: Collect the zip files the container leaves in packaging/.

File names and layout are chosen by the packaging step inside the container;
this stage only finds the zips and records checksums next to them.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from tqdm import tqdm

from vips_mxe_build.utils.logging_utils import DEFAULT_LOGGER_NAME

if TYPE_CHECKING:
    from vips_mxe_build.stages.resolve_stage import BuildPlan

LOGGER = logging.getLogger(DEFAULT_LOGGER_NAME)

MANIFEST_NAME: Final = "manifest.json"
_CHUNK_SIZE: Final = 1 << 20


def artifact_name(variant: str, with_hevc: bool) -> str:
    """Name under which CI uploads a build's zips."""
    return f"{variant}-hevc" if with_hevc else variant


def collect_artifacts(packaging_dir: Path) -> list[Path]:
    """Return zip files in the packaging dir, sorted by name."""
    if not packaging_dir.is_dir():
        return []
    return sorted(
        (p for p in packaging_dir.iterdir() if p.is_file() and p.suffix.lower() == ".zip"),
        key=lambda p: p.name,
    )


def clean_packaging_dir(packaging_dir: Path) -> list[Path]:
    """RU: Удаляет zip-архивы и manifest.json прошлых сборок.

    EN: Remove zips and the manifest left by earlier builds.

    Only files this stage would later record are touched.
    """
    stale = collect_artifacts(packaging_dir)
    manifest = packaging_dir / MANIFEST_NAME
    if manifest.is_file():
        stale.append(manifest)
    for path in stale:
        LOGGER.debug("Removing stale %s", path)
        path.unlink()
    return stale


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _dump_output(out_path: Path, output: dict[str, object]) -> None:
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(output, f, ensure_ascii=False, indent=2)
        f.write("\n")


def write_manifest(
    plan: BuildPlan,
    packaging_dir: Path,
    artifacts: list[Path],
    *,
    progress: bool = True,
) -> Path:
    """Write manifest.json describing the build and its zips."""
    files = []
    for path in tqdm(artifacts, desc="Checksums", unit="zip", disable=not progress):
        files.append(
            {
                "name": path.name,
                "size": path.stat().st_size,
                "sha256": sha256_file(path),
            },
        )

    output: dict[str, object] = {
        "artifact": artifact_name(plan.variant, plan.with_hevc),
        "variant": plan.variant,
        "hevc": plan.with_hevc,
        "contains_gpl_libs": plan.contains_gpl_libs,
        "debug": plan.with_debug,
        "jpeg_impl": plan.jpeg_impl,
        "targets": list(plan.targets),
        "plugin_dirs": list(plan.plugin_dirs),
        "files": files,
    }

    packaging_dir.mkdir(parents=True, exist_ok=True)
    out_path = packaging_dir / MANIFEST_NAME
    _dump_output(out_path, output)
    return out_path


def package_outputs(plan: BuildPlan, packaging_dir: Path, *, progress: bool = True) -> Path | None:
    """Record the build's zips. Returns the manifest path, or None if there were none."""
    artifacts = collect_artifacts(packaging_dir)
    if not artifacts:
        LOGGER.warning("Build succeeded but no zip files were found in %s", packaging_dir)
        return None
    for path in artifacts:
        LOGGER.info("Artifact: %s", path.name)
    return write_manifest(plan, packaging_dir, artifacts, progress=progress)
