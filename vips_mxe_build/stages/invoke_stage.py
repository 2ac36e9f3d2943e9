"""RU: Поиск контейнерного рантайма и запуск MXE-сборки в контейнере.

Всю компиляцию и упаковку делает контейнер; модуль только собирает командную
строку и окружение. Ничего не перезапускается: код выхода возвращается как есть.

EN: Container runtime detection and the containerized MXE build.

The container does all of the compiling and packaging; this module only
assembles the command line and environment and hands over. Nothing is retried:
a failing command's exit code is returned as-is.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
from typing import TYPE_CHECKING

from vips_mxe_build.errors import RuntimeNotFoundError
from vips_mxe_build.settings import SUPPORTED_RUNTIMES
from vips_mxe_build.utils.logging_utils import DEFAULT_LOGGER_NAME

if TYPE_CHECKING:
    from vips_mxe_build.settings import BuildSettings
    from vips_mxe_build.stages.resolve_stage import BuildPlan

LOGGER = logging.getLogger(DEFAULT_LOGGER_NAME)


def _bool_env(value: bool) -> str:
    return "true" if value else "false"


def detect_oci_runtime(preferred: str | None = None) -> str:
    """Return the path of the container runtime to use.

    An explicitly preferred runtime must exist; otherwise docker is tried
    before podman.
    """
    candidates = (preferred,) if preferred else SUPPORTED_RUNTIMES
    for name in candidates:
        path = shutil.which(name)
        if path:
            LOGGER.debug("Using container runtime %s (%s)", name, path)
            return path
    message = f"No container runtime found on PATH (looked for: {', '.join(candidates)})"
    raise RuntimeNotFoundError(message)


def container_env(plan: BuildPlan) -> dict[str, str]:
    """Environment passed into the build container."""
    return {
        "MXE_TARGETS": " ".join(plan.targets),
        "MXE_PLUGIN_DIRS": " ".join(plan.plugin_dirs),
        "HEVC": _bool_env(plan.with_hevc),
        "DEBUG": _bool_env(plan.with_debug),
        "JPEG_IMPL": plan.jpeg_impl,
    }


def build_image_command(runtime: str, image: str, context: os.PathLike[str] | str) -> list[str]:
    return [runtime, "build", "-t", image, str(context)]


def container_command(runtime: str, plan: BuildPlan, settings: BuildSettings) -> list[str]:
    """Return the ``<runtime> run`` command for a plan."""
    work_dir = settings.work_dir.resolve()
    cmd = [runtime, "run", "--rm", "-t", "-v", f"{work_dir}:{settings.data_dir}"]
    for key, value in container_env(plan).items():
        cmd += ["-e", f"{key}={value}"]
    cmd += [settings.image_name, plan.variant]
    return cmd


def format_command(cmd: list[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def run_command(cmd: list[str], *, quiet: bool = False) -> int:
    """Run an external command to completion and return its exit code.

    Output is streamed unless quiet, in which case it is captured and only
    shown if the command fails.
    """
    LOGGER.debug("Running: %s", format_command(cmd))
    try:
        if quiet:
            res = subprocess.run(cmd, capture_output=True, text=True, check=False)
        else:
            res = subprocess.run(cmd, check=False)
    except FileNotFoundError as exc:
        message = f"Executable not found: {cmd[0]}"
        raise RuntimeNotFoundError(message) from exc

    if res.returncode != 0 and quiet:
        if res.stdout:
            print(res.stdout.strip(), file=sys.stderr)
        if res.stderr:
            print(res.stderr.strip(), file=sys.stderr)
    return res.returncode


def invoke_build(
    plan: BuildPlan,
    settings: BuildSettings,
    *,
    runtime: str,
    build_image: bool = False,
    quiet: bool = False,
) -> int:
    """RU: При необходимости собирает образ, затем один раз запускает контейнер.

    EN: Optionally build the image, then run the build container once.

    Returns the first non-zero exit code, or 0.
    """
    settings.work_dir.mkdir(parents=True, exist_ok=True)

    if build_image:
        LOGGER.info("Building image %s from %s", settings.image_name, settings.image_context)
        rc = run_command(
            build_image_command(runtime, settings.image_name, settings.image_context),
            quiet=quiet,
        )
        if rc != 0:
            LOGGER.error("Image build failed with exit code %s", rc)
            return rc

    LOGGER.info(
        "Running %s for %s (HEVC=%s)",
        settings.image_name,
        ", ".join(plan.targets),
        _bool_env(plan.with_hevc),
    )
    rc = run_command(container_command(runtime, plan, settings), quiet=quiet)
    if rc != 0:
        LOGGER.error("Container build failed with exit code %s", rc)
    return rc
