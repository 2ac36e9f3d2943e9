"""RU: Оркестрация сборки.

Один запуск проходит шаги:
1) Разрешение каталогов плагинов, GPL-флага и списка целей
2) Поиск контейнерного рантайма
3) Запуск MXE-контейнера (при необходимости со сборкой образа)
4) Учёт zip-архивов, записанных контейнером в packaging/

EN: Build orchestration.

One run goes through these steps:
1) Resolve plugin dirs, the GPL flag and the target list
2) Locate the container runtime
3) Run the MXE build container (optionally building its image first)
4) Record the zips the container wrote to packaging/
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vips_mxe_build.stages.invoke_stage import (
    build_image_command,
    container_command,
    detect_oci_runtime,
    format_command,
    invoke_build,
)
from vips_mxe_build.stages.package_stage import (
    artifact_name,
    clean_packaging_dir,
    package_outputs,
)
from vips_mxe_build.stages.resolve_stage import BuildPlan, resolve_plan
from vips_mxe_build.utils.logging_utils import DEFAULT_LOGGER_NAME, status

if TYPE_CHECKING:
    from vips_mxe_build.options import BuildOptions
    from vips_mxe_build.settings import BuildSettings

log = logging.getLogger(DEFAULT_LOGGER_NAME)


def _log_plan(plan: BuildPlan) -> None:
    log.info("variant: %s", plan.variant)
    log.info("hevc: %s, contains GPL libs: %s", plan.with_hevc, plan.contains_gpl_libs)
    log.info("targets: %s", " ".join(plan.targets))
    log.debug("plugin dirs: %s", " ".join(plan.plugin_dirs))


def _dry_run(plan: BuildPlan, settings: BuildSettings, *, runtime: str, build_image: bool) -> int:
    if build_image:
        print(format_command(build_image_command(runtime, settings.image_name, settings.image_context)))
    print(format_command(container_command(runtime, plan, settings)))
    return 0


def run_build(options: BuildOptions, settings: BuildSettings) -> int:
    """RU: Запускает полную сборку и возвращает код выхода процесса.

    EN: Run a full build and return the process exit code.
    """
    quiet = options.quiet or settings.quiet
    progress = options.progress and settings.progress and not quiet
    build_image = options.build_image or settings.build_image

    plan = resolve_plan(options, settings)
    status(f"[build] {artifact_name(plan.variant, plan.with_hevc)}", quiet=quiet)
    _log_plan(plan)
    if plan.contains_gpl_libs:
        log.warning("HEVC enabled: output contains GPL code; static targets dropped")

    if options.dry_run:
        # Keep the placeholder readable when no runtime is installed.
        runtime = options.oci_runtime or settings.preferred_runtime or "docker"
        return _dry_run(plan, settings, runtime=runtime, build_image=build_image)

    runtime = detect_oci_runtime(options.oci_runtime or settings.preferred_runtime)

    # RU: Старые архивы иначе попали бы в манифест текущей сборки.
    # EN: Zips from an earlier run must not be recorded under this plan.
    removed = clean_packaging_dir(settings.packaging_path)
    if removed:
        log.info("Removed %d stale file(s) from %s", len(removed), settings.packaging_path)

    status("[1/2] container build: start", quiet=quiet)
    rc = invoke_build(plan, settings, runtime=runtime, build_image=build_image, quiet=quiet)
    if rc != 0:
        return rc
    status("[1/2] container build: done", quiet=quiet)

    status("[2/2] package: start", quiet=quiet)
    manifest = package_outputs(plan, settings.packaging_path, progress=progress)
    if manifest is not None:
        status(f"[2/2] package: done ({manifest})", quiet=quiet)
    else:
        status("[2/2] package: no artifacts", quiet=quiet)

    status("[build] done", quiet=quiet)
    return 0
