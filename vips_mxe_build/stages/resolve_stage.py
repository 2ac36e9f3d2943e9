"""RU: Разрешение списка плагинов и целей сборки.

Поддержка HEVC тянет GPL-кодеки. GPL-сборка предлагается только в виде
shared-библиотек, поэтому статические цели убираются из матрицы, как только
подключён HEVC-плагин.

EN: Plugin and target resolution.

HEVC support pulls in GPL-licensed encoders/decoders. A GPL build is only ever
offered as shared libraries, so the static targets are pruned from the matrix
whenever the HEVC plugin is included.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from vips_mxe_build.errors import BuildConfigError
from vips_mxe_build.settings import SUPPORTED_ARCHITECTURES, data_path

if TYPE_CHECKING:
    from vips_mxe_build.options import BuildOptions
    from vips_mxe_build.settings import BuildSettings

TARGET_VENDOR: Final = "w64-mingw32"
LINKAGES: Final = ("shared", "static")
DEFAULT_JPEG_IMPL: Final = "libjpeg-turbo"


@dataclass(frozen=True)
class BuildPlan:
    """Everything the container needs to know about one build."""

    variant: str
    with_hevc: bool
    contains_gpl_libs: bool
    with_debug: bool
    jpeg_impl: str
    plugin_dirs: tuple[str, ...]
    targets: tuple[str, ...]


def contains_gpl_libs(with_hevc: bool) -> bool:
    """Return True when the build links GPL code (currently only HEVC)."""
    return bool(with_hevc)


def resolve_plugin_dirs(
    base: tuple[str, ...] | list[str],
    *,
    with_hevc: bool,
    with_debug: bool = False,
    jpeg_impl: str = DEFAULT_JPEG_IMPL,
    data_dir: str = "/data",
    hevc_plugin: str = "plugins/hevc-deps",
    debug_plugin: str = "plugins/debug",
) -> list[str]:
    """RU: Возвращает каталоги MXE-плагинов, базовый набор первым.

    HEVC-каталог попадает в список тогда и только тогда, когда with_hevc.

    EN: Return the MXE plugin directories for a build, base set first.

    The HEVC directory is present if and only if ``with_hevc`` is set.
    """
    hevc_dir = data_path(data_dir, hevc_plugin)
    dirs = [p for p in (data_path(data_dir, d) for d in base) if p != hevc_dir]
    # libjpeg-turbo ships with MXE; the others are recipe overrides.
    if jpeg_impl != DEFAULT_JPEG_IMPL:
        dirs.append(data_path(data_dir, f"plugins/{jpeg_impl}"))
    if with_debug:
        dirs.append(data_path(data_dir, debug_plugin))
    if with_hevc:
        dirs.append(hevc_dir)
    return dirs


def resolve_targets(architectures: tuple[str, ...] | list[str], *, gpl: bool) -> list[str]:
    """Return MXE target triples, architecture-major, shared before static.

    Static targets are never offered for a build that contains GPL code.
    """
    unknown = [a for a in architectures if a not in SUPPORTED_ARCHITECTURES]
    if unknown:
        message = (
            "Unsupported architectures in config. Allowed: "
            + ", ".join(SUPPORTED_ARCHITECTURES)
            + "; got: "
            + ", ".join(unknown)
        )
        raise BuildConfigError(message)

    linkages = ("shared",) if gpl else LINKAGES
    return [f"{arch}-{TARGET_VENDOR}.{link}" for arch in architectures for link in linkages]


def resolve_plan(options: BuildOptions, settings: BuildSettings) -> BuildPlan:
    """Combine CLI options and settings into a build plan."""
    gpl = contains_gpl_libs(options.with_hevc)
    plugin_dirs = resolve_plugin_dirs(
        settings.base_plugins,
        with_hevc=options.with_hevc,
        with_debug=options.with_debug,
        jpeg_impl=options.jpeg_impl,
        data_dir=settings.data_dir,
        hevc_plugin=settings.hevc_plugin,
        debug_plugin=settings.debug_plugin,
    )
    targets = resolve_targets(settings.architectures, gpl=gpl)
    return BuildPlan(
        variant=options.variant,
        with_hevc=options.with_hevc,
        contains_gpl_libs=gpl,
        with_debug=options.with_debug,
        jpeg_impl=options.jpeg_impl,
        plugin_dirs=tuple(plugin_dirs),
        targets=tuple(targets),
    )
