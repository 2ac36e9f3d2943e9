"""RU: Конфигурация сборки из build.yaml.

Все ключи необязательны; отсутствующие берутся из значений по умолчанию, так что
инструмент работает и вовсе без конфиг-файла.

EN: Build configuration loaded from build.yaml.

Every key is optional; missing keys fall back to the defaults below, so the
tool runs without any config file at all::

    image:
        name: libvips-build-win-mxe
        context: container
        build: false
    runtime:
        preferred: null        # docker, podman or null for auto-detect
    paths:
        work_dir: build        # mounted at /data inside the container
        packaging_dir: packaging
        data_dir: /data
    plugins:
        base: [...]
        hevc: plugins/hevc-deps
        debug: plugins/debug
    targets:
        architectures: [x86_64, i686, aarch64]
    cli:
        quiet: false
        verbose: false
        progress: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml

from vips_mxe_build.errors import BuildConfigError

DEFAULT_CONFIG_PATH: Final = Path("build.yaml")

SUPPORTED_ARCHITECTURES: Final = ("x86_64", "i686", "aarch64")
SUPPORTED_RUNTIMES: Final = ("docker", "podman")

DEFAULT_BASE_PLUGINS: Final = (
    "/usr/local/mxe/plugins/apps",
    "/usr/local/mxe/plugins/native",
    "/data/plugins/llvm-mingw",
    "/data/plugins/zlib-ng",
    "/data/plugins/proxy-libintl",
)


@dataclass(frozen=True)
class BuildSettings:
    """RU: Настройки сборки с применёнными значениями по умолчанию.

    EN: Configuration for a build run, with defaults applied.
    """

    image_name: str = "libvips-build-win-mxe"
    image_context: Path = Path("container")
    build_image: bool = False
    preferred_runtime: str | None = None
    work_dir: Path = Path("build")
    packaging_dir: str = "packaging"
    data_dir: str = "/data"
    base_plugins: tuple[str, ...] = DEFAULT_BASE_PLUGINS
    hevc_plugin: str = "plugins/hevc-deps"
    debug_plugin: str = "plugins/debug"
    architectures: tuple[str, ...] = SUPPORTED_ARCHITECTURES
    quiet: bool = False
    verbose: bool = False
    progress: bool = True

    @property
    def packaging_path(self) -> Path:
        """Host path the container writes its zip files to."""
        return self.work_dir / self.packaging_dir


def data_path(data_dir: str, path: str) -> str:
    """Anchor a relative plugin path at the container data dir."""
    if path.startswith("/"):
        return path.rstrip("/") or "/"
    return f"{data_dir.rstrip('/')}/{path.rstrip('/')}"


def _section(conf: dict[str, Any], name: str) -> dict[str, Any]:
    value = conf.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        message = f"Config section '{name}' must be a mapping, got {type(value).__name__}"
        raise BuildConfigError(message)
    return value


def _bool(section: dict[str, Any], name: str, default: bool, *, key: str) -> bool:
    value = section.get(name, default)
    # RU: Строка "false" в YAML — истина для bool(), поэтому требуем настоящий bool.
    # EN: A quoted "false" is truthy, so only real YAML booleans are accepted.
    if not isinstance(value, bool):
        message = f"Config key '{key}' must be true or false, got {value!r}"
        raise BuildConfigError(message)
    return value


def _str_list(value: object, *, key: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        message = f"Config key '{key}' must be a list"
        raise BuildConfigError(message)
    items = tuple(str(v).strip() for v in value if str(v).strip())
    if not items:
        message = f"Config key '{key}' must not be empty"
        raise BuildConfigError(message)
    return items


def settings_from_dict(conf: dict[str, Any]) -> BuildSettings:
    """RU: Собирает настройки из уже разобранного конфига.

    EN: Build settings from an already parsed config mapping.
    """
    if not isinstance(conf, dict):
        message = "Config root must be a mapping"
        raise BuildConfigError(message)

    defaults = BuildSettings()
    image = _section(conf, "image")
    runtime = _section(conf, "runtime")
    paths = _section(conf, "paths")
    plugins = _section(conf, "plugins")
    targets = _section(conf, "targets")
    cli = _section(conf, "cli")

    preferred = runtime.get("preferred")
    if preferred is not None:
        preferred = str(preferred).strip().lower() or None
    if preferred is not None and preferred not in SUPPORTED_RUNTIMES:
        message = (
            f"Unsupported container runtime '{preferred}'. "
            f"Allowed: {', '.join(SUPPORTED_RUNTIMES)}"
        )
        raise BuildConfigError(message)

    data_dir = str(paths.get("data_dir", defaults.data_dir)).rstrip("/") or "/"
    hevc_plugin = str(plugins.get("hevc", defaults.hevc_plugin))

    base_plugins = defaults.base_plugins
    if "base" in plugins:
        base_plugins = _str_list(plugins["base"], key="plugins.base")

    # RU: HEVC-плагин (GPL) подключается только флагом --with-hevc, иначе
    # статические цели получили бы GPL-код.
    # EN: The GPL HEVC plugin is only added by --with-hevc; static targets must
    # never see it.
    hevc_dir = data_path(data_dir, hevc_plugin)
    if any(data_path(data_dir, p) == hevc_dir for p in base_plugins):
        message = (
            f"plugins.base must not contain the HEVC plugin ({hevc_dir}); "
            "use --with-hevc instead"
        )
        raise BuildConfigError(message)

    architectures = defaults.architectures
    if "architectures" in targets:
        architectures = _str_list(targets["architectures"], key="targets.architectures")

    return BuildSettings(
        image_name=str(image.get("name", defaults.image_name)),
        image_context=Path(str(image.get("context", defaults.image_context))),
        build_image=_bool(image, "build", defaults.build_image, key="image.build"),
        preferred_runtime=preferred,
        work_dir=Path(str(paths.get("work_dir", defaults.work_dir))),
        packaging_dir=str(paths.get("packaging_dir", defaults.packaging_dir)),
        data_dir=data_dir,
        base_plugins=base_plugins,
        hevc_plugin=hevc_plugin,
        debug_plugin=str(plugins.get("debug", defaults.debug_plugin)),
        architectures=architectures,
        quiet=_bool(cli, "quiet", defaults.quiet, key="cli.quiet"),
        verbose=_bool(cli, "verbose", defaults.verbose, key="cli.verbose"),
        progress=_bool(cli, "progress", defaults.progress, key="cli.progress"),
    )


def load_settings(path: Path | None = None) -> BuildSettings:
    """RU: Загружает настройки сборки из YAML-файла.

    Без явного пути отсутствие конфига по умолчанию означает «использовать
    значения по умолчанию». Явно указанный файл обязан существовать.

    EN: Load build settings from a YAML file.

    With no explicit path, a missing default config means "use defaults".
    An explicitly requested file must exist.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path is not None:
            message = f"Config file not found: {config_path}"
            raise BuildConfigError(message)
        return BuildSettings()

    try:
        with config_path.open(encoding="utf-8") as f:
            conf = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        message = f"Invalid YAML in {config_path}: {exc}"
        raise BuildConfigError(message) from exc
    except OSError as exc:
        message = f"Cannot read config file {config_path}: {exc}"
        raise BuildConfigError(message) from exc

    return settings_from_dict(conf)
