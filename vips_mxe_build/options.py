"""RU: Разбор флагов командной строки.

EN: Command-line flag parsing for the build tool.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

VARIANTS: Final = ("vips-web", "vips-all")
DEFAULT_VARIANT: Final = "vips-web"
JPEG_IMPLS: Final = ("libjpeg-turbo", "mozjpeg", "jpegli")

# Boolean flags that also accept an explicit "=value".
BOOL_FLAGS: Final = ("--with-hevc", "--with-debug")

_TRUE_VALUES: Final = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES: Final = frozenset({"false", "0", "no", "off"})


@dataclass(frozen=True)
class BuildOptions:
    """RU: Опции, переданные в командной строке.

    EN: Options given on the command line.
    """

    variant: str = DEFAULT_VARIANT
    with_hevc: bool = False
    with_debug: bool = False
    jpeg_impl: str = "libjpeg-turbo"
    config: Path | None = None
    oci_runtime: str | None = None
    build_image: bool = False
    dry_run: bool = False
    quiet: bool = False
    verbose: bool = False
    progress: bool = True


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value such as ``true`` or ``0``."""
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    message = f"invalid boolean value: '{value}'"
    raise ValueError(message)


def _expand_bool_flags(parser: argparse.ArgumentParser, argv: list[str]) -> list[str]:
    """Rewrite ``--flag=value`` into ``--flag`` or ``--no-flag``.

    argparse cannot give a flag an optional value without also swallowing the
    positional that follows it (``--with-hevc vips-web``), so explicit values
    are folded into the on/off spelling before parsing.
    """
    out: list[str] = []
    for i, arg in enumerate(argv):
        if arg == "--":
            out.extend(argv[i:])
            break
        flag, sep, value = arg.partition("=")
        if sep and flag in BOOL_FLAGS:
            try:
                enabled = parse_bool(value)
            except ValueError as exc:
                parser.error(f"argument {flag}: {exc}")
            out.append(flag if enabled else "--no-" + flag[2:])
            continue
        out.append(arg)
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build.py",
        description="Cross-compile libvips for Windows inside the MXE build container.",
    )
    parser.add_argument(
        "variant",
        nargs="?",
        choices=VARIANTS,
        default=DEFAULT_VARIANT,
        help=f"Group of libraries to build libvips against (default: {DEFAULT_VARIANT}).",
    )
    parser.add_argument(
        "--with-hevc",
        action=argparse.BooleanOptionalAction,
        default=False,
        help=(
            "Include the GPL-licensed HEVC plugin. Static targets are dropped. "
            "Accepts --with-hevc=true|false."
        ),
    )
    parser.add_argument(
        "--with-debug",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Build with debug symbols. Accepts --with-debug=true|false.",
    )
    parser.add_argument(
        "--jpeg-impl",
        choices=JPEG_IMPLS,
        default="libjpeg-turbo",
        help="JPEG implementation to link against (default: libjpeg-turbo).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to build.yaml (default: ./build.yaml if present).",
    )
    parser.add_argument(
        "--oci-runtime",
        choices=("docker", "podman"),
        help="Container runtime to use (default: auto-detect, docker first).",
    )
    parser.add_argument(
        "--build-image",
        action="store_true",
        help="Build the container image before running it.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resolved plan and commands without running anything.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only errors")
    parser.add_argument("--verbose", action="store_true", help="Verbose logs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress UI (useful for logs/CI)",
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """RU: Парсит аргументы CLI. Неизвестный флаг — выход с кодом 2 и usage.

    EN: Parse CLI args. Unknown flags exit with status 2 and a usage message.
    """
    parser = build_parser()
    raw = list(sys.argv[1:] if argv is None else argv)
    return parser.parse_args(_expand_bool_flags(parser, raw))


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    return BuildOptions(
        variant=args.variant,
        with_hevc=bool(args.with_hevc),
        with_debug=bool(args.with_debug),
        jpeg_impl=args.jpeg_impl,
        config=args.config,
        oci_runtime=args.oci_runtime,
        build_image=bool(args.build_image),
        dry_run=bool(args.dry_run),
        quiet=bool(args.quiet),
        verbose=bool(args.verbose),
        progress=not args.no_progress,
    )
