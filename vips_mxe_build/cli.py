from __future__ import annotations

from vips_mxe_build.errors import BuildError
from vips_mxe_build.options import options_from_args, parse_args
from vips_mxe_build.pipeline import run_build
from vips_mxe_build.settings import load_settings
from vips_mxe_build.utils.logging_utils import setup_logging


def main(argv: list[str] | None = None) -> int:
    """RU: CLI-точка входа. Возвращает код выхода процесса.

    EN: CLI entrypoint. Returns the process exit code.
    """
    args = parse_args(argv)

    if args.version:
        from . import __version__

        print(__version__)
        return 0

    options = options_from_args(args)
    logger = setup_logging(verbose=options.verbose, quiet=options.quiet)

    try:
        settings = load_settings(options.config)
        # RU: Конфиг может только добавить quiet/verbose, но не отключить флаги CLI.
        # EN: Config can only switch quiet/verbose on; it never turns a CLI flag off.
        quiet = options.quiet or settings.quiet
        verbose = options.verbose or settings.verbose
        logger = setup_logging(verbose=verbose, quiet=quiet)
        return run_build(options, settings)
    except BuildError as exc:
        logger.error("%s", exc)
        return exc.exit_code
