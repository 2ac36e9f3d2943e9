#!/usr/bin/env python3
"""RU: Сборка libvips для Windows в MXE-контейнере.

См. `python3 build.py --help`.

EN: Build libvips for Windows in the MXE container.

See `python3 build.py --help`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


def ensure_venv() -> None:
    """Re-exec into the repo venv if not already in a venv."""

    env_flag = "VIPS_BUILD_VENV_ACTIVE"
    if os.environ.get(env_flag) == "1":
        return

    if sys.prefix != sys.base_prefix:
        os.environ[env_flag] = "1"
        return

    repo_dir = Path(__file__).resolve().parent
    venv_python = repo_dir / ".venv" / "bin" / "python"
    if venv_python.exists():
        os.environ[env_flag] = "1"
        os.execv(str(venv_python), [str(venv_python), *sys.argv])


def main() -> None:
    ensure_venv()
    from vips_mxe_build.cli import main as _main

    sys.exit(_main())


if __name__ == "__main__":
    main()
