"""RU: Исключения инструмента сборки. Каждое несёт код выхода для CLI.

EN: Exceptions raised by the build tool.

Each error carries the process exit code the CLI should report for it.
Failures of the external toolchain are not exceptions: they come back as
return codes and are propagated unchanged.
"""

from __future__ import annotations


class BuildError(Exception):
    """Base class for errors the CLI turns into an exit code."""

    exit_code = 1


class BuildConfigError(BuildError):
    """Invalid or unreadable build configuration."""

    exit_code = 1


class RuntimeNotFoundError(BuildError):
    """No usable container runtime (docker/podman) on PATH."""

    # Same code a shell reports for "command not found".
    exit_code = 127
