"""
Selection of the shells used by the generated scripts.
"""
import re
from dataclasses import dataclass
from typing import Optional

POSIX_SHELL = "/bin/sh"
FULL_SHELL = "/bin/bash"

# Busybox based userlands ship no bash
MINIMAL_DISTRO_PATTERN = re.compile(r"alpine", re.IGNORECASE)


@dataclass(frozen=True)
class ShellChoice:
    """Shells for the run phase and the install phase."""

    run_shell: str
    install_shell: str


class ShellResolver:
    """
    Picks the run and install shells for a distribution.
    """
    @staticmethod
    def is_minimal(distro: str) -> bool:
        return MINIMAL_DISTRO_PATTERN.search(distro or "") is not None

    @staticmethod
    def resolve(distro: str, shell: Optional[str] = None) -> ShellChoice:
        """
        Resolves the shells for a build.

        :param distro: Distribution tag, e.g. ``alpine3.18``.
        :param shell: Explicit run shell; wins for the run phase only.
        :return: The resolved shells.
        """
        minimal = ShellResolver.is_minimal(distro)

        run_shell = shell
        if not run_shell:
            run_shell = POSIX_SHELL if minimal else FULL_SHELL

        # Package tooling on minimal distros needs plain sh during install
        install_shell = POSIX_SHELL if minimal else run_shell
        return ShellChoice(run_shell=run_shell, install_shell=install_shell)
