"""
Fixed file locations inside the action checkout.
"""
from pathlib import Path
from pydantic import BaseModel

from .image_spec import INSTALL_SCRIPT_NAME


class ActionLayout(BaseModel):
    """
    Paths of the Dockerfiles, generated scripts and driver scripts, all
    relative to the root of the action checkout.
    """
    root: Path

    @property
    def dockerfiles_dir(self) -> Path:
        return self.root / "Dockerfiles"

    @property
    def scripts_dir(self) -> Path:
        return self.root / "src"

    def dockerfile(self, arch: str, distro: str) -> Path:
        """
        Path of the Dockerfile for an architecture/distribution pair.

        :param arch: Architecture tag, e.g. ``aarch64``.
        :param distro: Distribution tag, e.g. ``archlinuxarm``.
        :return: ``<root>/Dockerfiles/Dockerfile.<arch>.<distro>``.
        """
        return self.dockerfiles_dir / f"Dockerfile.{arch}.{distro}"

    @property
    def setup_script(self) -> Path:
        return self.scripts_dir / "run-on-arch-setup.sh"

    @property
    def install_script(self) -> Path:
        # The image build context is the Dockerfiles directory
        return self.dockerfiles_dir / INSTALL_SCRIPT_NAME

    @property
    def run_script(self) -> Path:
        return self.scripts_dir / "run-on-arch-commands.sh"

    @property
    def build_driver(self) -> Path:
        """Script run inside the container after the user commands."""
        return self.scripts_dir / "ci-build.sh"

    @property
    def entrypoint(self) -> Path:
        """Host side script that sets up emulation and runs the container."""
        return self.scripts_dir / "run-on-arch.sh"
