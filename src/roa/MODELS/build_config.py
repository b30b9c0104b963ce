"""
Models for the validated set of inputs a run-on-arch build is configured with.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict

DEFAULT_DISTRO = "archlinuxarm"
UNSPECIFIED = "none"


class BuildConfig(BaseModel):
    """
    The inputs of a single run, read once and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    # Target
    arch: str
    distro: str = DEFAULT_DISTRO
    base_image: Optional[str] = None

    # Phase commands, kept byte-for-byte
    setup: str = ""
    install: str = ""
    run: str = ""
    shell: Optional[str] = None

    # Container runtime
    docker_run_args: str = ""
    env: str = ""

    # Secrets and deployment
    github_token: Optional[str] = None
    rclone_config: str
    pgp_key: Optional[str] = None
    pgp_key_password: Optional[str] = None
    deploy_path: str
    pacman_repo: Optional[str] = None
    custom_repos: Optional[str] = None

    # Identity
    repository: str = ""
    workflow: str = ""