"""
Container naming, unique per repository, workflow and target.
"""
import re

CONTAINER_PREFIX = "run-on-arch"
SEPARATOR = "-"


def slug(value: str) -> str:
    """
    Replaces every non alphanumeric ASCII character with a separator,
    one for one, and lower-cases the result.
    """
    return re.sub(r"[^a-zA-Z0-9]", SEPARATOR, value).lower()


def container_name(repository: str, workflow: str, arch: str, distro: str) -> str:
    """
    Derives the container name for a build, so concurrent pipelines on the
    same host do not collide.

    :param repository: Repository identifier, e.g. ``owner/repo``.
    :param workflow: Workflow name.
    :param arch: Architecture tag.
    :param distro: Distribution tag.
    :return: The container name slug.
    """
    return slug(SEPARATOR.join([CONTAINER_PREFIX, repository, workflow, arch, distro]))
