"""
Parser for the free-form container runtime argument input.
"""
import shlex
from typing import List

from ..errors import ConfigurationError


def parse_runtime_args(value: str) -> List[str]:
    """
    Splits the argument string with shell word splitting rules.

    Args:
        value (str): e.g. ``--volume "/a b:/build" --privileged``.

    Returns:
        List[str]: The argument vector, empty for empty input.
    """
    if not value:
        return []
    try:
        return shlex.split(value)
    except ValueError as e:
        raise ConfigurationError(f"run-on-arch: dockerRunArgs could not be parsed: {e}", field="dockerRunArgs") from e
