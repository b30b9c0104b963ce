"""
Parser for the extra environment input, a flat YAML mapping of variables
to forward into the container.
"""
import yaml
from typing import Any, Dict

from ..errors import ConfigurationError

NULL_TAG = "tag:yaml.org,2002:null"


class FlatEnvLoader(yaml.SafeLoader):
    """
    Safe loader that leaves plain scalars as text. Only null is resolved,
    so `0755`, `yes` or `1_000` reach the container unchanged.
    """


FlatEnvLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag == NULL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class EnvParser:
    """
    Parser for flat YAML environment mappings.
    """
    @staticmethod
    def parse_from_string(content: str) -> Dict[str, str]:
        """
        Parses environment variables from YAML text.
        The whole mapping is validated before anything is returned.

        Args:
            content (str): YAML text such as ``FOO: 1``.

        Returns:
            Dict[str, str]: Variables in document order, values as strings.

        Raises:
            ConfigurationError: If the document is not a mapping, or a value
                is itself a mapping, a list or null.
        """
        if not content:
            return {}

        try:
            mapping = yaml.load(content, Loader=FlatEnvLoader)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigurationError(f"run-on-arch: env is not valid YAML: {e}", field="env") from e

        if mapping is None:
            return {}
        if not isinstance(mapping, dict):
            raise ConfigurationError(
                "run-on-arch: env must be a flat mapping of key/value pairs.", field="env"
            )

        env = {}
        for key, value in mapping.items():
            # null counts as nested, same as a mapping or a list
            if value is None or isinstance(value, (dict, list)):
                raise ConfigurationError(f"run-on-arch: env {key} value must be flat.", field=str(key))
            env[str(key)] = EnvParser._to_string(value)
        return env

    @staticmethod
    def _to_string(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
