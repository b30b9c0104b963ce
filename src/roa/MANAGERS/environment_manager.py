"""
Managers for building the environment forwarded into the build container.
"""
from typing import Dict, Mapping, Optional
from ..MODELS.build_config import BuildConfig
from ..MODELS.script_bundle import EnvironmentSet
from ..PARSERS.env_parser import EnvParser
from ..errors import ConfigurationError

BRANCH_REF_PREFIX = "refs/heads/"

# Container variable -> ambient platform variable
DEFAULT_VARIABLES = (
    ("CI_REPO", "GITHUB_REPOSITORY"),
    ("CI_BUILD_DIR", "GITHUB_WORKSPACE"),
    ("CI_COMMIT", "GITHUB_SHA"),
    ("CI_BRANCH", "GITHUB_REF"),
    ("CI_BUILD_NUMBER", "GITHUB_RUN_NUMBER"),
)


class EnvironmentManager:
    """
    Merges inputs, platform defaults and the user's extra mapping on top of
    a base environment, recording a forwarding flag for every variable added.
    """
    def __init__(self, base_env: Optional[Mapping[str, str]] = None):
        """
        Initializes the environment manager.

        :param base_env: Environment the driver would otherwise inherit.
            Defaults computed from platform variables are read from it too.
        """
        self.base_env: Dict[str, str] = dict(base_env or {})
        self.parser = EnvParser()

    def get_merged_environment(self, config: BuildConfig) -> EnvironmentSet:
        """
        Builds the environment for a run. Later sources override earlier ones:

        1. secrets and deployment inputs (only when set),
        2. the CI_* defaults (always set),
        3. the extra ``env`` mapping.

        :param config: The build configuration.
        :return: The variables and their forwarding flags.
        :raises ConfigurationError: If a required input is missing or ``env``
            is not a flat mapping.
        """
        # Parse first so a bad mapping fails before anything is merged
        extra_env = self.parser.parse_from_string(config.env)

        env_set = EnvironmentSet(variables=dict(self.base_env))

        # 1. Inputs
        if not config.rclone_config:
            raise ConfigurationError("Input required and not supplied: rcloneConfig", field="rcloneConfig")
        if not config.deploy_path:
            raise ConfigurationError("Input required and not supplied: deployPath", field="deployPath")

        inputs = (
            ("GITHUB_TOKEN", config.github_token),
            ("RCLONE_CONF", config.rclone_config),
            ("PGP_KEY", config.pgp_key),
            ("PGP_KEY_PASSWD", config.pgp_key_password),
            ("DEPLOY_PATH", config.deploy_path),
            ("PACMAN_REPO", config.pacman_repo),
            ("CUSTOM_REPOS", config.custom_repos),
        )
        for name, value in inputs:
            if value:
                env_set.export(name, value)

        # 2. Defaults
        for name, value in self.get_default_variables().items():
            env_set.export(name, value)

        # 3. Extra mapping
        for name, value in extra_env.items():
            env_set.export(name, value)

        return env_set

    def get_default_variables(self) -> Dict[str, str]:
        """
        Computes the CI_* variables from the platform's own variables.

        :return: The five defaults, empty strings where the platform value is absent.
        """
        defaults = {}
        for name, source in DEFAULT_VARIABLES:
            value = self.base_env.get(source, "")
            if name == "CI_BRANCH" and value.startswith(BRANCH_REF_PREFIX):
                value = value[len(BRANCH_REF_PREFIX):]
            defaults[name] = value
        return defaults
