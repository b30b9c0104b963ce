# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Reads build inputs from the environment the CI platform provides.
Input ``dockerRunArgs`` arrives as ``INPUT_DOCKERRUNARGS`` and so on.
"""
import os
from typing import Dict, Mapping, Optional
from dotenv import dotenv_values

from ..MODELS.build_config import BuildConfig, DEFAULT_DISTRO
from ..errors import ConfigurationError

# Command text is passed through untouched, everything else is stripped.
RAW_INPUTS = {"setup", "install", "run", "env"}

# BuildConfig field -> input name
INPUT_NAMES = {
    "arch": "arch",
    "distro": "distro",
    "base_image": "base_image",
    "setup": "setup",
    "install": "install",
    "run": "run",
    "shell": "shell",
    "docker_run_args": "dockerRunArgs",
    "env": "env",
    "github_token": "githubToken",
    "rclone_config": "rcloneConfig",
    "pgp_key": "pgpKey",
    "pgp_key_password": "pgpKeyPassword",
    "deploy_path": "deployPath",
    "pacman_repo": "pacmanRepo",
    "custom_repos": "customRepos",
}

REQUIRED_INPUTS = ("arch", "rcloneConfig", "deployPath")


class InputParser:
    """
    Builds a BuildConfig from ``INPUT_*`` variables.
    """
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initializes the parser with the environment to read inputs from.

        :param environ: Variables to read; defaults to the process environment.
        """
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)

    @classmethod
    def from_env_file(cls, env_file: str, environ: Optional[Mapping[str, str]] = None) -> "InputParser":
        """
        Layers the values of a dotenv file over the environment, so a CI run
        can be reproduced locally.

        :param env_file: Path to the dotenv file.
        :param environ: Base variables; defaults to the process environment.
        """
        merged = dict(os.environ if environ is None else environ)
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                merged[key] = value
        return cls(merged)

    @staticmethod
    def variable_name(name: str) -> str:
        return "INPUT_" + name.replace(" ", "_").upper()

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Reads one input.

        :param name: Input name as declared by the action.
        :param required: Fail when the input is empty.
        :return: The value, stripped unless it is command text.
        :raises ConfigurationError: If a required input is missing.
        """
        value = self.environ.get(self.variable_name(name), "")
        if name not in RAW_INPUTS:
            value = value.strip()
        if required and not value:
            raise ConfigurationError(f"Input required and not supplied: {name}", field=name)
        return value

    def parse(self) -> BuildConfig:
        """
        Reads every input and validates the required ones.

        :return: The build configuration.
        """
        values = {}
        for field, name in INPUT_NAMES.items():
            value = self.get_input(name, required=name in REQUIRED_INPUTS)
            if value or field in RAW_INPUTS:
                values[field] = value

        values.setdefault("distro", DEFAULT_DISTRO)
        values["repository"] = self.environ.get("GITHUB_REPOSITORY", "")
        values["workflow"] = self.environ.get("GITHUB_WORKFLOW", "")
        return BuildConfig(**values)
