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
Orchestration of a single build: from configuration to driver invocation.
"""
import sys
from typing import Dict, Mapping, Optional
from ..MODELS.action_layout import ActionLayout
from ..MODELS.build_config import BuildConfig
from ..MODELS.execution_plan import ExecutionPlan, ExecutionResult
from ..BUILDERS.image_resolver import ImageResolver
from ..BUILDERS.script_assembler import ScriptAssembler
from ..PARSERS.runtime_args import parse_runtime_args
from ..RUNNERS.process_runner import Executor, SubprocessExecutor
from ..UTILS.identity import container_name
from ..UTILS.shell_resolver import ShellResolver
from .environment_manager import EnvironmentManager
from ..errors import ArtifactWriteError, ExecutionError, RunOnArchError


class BuildOrchestrator:
    """
    Runs the build pipeline: image resolution, script generation,
    environment merging, naming and finally the driver.
    """
    def __init__(self,
                 config: BuildConfig,
                 layout: ActionLayout,
                 base_env: Optional[Mapping[str, str]] = None,
                 executor: Optional[Executor] = None):
        """
        Initializes the orchestrator.

        :param config: Validated build inputs.
        :param layout: Locations inside the action checkout.
        :param base_env: Environment the driver inherits; CI_* defaults come from it.
        :param executor: Runs the plan; defaults to a subprocess.
        """
        self.config = config
        self.layout = layout
        self.base_env: Dict[str, str] = dict(base_env or {})
        self.executor = executor or SubprocessExecutor()

        self.image_resolver = ImageResolver(layout)
        self.script_assembler = ScriptAssembler(layout)
        self.env_manager = EnvironmentManager(self.base_env)

    def prepare(self) -> ExecutionPlan:
        """
        Validates everything, then writes the Dockerfile (when synthesized)
        and the phase scripts. Nothing is written when validation fails.

        :return: The plan to hand to the driver.
        """
        if not sys.platform.startswith("linux"):
            raise RunOnArchError("run-on-arch supports only Linux")

        config = self.config

        # Checks with no side effects first
        image = self.image_resolver.resolve(config.arch, config.distro, config.base_image)
        env_set = self.env_manager.get_merged_environment(config)
        runtime_args = parse_runtime_args(config.docker_run_args)

        shells = ShellResolver.resolve(config.distro, config.shell)
        scripts = self.script_assembler.assemble(shells, config.setup, config.install, config.run)

        # Artifacts
        try:
            dockerfile = self.image_resolver.materialize(image)
            scripts.write()
        except OSError as e:
            raise ArtifactWriteError(
                f"run-on-arch: cannot write build files: {e}", path=e.filename
            ) from e

        name = container_name(config.repository, config.workflow, config.arch, config.distro)

        return ExecutionPlan(
            driver=self.layout.entrypoint,
            image_definition=dockerfile,
            container_name=name,
            arguments=runtime_args + env_set.forward_flags,
            environment=env_set.variables,
        )

    def run(self) -> ExecutionResult:
        """
        Prepares the plan and runs the driver once.

        :return: The driver's result when it succeeded.
        :raises ExecutionError: If the driver exits nonzero.
        """
        plan = self.prepare()

        print("[run-on-arch] Configuring Docker for multi-architecture support")
        result = self.executor.execute(plan)
        if not result.succeeded:
            raise ExecutionError(
                f"run-on-arch: {plan.driver} failed with exit code {result.exit_code}",
                exit_code=result.exit_code,
            )
        return result
