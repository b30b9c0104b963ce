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
Execution of the external build driver.
"""
import subprocess
from typing import Protocol

from ..MODELS.execution_plan import ExecutionPlan, ExecutionResult
from ..errors import ExecutionError


class Executor(Protocol):
    """
    Anything that can run an execution plan to completion.
    """
    def execute(self, plan: ExecutionPlan) -> ExecutionResult:
        ...


class SubprocessExecutor:
    """
    Runs the driver as a child process and waits for it.
    Output goes straight to this process's stdout/stderr.
    """
    def execute(self, plan: ExecutionPlan) -> ExecutionResult:
        """
        Runs the driver once. No timeout and no retry.

        Args:
            plan (ExecutionPlan): Driver, arguments and environment.

        Returns:
            ExecutionResult: The driver's exit status.

        Raises:
            ExecutionError: If the driver cannot be started.
        """
        command = plan.command()
        print(f"[run-on-arch] Starting command: {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                env=plan.environment,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except OSError as e:
            raise ExecutionError(f"run-on-arch: failed to start {plan.driver}: {e}") from e

        return ExecutionResult(exit_code=completed.returncode)
