"""
Models describing what is handed to the external build driver.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass
class ExecutionPlan:
    """
    Everything the driver needs: the Dockerfile, the container name, the
    runtime arguments (user arguments first, then forwarding flags) and
    the environment to run with.
    """

    driver: Path
    image_definition: Path
    container_name: str
    arguments: List[str] = field(default_factory=list)
    environment: Dict[str, str] = field(default_factory=dict)

    def command(self) -> List[str]:
        """
        Builds the full driver command line.

        Returns:
            List[str]: ``[driver, dockerfile, container_name, *arguments]``.
        """
        return [str(self.driver), str(self.image_definition), self.container_name] + list(self.arguments)


@dataclass
class ExecutionResult:
    """Outcome of a single driver invocation."""

    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
