"""
Models for the generated phase scripts and the merged container environment.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass
class PhaseScript:
    """A script file to be written for one build phase."""

    path: Path
    lines: List[str]

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    def write(self) -> Path:
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, 'w') as f:
            f.write(self.content)
        return self.path


@dataclass
class ScriptBundle:
    """
    The setup, install and run scripts of a build.

    The setup script is sourced by the driver, the install script is copied
    into the image build context and the run script is executed inside the
    container.
    """

    setup: PhaseScript
    install: PhaseScript
    run: PhaseScript

    def write(self) -> List[Path]:
        """
        Writes all three scripts, overwriting previous runs.

        Returns:
            The paths written, in setup, install, run order.
        """
        return [script.write() for script in (self.setup, self.install, self.run)]


@dataclass
class EnvironmentSet:
    """
    Environment passed to the driver, plus the ``-eNAME`` flags that make
    the container runtime import each added variable.
    """

    variables: Dict[str, str] = field(default_factory=dict)
    forward_flags: List[str] = field(default_factory=list)

    def export(self, name: str, value: str) -> None:
        """Sets a variable and appends its forwarding flag."""
        self.variables[name] = value
        self.forward_flags.append(f"-e{name}")

    @property
    def forwarded_names(self) -> List[str]:
        return [flag[2:] for flag in self.forward_flags]
