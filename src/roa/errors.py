"""
Exceptions raised while preparing or executing a run-on-arch build.
"""
from pathlib import Path
from typing import Optional


class RunOnArchError(Exception):
    """
    Base class for every failure that aborts a run.
    The message is what gets reported to the CI platform.
    """


class ConfigurationError(RunOnArchError):
    """
    Raised for missing, contradictory or malformed inputs.
    """
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingImageDefinitionError(RunOnArchError):
    """
    Raised when the resolved Dockerfile is not on disk.
    """
    def __init__(self, path: Path):
        super().__init__(f"run-on-arch: {path} does not exist.")
        self.path = path


class ExecutionError(RunOnArchError):
    """
    Raised when the external build driver fails or cannot be started.
    """
    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class ArtifactWriteError(RunOnArchError):
    """
    Raised when the Dockerfile or a phase script cannot be written.
    """
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
