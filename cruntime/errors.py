"""Exceptions raised by the container runtime."""

from pathlib import Path
from typing import Union


class ContainerRuntimeError(Exception):
    """Base exception for container runtime errors."""
    pass


class ContainerNotFoundError(ContainerRuntimeError):
    """Raised when a container ID is unknown to the runtime."""

    def __init__(self, container_id: str):
        self.container_id = container_id
        super().__init__(f"Container ID ({container_id}) does not exist")


class InvalidStateError(ContainerRuntimeError):
    """Raised when the container is in a state that forbids the operation."""
    pass


class ContainerIDError(InvalidStateError):
    """Raised when no usable container ID was given."""
    pass


class StillRunningError(ContainerRuntimeError):
    """Raised when a non-forced deletion targets a live container."""

    def __init__(self, container_id: str, pid: int):
        self.container_id = container_id
        self.pid = pid
        super().__init__("Container still running, should be stopped")


class LivenessLookupError(ContainerRuntimeError):
    """Raised when process liveness cannot be determined."""

    def __init__(self, pid: int, reason: str):
        self.pid = pid
        super().__init__(f"Could not determine whether process {pid} is running: {reason}")


class SandboxError(ContainerRuntimeError):
    """Raised when the sandbox engine fails."""
    pass


class StopError(SandboxError):
    """Raised when the sandbox engine cannot stop a sandbox."""
    pass


class DeleteError(SandboxError):
    """Raised when the sandbox engine cannot delete a sandbox."""
    pass


class TranslationError(ContainerRuntimeError):
    """Raised when sandbox data cannot be translated to OCI form."""
    pass


class PathResolutionError(ContainerRuntimeError):
    """Raised when cgroup paths cannot be derived from an OCI config."""
    pass


class RemovalError(ContainerRuntimeError):
    """Raised when a cgroup path could not be removed from the host."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"Could not remove cgroup path {self.path}: {reason}")
