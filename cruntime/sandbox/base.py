"""Sandbox engine interface and the records it hands back."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SandboxStatus:
    """Point-in-time status of the sandbox backing one container."""

    id: str
    state: str
    pid: int = 0
    bundle: Optional[str] = None
    annotations: Dict[str, str] = field(default_factory=dict)


@dataclass
class SandboxHandle:
    """A sandbox as returned by the engine after it was stopped."""

    id: str
    state: str
    annotations: Dict[str, str] = field(default_factory=dict)


class SandboxEngine(ABC):
    """
    Narrow view of the engine that runs container sandboxes.

    Implementations raise ContainerNotFoundError for unknown IDs and
    SandboxError subclasses for engine failures.
    """

    @abstractmethod
    def list_sandboxes(self) -> List[str]:
        """Return the IDs of every container this runtime manages."""
        pass

    @abstractmethod
    def fetch_status(self, container_id: str) -> SandboxStatus:
        """Fetch the current status of a sandbox."""
        pass

    @abstractmethod
    def stop_sandbox(self, container_id: str) -> SandboxHandle:
        """Stop the sandbox and return a handle to it."""
        pass

    @abstractmethod
    def delete_sandbox(self, container_id: str) -> None:
        """Permanently delete the sandbox."""
        pass
