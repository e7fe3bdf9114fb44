"""Docker backed sandbox engine."""

from typing import List, Optional

import docker
from docker.errors import DockerException, NotFound
from docker.models.containers import Container

from cruntime.config import config
from cruntime.errors import (
    ContainerNotFoundError,
    DeleteError,
    SandboxError,
    StopError,
)
from cruntime.sandbox.base import SandboxEngine, SandboxHandle, SandboxStatus
from cruntime.utils import logger

BUNDLE_ANNOTATION = "io.cruntime.bundle"


class DockerSandboxEngine(SandboxEngine):
    """
    Runs container sandboxes as Docker containers.

    A container is managed by this runtime when it carries the managed
    label; its Docker name is the container ID and its labels are the
    annotations.
    """

    def __init__(
        self,
        client: Optional[docker.DockerClient] = None,
        label: Optional[str] = None,
        stop_timeout: Optional[int] = None,
    ):
        """Initialize the engine, connecting lazily unless a client is given."""
        self.client = client
        self.label = label or config.managed_label
        self.stop_timeout = config.stop_timeout if stop_timeout is None else stop_timeout

    def connect(self) -> docker.DockerClient:
        """Connect to Docker daemon."""
        if self.client is not None:
            return self.client

        try:
            if config.docker_url:
                self.client = docker.DockerClient(base_url=config.docker_url)
            else:
                self.client = docker.from_env()
            logger.info("Connected to Docker daemon")
        except DockerException as e:
            logger.error(f"Failed to connect to Docker: {e}")
            raise SandboxError(f"Failed to connect to Docker: {e}") from e

        return self.client

    def _get(self, container_id: str) -> Container:
        try:
            container = self.connect().containers.get(container_id)
        except NotFound as e:
            raise ContainerNotFoundError(container_id) from e

        if self.label not in (container.labels or {}):
            raise ContainerNotFoundError(container_id)

        return container

    def list_sandboxes(self) -> List[str]:
        """Return the names of all containers carrying the managed label."""
        try:
            containers = self.connect().containers.list(
                all=True, filters={"label": self.label}
            )
        except DockerException as e:
            logger.error(f"Failed to list containers: {e}")
            raise SandboxError(f"Failed to list containers: {e}") from e

        return [container.name for container in containers]

    def fetch_status(self, container_id: str) -> SandboxStatus:
        """Read the container state from Docker."""
        try:
            container = self._get(container_id)
            container.reload()
        except NotFound as e:
            raise ContainerNotFoundError(container_id) from e
        except DockerException as e:
            logger.error(f"Failed to fetch status of {container_id}: {e}")
            raise SandboxError(f"Failed to fetch status of {container_id}: {e}") from e

        state = container.attrs.get("State", {})
        labels = dict(container.labels or {})

        return SandboxStatus(
            id=container_id,
            state=state.get("Status", container.status),
            pid=state.get("Pid", 0) or 0,
            bundle=labels.get(BUNDLE_ANNOTATION),
            annotations=labels,
        )

    def stop_sandbox(self, container_id: str) -> SandboxHandle:
        """Stop the container, killing it once the stop timeout expires."""
        try:
            container = self._get(container_id)
            logger.info(f"Stopping container {container_id}")
            container.stop(timeout=self.stop_timeout)
            container.reload()
            logger.info("Container stopped")
        except NotFound as e:
            raise ContainerNotFoundError(container_id) from e
        except DockerException as e:
            logger.error(f"Failed to stop container: {e}")
            raise StopError(f"Failed to stop container {container_id}: {e}") from e

        return SandboxHandle(
            id=container_id,
            state=container.status,
            annotations=dict(container.labels or {}),
        )

    def delete_sandbox(self, container_id: str) -> None:
        """Remove the container together with its anonymous volumes."""
        try:
            container = self._get(container_id)
            logger.info(f"Removing container {container_id}")
            container.remove(v=True)
            logger.info("Container removed")
        except NotFound as e:
            raise ContainerNotFoundError(container_id) from e
        except DockerException as e:
            logger.error(f"Failed to remove container: {e}")
            raise DeleteError(f"Failed to remove container {container_id}: {e}") from e
