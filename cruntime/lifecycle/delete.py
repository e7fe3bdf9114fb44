"""Container deletion: teardown of the sandbox and its host cgroups."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from cruntime.cgroups import remove_cgroup_paths, resolve_cgroup_paths
from cruntime.errors import StillRunningError
from cruntime.lifecycle.liveness import process_running
from cruntime.lifecycle.validator import validate
from cruntime.oci import sandbox_to_oci_config, status_to_oci_state
from cruntime.sandbox.base import SandboxEngine
from cruntime.sandbox.manager import DockerSandboxEngine
from cruntime.utils import logger


class DeletionState(str, Enum):
    """Steps of a container deletion."""
    VALIDATING = "validating"
    CHECKING_LIVENESS = "checking_liveness"
    STOPPING = "stopping"
    FETCHING_CONFIG = "fetching_config"
    DELETING = "deleting"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DeletionRequest:
    """A single request to delete one container."""

    container_id: str
    force: bool = False


class ContainerDeleter:
    """
    Deletes one container at a time.

    The sequence is fixed: validate, check liveness (unless forced), stop
    the sandbox, read its OCI config, delete the sandbox, then remove the
    cgroup paths the config declares. The config is read before the
    sandbox is deleted since nothing can be recovered from a deleted
    sandbox. Nothing done before a failure is rolled back.
    """

    def __init__(
        self,
        engine: SandboxEngine,
        cgroups_root: Optional[Path] = None,
        liveness: Callable[[int], bool] = process_running,
    ):
        """
        Initialize the deleter.

        Args:
            engine: Sandbox engine owning the containers
            cgroups_root: Mount point of the host cgroup hierarchies
            liveness: Tells whether a pid is running
        """
        self.engine = engine
        self.cgroups_root = cgroups_root
        self.liveness = liveness
        self.state: Optional[DeletionState] = None
        self.history: List[DeletionState] = []

    def _enter(self, state: DeletionState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug(f"Deletion state: {state.value}")

    def delete(self, request: DeletionRequest) -> None:
        """
        Run the deletion for a request.

        Raises:
            ContainerRuntimeError: Whatever stopped the deletion, unchanged
        """
        container_id = request.container_id
        self.history = []

        try:
            self._enter(DeletionState.VALIDATING)
            validate(container_id, self.engine)

            if not request.force:
                self._enter(DeletionState.CHECKING_LIVENESS)
                self._check_liveness(container_id)

            self._enter(DeletionState.STOPPING)
            handle = self.engine.stop_sandbox(container_id)

            self._enter(DeletionState.FETCHING_CONFIG)
            oci_spec = sandbox_to_oci_config(handle)

            self._enter(DeletionState.DELETING)
            self.engine.delete_sandbox(container_id)

            # Remove the cgroups created for the container so that no file
            # descriptors on them outlive the deletion.
            self._enter(DeletionState.CLEANING_UP)
            cgroups_paths = resolve_cgroup_paths(oci_spec, self.cgroups_root)
            remove_cgroup_paths(cgroups_paths)

        except Exception as e:
            failed_in = self.state
            self._enter(DeletionState.FAILED)
            logger.error(
                f"Failed to delete container {container_id} "
                f"while {failed_in.value}: {e}"
            )
            raise

        self._enter(DeletionState.DONE)
        logger.info(f"Container {container_id} deleted")

    def _check_liveness(self, container_id: str) -> None:
        state = status_to_oci_state(self.engine.fetch_status(container_id))

        if self.liveness(state.pid):
            raise StillRunningError(container_id, state.pid)


def delete_container(
    container_id: str,
    force: bool = False,
    engine: Optional[SandboxEngine] = None,
    cgroups_root: Optional[Path] = None,
) -> None:
    """Delete a container and every resource it holds on the host."""
    deleter = ContainerDeleter(engine or DockerSandboxEngine(), cgroups_root)
    deleter.delete(DeletionRequest(container_id, force))


def delete_containers(
    container_ids: Iterable[str],
    force: bool = False,
    engine: Optional[SandboxEngine] = None,
    cgroups_root: Optional[Path] = None,
) -> None:
    """
    Delete containers one after the other.

    Stops at the first failure: containers after the failing one are
    left untouched.
    """
    engine = engine or DockerSandboxEngine()
    for container_id in container_ids:
        delete_container(container_id, force, engine, cgroups_root)
