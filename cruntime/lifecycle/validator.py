"""Checks run before a container may be deleted."""

from cruntime.errors import ContainerIDError, ContainerNotFoundError, InvalidStateError
from cruntime.oci import STATUS_CREATING, status_to_oci_state
from cruntime.sandbox.base import SandboxEngine

# Engine state of a sandbox whose removal is already under way
ENGINE_STATE_REMOVING = "removing"


def validate(container_id: str, engine: SandboxEngine) -> None:
    """
    Check the MUST and MUST NOT rules of the OCI runtime specification.

    The container has to be known to the runtime and must not be in the
    middle of being created or removed.

    Raises:
        ContainerIDError: If the container ID is empty
        ContainerNotFoundError: If the runtime does not manage the container
        InvalidStateError: If the container cannot be deleted in its state
    """
    if not container_id:
        raise ContainerIDError("Missing container ID")

    if container_id not in engine.list_sandboxes():
        raise ContainerNotFoundError(container_id)

    status = engine.fetch_status(container_id)
    if status.state == ENGINE_STATE_REMOVING:
        raise InvalidStateError(
            f"Container {container_id} is already being removed"
        )

    state = status_to_oci_state(status)
    if state.status == STATUS_CREATING:
        raise InvalidStateError(
            f"Container {container_id} is still being created and cannot be deleted"
        )
