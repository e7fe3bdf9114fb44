"""Container lifecycle operations."""

from cruntime.lifecycle.delete import (
    ContainerDeleter,
    DeletionRequest,
    DeletionState,
    delete_container,
    delete_containers,
)
from cruntime.lifecycle.liveness import process_running
from cruntime.lifecycle.validator import validate

__all__ = [
    "ContainerDeleter",
    "DeletionRequest",
    "DeletionState",
    "delete_container",
    "delete_containers",
    "process_running",
    "validate",
]
