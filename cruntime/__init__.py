"""Container runtime: deletion of containers and their host resources."""

from cruntime.errors import ContainerRuntimeError
from cruntime.lifecycle import delete_container, delete_containers

__all__ = [
    "ContainerRuntimeError",
    "delete_container",
    "delete_containers",
]
