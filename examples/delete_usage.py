"""Basic usage example for container deletion."""

import sys

from cruntime import ContainerRuntimeError, delete_containers
from cruntime.config import config
from cruntime.sandbox import DockerSandboxEngine


def main():
    """Delete the containers named on the command line."""
    container_ids = sys.argv[1:] or ["ubuntu01"]

    print("Deleting containers: " + ", ".join(container_ids))
    print("=" * 50)

    engine = DockerSandboxEngine()

    try:
        delete_containers(
            container_ids, force=False, engine=engine, cgroups_root=config.cgroups_root
        )
    except ContainerRuntimeError as e:
        print(f"\nDeletion stopped: {e}")
        sys.exit(1)

    print("\nAll containers deleted")


if __name__ == "__main__":
    main()
