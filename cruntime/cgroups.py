"""Host cgroup paths owned by a container: resolution and removal."""

import errno
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from cruntime.errors import PathResolutionError, RemovalError
from cruntime.oci import OCISpec
from cruntime.utils import logger

DEFAULT_CGROUPS_ROOT = Path("/sys/fs/cgroup")

# OCI resource field -> cgroup v1 controllers it lives in
RESOURCE_CONTROLLERS: List[Tuple[str, Tuple[str, ...]]] = [
    ("devices", ("devices",)),
    ("memory", ("memory",)),
    ("cpu", ("cpu",)),
    ("pids", ("pids",)),
    ("block_io", ("blkio",)),
    ("hugepage_limits", ("hugetlb",)),
    ("network", ("net_cls", "net_prio")),
]


def _is_mounted(path: Path) -> bool:
    return os.path.ismount(path)


def _join_within(base: Path, cgroups_path: str) -> Path:
    """Join cgroups_path strictly below base."""
    base = Path(os.path.normpath(base))
    joined = Path(os.path.normpath(base / cgroups_path.lstrip("/")))
    if base not in joined.parents:
        raise PathResolutionError(
            f"cgroupsPath {cgroups_path!r} escapes cgroup hierarchy {base}"
        )
    return joined


def _controller_path(
    spec: OCISpec, controller: str, cgroups_root: Path
) -> Optional[Path]:
    cgroups_path = spec.linux.cgroups_path

    # Relative paths, and absolute paths without a cgroup mount, are
    # interpreted relative to the system cgroup mount point.
    cgroup_mount = next((m for m in spec.mounts if m.type == "cgroup"), None)
    if not os.path.isabs(cgroups_path) or cgroup_mount is None:
        return _join_within(cgroups_root / controller, cgroups_path)

    if not cgroup_mount.destination:
        raise PathResolutionError(
            "cgroupsPath is absolute, cgroup mount destination cannot be empty"
        )

    controller_root = Path(cgroup_mount.destination) / controller

    # Kernels without support for a controller simply do not mount it.
    if not _is_mounted(controller_root):
        logger.info(f"cgroup {controller_root} not mounted, skipping")
        return None

    return _join_within(controller_root, cgroups_path)


def resolve_cgroup_paths(
    spec: OCISpec, cgroups_root: Optional[Path] = None
) -> List[Path]:
    """
    Derive the host cgroup paths created for a container.

    One path is produced per controller backing a resource the config
    declares. A config without a cgroupsPath or without resources yields
    an empty list.

    Args:
        spec: OCI config of the container
        cgroups_root: Mount point of the cgroup hierarchies

    Returns:
        Ordered list of cgroup directories

    Raises:
        PathResolutionError: If a path cannot be derived
    """
    root = Path(cgroups_root or DEFAULT_CGROUPS_ROOT)

    if spec.linux is None or not spec.linux.cgroups_path:
        return []

    resources = spec.linux.resources
    if resources is None:
        return []

    paths: List[Path] = []
    for field_name, controllers in RESOURCE_CONTROLLERS:
        value = getattr(resources, field_name)
        # Lists only count when they carry entries.
        if value is None or (isinstance(value, list) and not value):
            continue

        for controller in controllers:
            path = _controller_path(spec, controller, root)
            if path is not None:
                paths.append(path)

    return paths


def _remove_path(path: Path) -> None:
    try:
        # cgroupfs directories can only be removed with rmdir.
        path.rmdir()
    except FileNotFoundError:
        return
    except NotADirectoryError:
        path.unlink(missing_ok=True)
    except OSError as e:
        if e.errno not in (errno.ENOTEMPTY, errno.EEXIST):
            raise
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return


def remove_cgroup_paths(paths: Sequence[Path]) -> None:
    """
    Remove cgroup paths from the host, in order.

    Paths that no longer exist count as removed. The first path that
    cannot be removed stops the cleanup.

    Raises:
        RemovalError: Carrying the path that could not be removed
    """
    if not paths:
        logger.info("Cgroups files not removed because cgroupsPath was empty")
        return

    for path in paths:
        try:
            _remove_path(Path(path))
        except OSError as e:
            logger.error(f"Failed to remove cgroup path {path}: {e}")
            raise RemovalError(path, e.strerror or str(e)) from e

        logger.debug(f"Removed cgroup path {path}")
