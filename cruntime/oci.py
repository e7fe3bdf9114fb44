"""Translation between sandbox engine records and OCI runtime structures."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cruntime.errors import TranslationError
from cruntime.sandbox.base import SandboxHandle, SandboxStatus
from cruntime.sandbox.manager import BUNDLE_ANNOTATION

OCI_VERSION = "1.0.2"
CONFIG_ANNOTATION = "io.cruntime.oci.config"

# OCI statuses
STATUS_CREATING = "creating"
STATUS_CREATED = "created"
STATUS_RUNNING = "running"
STATUS_STOPPED = "stopped"
STATUS_PAUSED = "paused"

# Engine lifecycle states mapped onto OCI statuses
ENGINE_STATE_TO_OCI = {
    "creating": STATUS_CREATING,
    "created": STATUS_CREATED,
    "running": STATUS_RUNNING,
    "restarting": STATUS_RUNNING,
    "paused": STATUS_PAUSED,
    "exited": STATUS_STOPPED,
    "dead": STATUS_STOPPED,
    "stopped": STATUS_STOPPED,
}


class OCIModel(BaseModel):
    """Base for OCI documents: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OCIState(OCIModel):
    """Container state as defined by the OCI runtime specification."""

    oci_version: str = Field(default=OCI_VERSION, alias="ociVersion")
    id: str
    status: str
    pid: int = 0
    bundle: str = ""
    annotations: Dict[str, str] = Field(default_factory=dict)


class Mount(OCIModel):
    destination: str = ""
    type: Optional[str] = None
    source: Optional[str] = None
    options: List[str] = Field(default_factory=list)


class LinuxResources(OCIModel):
    devices: Optional[List[Dict[str, Any]]] = None
    memory: Optional[Dict[str, Any]] = None
    cpu: Optional[Dict[str, Any]] = None
    pids: Optional[Dict[str, Any]] = None
    block_io: Optional[Dict[str, Any]] = Field(default=None, alias="blockIO")
    hugepage_limits: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="hugepageLimits"
    )
    network: Optional[Dict[str, Any]] = None


class Linux(OCIModel):
    cgroups_path: str = Field(default="", alias="cgroupsPath")
    resources: Optional[LinuxResources] = None


class OCISpec(OCIModel):
    """The part of an OCI runtime config the runtime needs after creation."""

    oci_version: str = Field(default=OCI_VERSION, alias="ociVersion")
    hostname: Optional[str] = None
    mounts: List[Mount] = Field(default_factory=list)
    linux: Optional[Linux] = None
    annotations: Dict[str, str] = Field(default_factory=dict)


def status_to_oci_state(status: SandboxStatus) -> OCIState:
    """Convert an engine status into an OCI state document."""
    oci_status = ENGINE_STATE_TO_OCI.get(status.state)
    if oci_status is None:
        raise TranslationError(
            f"Unknown state {status.state!r} for container {status.id}"
        )

    return OCIState(
        id=status.id,
        status=oci_status,
        pid=status.pid,
        bundle=status.bundle or "",
        annotations=status.annotations,
    )


def sandbox_to_oci_config(handle: SandboxHandle) -> OCISpec:
    """
    Recover the OCI config a sandbox was created from.

    The config is read from the config annotation when present, otherwise
    from config.json inside the bundle named by the bundle annotation.

    Raises:
        TranslationError: If no config can be found or it does not parse
    """
    raw = handle.annotations.get(CONFIG_ANNOTATION)
    source = f"annotation {CONFIG_ANNOTATION}"

    if raw is None:
        bundle = handle.annotations.get(BUNDLE_ANNOTATION)
        if not bundle:
            raise TranslationError(
                f"No OCI config recorded for container {handle.id}"
            )

        config_path = Path(bundle) / "config.json"
        source = str(config_path)
        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise TranslationError(f"Could not read {config_path}: {e}") from e

    try:
        return OCISpec.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise TranslationError(
            f"Invalid OCI config for container {handle.id} ({source}): {e}"
        ) from e
