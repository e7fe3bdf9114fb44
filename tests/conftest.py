"""Shared test fixtures for cruntime tests."""

import json
from typing import Dict, List, Optional

import pytest

from cruntime.errors import ContainerNotFoundError
from cruntime.oci import CONFIG_ANNOTATION
from cruntime.sandbox.base import SandboxEngine, SandboxHandle, SandboxStatus


class FakeEngine(SandboxEngine):
    """In-memory sandbox engine recording every call it receives."""

    def __init__(self, calls: Optional[List[str]] = None):
        self.sandboxes: Dict[str, SandboxStatus] = {}
        self.calls: List[str] = calls if calls is not None else []
        self.stop_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None

    def add(
        self,
        container_id: str,
        state: str = "exited",
        pid: int = 0,
        oci_config: Optional[dict] = None,
        annotations: Optional[Dict[str, str]] = None,
    ) -> None:
        annotations = dict(annotations or {})
        if oci_config is not None:
            annotations[CONFIG_ANNOTATION] = json.dumps(oci_config)
        self.sandboxes[container_id] = SandboxStatus(
            id=container_id, state=state, pid=pid, annotations=annotations
        )

    def _get(self, container_id: str) -> SandboxStatus:
        if container_id not in self.sandboxes:
            raise ContainerNotFoundError(container_id)
        return self.sandboxes[container_id]

    def list_sandboxes(self) -> List[str]:
        self.calls.append("list")
        return list(self.sandboxes)

    def fetch_status(self, container_id: str) -> SandboxStatus:
        self.calls.append(f"status:{container_id}")
        return self._get(container_id)

    def stop_sandbox(self, container_id: str) -> SandboxHandle:
        self.calls.append(f"stop:{container_id}")
        if self.stop_error is not None:
            raise self.stop_error
        status = self._get(container_id)
        status.state = "exited"
        status.pid = 0
        return SandboxHandle(
            id=container_id, state=status.state, annotations=dict(status.annotations)
        )

    def delete_sandbox(self, container_id: str) -> None:
        self.calls.append(f"delete:{container_id}")
        if self.delete_error is not None:
            raise self.delete_error
        self._get(container_id)
        del self.sandboxes[container_id]


def oci_config(cgroups_path: str = "", **resources) -> dict:
    """Build a minimal OCI config document."""
    linux: dict = {}
    if cgroups_path:
        linux["cgroupsPath"] = cgroups_path
    if resources:
        linux["resources"] = resources
    return {"ociVersion": "1.0.2", "linux": linux}


@pytest.fixture
def calls():
    return []


@pytest.fixture
def engine(calls):
    return FakeEngine(calls)


@pytest.fixture
def cgroups_root(tmp_path):
    root = tmp_path / "cgroup"
    root.mkdir()
    return root
