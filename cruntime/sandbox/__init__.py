"""Sandbox engine access."""

from cruntime.sandbox.base import SandboxEngine, SandboxHandle, SandboxStatus
from cruntime.sandbox.manager import BUNDLE_ANNOTATION, DockerSandboxEngine

__all__ = [
    "SandboxEngine",
    "SandboxHandle",
    "SandboxStatus",
    "DockerSandboxEngine",
    "BUNDLE_ANNOTATION",
]
