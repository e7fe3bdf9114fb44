"""Process liveness checks."""

import os

from cruntime.errors import LivenessLookupError


def process_running(pid: int) -> bool:
    """
    Tell whether a process is alive, probing it with signal 0.

    A missing process is not running. Any failure that leaves the answer
    unknown is raised rather than reported as not running.

    Raises:
        LivenessLookupError: If the process state cannot be determined
    """
    # Engines report pid 0 for containers without a process; signalling
    # pid 0 would target our own process group.
    if pid <= 0:
        return False

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # EPERM: the process exists but belongs to another user.
        return True
    except OSError as e:
        raise LivenessLookupError(pid, e.strerror or str(e)) from e

    return True
