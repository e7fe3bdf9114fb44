"""Tests for cgroup path resolution and removal."""

from pathlib import Path

import pytest

import cruntime.cgroups as cgroups
from cruntime.cgroups import remove_cgroup_paths, resolve_cgroup_paths
from cruntime.errors import PathResolutionError, RemovalError
from cruntime.oci import OCISpec

from conftest import oci_config


def make_spec(cgroups_path: str = "", mounts=None, **resources) -> OCISpec:
    document = oci_config(cgroups_path, **resources)
    if mounts:
        document["mounts"] = mounts
    return OCISpec.model_validate(document)


class TestResolveCgroupPaths:
    """Test deriving cgroup paths from an OCI config."""

    def test_no_linux_section(self, cgroups_root):
        """A config without a linux section declares no cgroups."""
        spec = OCISpec.model_validate({"ociVersion": "1.0.2"})
        assert resolve_cgroup_paths(spec, cgroups_root) == []

    def test_empty_cgroups_path(self, cgroups_root):
        """Resources without a cgroupsPath yield nothing."""
        spec = make_spec("", memory={"limit": 1024})
        assert resolve_cgroup_paths(spec, cgroups_root) == []

    def test_no_resources(self, cgroups_root):
        """A cgroupsPath without resources yields nothing."""
        spec = make_spec("/cruntime/c1")
        assert resolve_cgroup_paths(spec, cgroups_root) == []

    def test_relative_path(self, cgroups_root):
        """Relative paths live below each controller of the system root."""
        spec = make_spec("cruntime/c1", memory={"limit": 1024}, cpu={"shares": 512})
        assert resolve_cgroup_paths(spec, cgroups_root) == [
            cgroups_root / "memory" / "cruntime" / "c1",
            cgroups_root / "cpu" / "cruntime" / "c1",
        ]

    def test_absolute_path_without_cgroup_mount(self, cgroups_root):
        """Absolute paths are relative to the system mount point."""
        spec = make_spec("/cruntime/c1", pids={"limit": 10})
        assert resolve_cgroup_paths(spec, cgroups_root) == [
            cgroups_root / "pids" / "cruntime" / "c1"
        ]

    def test_controller_order(self, cgroups_root):
        """Every declared resource maps to its controllers, in order."""
        spec = make_spec(
            "c1",
            network={"classID": 1},
            hugepageLimits=[{"pageSize": "2MB", "limit": 1}],
            blockIO={"weight": 10},
            pids={"limit": 10},
            cpu={"shares": 2},
            memory={"limit": 1},
            devices=[{"allow": False, "access": "rwm"}],
        )
        controllers = [p.parent.name for p in resolve_cgroup_paths(spec, cgroups_root)]
        assert controllers == [
            "devices", "memory", "cpu", "pids", "blkio", "hugetlb", "net_cls", "net_prio",
        ]

    def test_empty_lists_are_not_declared(self, cgroups_root):
        """Empty device and hugepage lists do not count as resources."""
        spec = make_spec("c1", devices=[], hugepageLimits=[], memory={"limit": 1})
        assert resolve_cgroup_paths(spec, cgroups_root) == [cgroups_root / "memory" / "c1"]

    def test_cgroup_mount_destination(self, tmp_path, monkeypatch):
        """Absolute paths follow the cgroup mount of the config."""
        monkeypatch.setattr(cgroups, "_is_mounted", lambda path: True)
        mounts = [{"destination": str(tmp_path / "mnt"), "type": "cgroup"}]
        spec = make_spec("/c1", mounts=mounts, memory={"limit": 1})

        assert resolve_cgroup_paths(spec, Path("/unused")) == [
            tmp_path / "mnt" / "memory" / "c1"
        ]

    def test_unmounted_controller_is_skipped(self, tmp_path, monkeypatch):
        """Controllers missing from the host are not an error."""
        monkeypatch.setattr(cgroups, "_is_mounted", lambda path: path.name != "cpu")
        mounts = [{"destination": str(tmp_path / "mnt"), "type": "cgroup"}]
        spec = make_spec("/c1", mounts=mounts, memory={"limit": 1}, cpu={"shares": 2})

        assert resolve_cgroup_paths(spec) == [tmp_path / "mnt" / "memory" / "c1"]

    def test_cgroup_mount_without_destination(self):
        """A cgroup mount needs a destination."""
        mounts = [{"destination": "", "type": "cgroup"}]
        spec = make_spec("/c1", mounts=mounts, memory={"limit": 1})

        with pytest.raises(PathResolutionError):
            resolve_cgroup_paths(spec)

    @pytest.mark.parametrize("path", ["/", "../../etc", "c1/../.."])
    def test_paths_outside_hierarchy_rejected(self, cgroups_root, path):
        """Paths must resolve strictly below the controller hierarchy."""
        spec = make_spec(path, memory={"limit": 1})

        with pytest.raises(PathResolutionError):
            resolve_cgroup_paths(spec, cgroups_root)


class TestRemoveCgroupPaths:
    """Test removal of cgroup paths."""

    def test_empty_list_touches_nothing(self, monkeypatch):
        """An empty path list performs no filesystem call."""
        removed = []
        monkeypatch.setattr(cgroups, "_remove_path", removed.append)

        remove_cgroup_paths([])

        assert removed == []

    def test_removes_directories(self, tmp_path):
        """Empty and populated directories are both removed."""
        empty = tmp_path / "memory" / "c1"
        populated = tmp_path / "cpu" / "c1"
        empty.mkdir(parents=True)
        (populated / "nested").mkdir(parents=True)
        (populated / "tasks").write_text("")

        remove_cgroup_paths([empty, populated])

        assert not empty.exists()
        assert not populated.exists()

    def test_removes_files(self, tmp_path):
        """A plain file at a cgroup path is unlinked."""
        path = tmp_path / "stray"
        path.write_text("")

        remove_cgroup_paths([path])

        assert not path.exists()

    def test_idempotent(self, tmp_path):
        """Removing already removed paths succeeds."""
        paths = [tmp_path / "memory" / "c1", tmp_path / "cpu" / "c1"]
        for path in paths:
            path.mkdir(parents=True)

        remove_cgroup_paths(paths)
        remove_cgroup_paths(paths)

        assert not any(path.exists() for path in paths)

    def test_first_failure_stops_removal(self, monkeypatch):
        """The first path that cannot be removed aborts the rest."""
        paths = [Path("/cg/one"), Path("/cg/two"), Path("/cg/three")]
        attempted = []

        def fake_remove(path):
            attempted.append(path)
            if path == paths[1]:
                raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(cgroups, "_remove_path", fake_remove)

        with pytest.raises(RemovalError) as exc_info:
            remove_cgroup_paths(paths)

        assert attempted == paths[:2]
        assert exc_info.value.path == paths[1]
        assert "/cg/two" in str(exc_info.value)

    def test_round_trip_empty_config(self, monkeypatch, cgroups_root):
        """A config without cgroups leads to a no-op cleanup."""
        removed = []
        monkeypatch.setattr(cgroups, "_remove_path", removed.append)

        paths = resolve_cgroup_paths(make_spec(), cgroups_root)
        remove_cgroup_paths(paths)

        assert paths == []
        assert removed == []
