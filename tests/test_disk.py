from types import SimpleNamespace

import pytest

from serverhealth.services import disk_monitor, procfs


class DummySettings:
    def __init__(self, proc_path):
        self.proc_path = str(proc_path)
        self.sys_path = str(proc_path)


MOUNTS = """\
/dev/sda1 / ext4 rw,relatime 0 0
proc /proc proc rw,nosuid 0 0
sysfs /sys sysfs rw 0 0
tmpfs /run tmpfs rw 0 0
/dev/sdb1 /data xfs rw 0 0
overlay /var/lib/docker/overlay2/abc/merged overlay rw 0 0
/dev/sdc1 /mnt/tmp tmpfs rw 0 0
cgroup2 /sys/fs/cgroup cgroup2 rw 0 0
/dev/pts /dev/pts devpts rw 0 0
short line
"""


def test_parse_mounts_keeps_block_devices_only():
    mounts = disk_monitor.parse_mounts(MOUNTS)

    assert [m.mount_point for m in mounts] == ["/", "/data"]
    assert mounts[0].device == "/dev/sda1"
    assert mounts[1].fstype == "xfs"


@pytest.mark.parametrize("fstype", sorted(disk_monitor.PSEUDO_FILESYSTEMS))
def test_pseudo_filesystems_are_always_excluded(fstype):
    text = f"/dev/sda1 /mnt {fstype} rw 0 0\n"
    assert disk_monitor.parse_mounts(text) == []


def test_get_disk_volumes_skips_failing_mounts(monkeypatch, tmp_path):
    """
    A mount whose capacity query raises (e.g. vanished mount) is skipped,
    the others are still reported.
    """
    (tmp_path / "mounts").write_text(MOUNTS)
    monkeypatch.setattr(procfs, "get_settings", lambda: DummySettings(tmp_path))

    def fake_disk_usage(path):
        if path == "/data":
            raise PermissionError("denied")
        # 5 MiB reserved for root: free (f_bavail) is lower than total - used
        return SimpleNamespace(
            total=100 * 1024 * 1024,
            used=75 * 1024 * 1024,
            free=20 * 1024 * 1024,
        )

    monkeypatch.setattr(disk_monitor.psutil, "disk_usage", fake_disk_usage)

    volumes = disk_monitor.get_disk_volumes()

    assert len(volumes) == 1
    root = volumes[0]
    assert root.path == "/"
    assert root.total_kb == 102400
    assert root.free_kb == 25600
    assert root.used_kb == root.total_kb - root.free_kb
    assert root.usage_percent == pytest.approx(75.0)


def test_zero_sized_filesystem_reports_zero_percent(monkeypatch):
    monkeypatch.setattr(
        disk_monitor.psutil,
        "disk_usage",
        lambda path: SimpleNamespace(total=0, used=0, free=0),
    )
    volume = disk_monitor._query_capacity("/empty")
    assert volume.total_kb == 0
    assert volume.usage_percent == 0.0
