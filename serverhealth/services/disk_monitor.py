import logging
from typing import List, NamedTuple

import psutil

from serverhealth.models.health import DiskVolume
from serverhealth.services.procfs import proc_file, read_text

logger = logging.getLogger(__name__)

# Filesystem types that never represent real storage capacity
PSEUDO_FILESYSTEMS = frozenset(
    {
        "proc",
        "sysfs",
        "tmpfs",
        "devtmpfs",
        "cgroup",
        "cgroup2",
        "devpts",
        "overlay",
        "none",
    }
)

_BLOCK_DEVICE_PREFIX = "/dev/"


class MountEntry(NamedTuple):
    device: str
    mount_point: str
    fstype: str


def parse_mounts(text: str) -> List[MountEntry]:
    """
    Return the block-device mounts listed in a /proc/mounts style text.

    Lines with fewer than three fields, pseudo filesystems and devices that
    do not live under /dev/ are dropped.
    """
    mounts: List[MountEntry] = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 3:
            continue
        device, mount_point, fstype = fields[:3]
        if fstype in PSEUDO_FILESYSTEMS:
            continue
        if not device.startswith(_BLOCK_DEVICE_PREFIX):
            continue
        mounts.append(MountEntry(device, mount_point, fstype))
    return mounts


def _query_capacity(mount_point: str) -> DiskVolume:
    """
    Ask the filesystem for its capacity. Raises OSError if the mount point
    vanished or is not accessible.
    """
    usage = psutil.disk_usage(mount_point)
    total_kb = usage.total // 1024
    # psutil's used is (f_blocks - f_bfree); its free is f_bavail, which
    # leaves out root-reserved blocks
    used_kb = usage.used // 1024
    free_kb = total_kb - used_kb

    return DiskVolume(
        path=mount_point,
        total_kb=total_kb,
        used_kb=used_kb,
        free_kb=free_kb,
        usage_percent=100.0 * used_kb / total_kb if total_kb > 0 else 0.0,
    )


def get_disk_volumes() -> List[DiskVolume]:
    """Capacity of every mounted block-device filesystem, in mount order."""
    volumes: List[DiskVolume] = []
    for entry in parse_mounts(read_text(proc_file("mounts"))):
        try:
            volumes.append(_query_capacity(entry.mount_point))
        except OSError as exc:
            logger.debug("Skipping %s (%s): %s", entry.mount_point, entry.device, exc)
    return volumes
