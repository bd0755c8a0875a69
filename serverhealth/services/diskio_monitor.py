from typing import List

from serverhealth.models.health import DiskIOStat
from serverhealth.services.procfs import proc_file, read_text, to_int

_VIRTUAL_PREFIXES = ("loop", "ram")

# Column positions after major, minor and device name
_READS, _READ_SECTORS, _WRITES, _WRITE_SECTORS = 0, 2, 4, 6


def is_whole_disk(name: str) -> bool:
    """False for partitions (sda1, nvme0n1p2, ...) and loop/ram devices."""
    if name.startswith(_VIRTUAL_PREFIXES):
        return False
    return not any(char.isdigit() for char in name)


def parse_diskstats(text: str) -> List[DiskIOStat]:
    """Parse /proc/diskstats, keeping whole physical disks only."""
    stats: List[DiskIOStat] = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 3:
            continue
        name, counters = fields[2], fields[3:]
        if not is_whole_disk(name):
            continue

        def column(index: int) -> int:
            return to_int(counters[index]) if index < len(counters) else 0

        stats.append(
            DiskIOStat(
                name=name,
                reads_completed=column(_READS),
                writes_completed=column(_WRITES),
                read_sectors=column(_READ_SECTORS),
                write_sectors=column(_WRITE_SECTORS),
            )
        )
    return stats


def get_disk_io_stats() -> List[DiskIOStat]:
    return parse_diskstats(read_text(proc_file("diskstats")))
