from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Point-in-time value record; never mutated after construction."""

    model_config = ConfigDict(frozen=True)


class CpuSample(_Record):
    """CPU utilisation over a short two-sample window."""

    usage_percent: float = Field(
        0.0,
        description="Busy share of all CPU ticks between the two samples",
    )
    idle_percent: float = Field(
        0.0,
        description="Idle share of all CPU ticks between the two samples",
    )


class MemoryReading(_Record):
    """System memory usage as reported by /proc/meminfo (KiB)."""

    total_kb: int = Field(0, description="MemTotal")
    used_kb: int = Field(0, description="MemTotal minus MemFree")
    free_kb: int = Field(0, description="MemFree")
    available_kb: int = Field(0, description="MemAvailable")
    usage_percent: float = Field(
        0.0,
        description="Share of memory that is not available, 0 if total is unknown",
    )


class DiskVolume(_Record):
    """Capacity of a single mounted block-device filesystem (KiB)."""

    path: str = Field(..., description="Mount point, e.g. /")
    total_kb: int = Field(0, ge=0)
    used_kb: int = Field(0)
    free_kb: int = Field(0, ge=0)
    usage_percent: float = Field(0.0)


class NetworkInterfaceStat(_Record):
    name: str
    rx_bytes: int = 0
    tx_bytes: int = 0
    rx_packets: int = 0
    tx_packets: int = 0


class DiskIOStat(_Record):
    name: str
    reads_completed: int = 0
    writes_completed: int = 0
    read_sectors: int = 0
    write_sectors: int = 0


class ThermalReading(_Record):
    name: str = Field(..., description="Zone label, e.g. x86_pkg_temp")
    temperature_celsius: float


class ContainerHealth(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    STARTING = "starting"
    NONE = "none"


class ContainerStatus(_Record):
    """One running container as listed by `docker ps`."""

    id: str
    image: str = ""
    names: str = ""
    status: str = Field("", description="Free-text status, e.g. 'Up 2 hours (healthy)'")
    state: str = ""
    health: ContainerHealth = ContainerHealth.NONE


class BandwidthResult(_Record):
    """Most recent internet speed measurement."""

    available: bool = Field(
        False,
        description="False until the first successful speed test",
    )
    download_mbps: float = Field(0.0, ge=0.0)
    upload_mbps: float = Field(0.0, ge=0.0)
    last_checked: str = Field(
        "",
        description="UTC time of the measurement, empty before the first one",
    )


class HealthSnapshot(_Record):
    """Everything the dashboard needs, assembled fresh for every request."""

    timestamp: str
    cpu: CpuSample
    memory: MemoryReading
    disks: List[DiskVolume] = Field(default_factory=list)
    network: List[NetworkInterfaceStat] = Field(default_factory=list)
    disk_io: List[DiskIOStat] = Field(default_factory=list)
    temperature: List[ThermalReading] = Field(default_factory=list)
    docker: List[ContainerStatus] = Field(default_factory=list)
    internet_speed: BandwidthResult = Field(default_factory=BandwidthResult)
