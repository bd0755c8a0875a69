from typing import Optional

from serverhealth.models.health import HealthSnapshot
from serverhealth.services import (
    cpu_monitor,
    disk_monitor,
    diskio_monitor,
    docker_monitor,
    memory_monitor,
    network_monitor,
    speedtest_monitor,
    thermal_monitor,
)
from serverhealth.timestamps import utc_timestamp


def collect_health_snapshot(
    cache: Optional[speedtest_monitor.BandwidthCache] = None,
) -> HealthSnapshot:
    """
    Collect all host metrics into one HealthSnapshot.

    Every extractor degrades to zeroed/empty data on its own, so this never
    fails as a whole. The bandwidth value is only read from the cache; a
    speed test is never started from here.
    """
    if cache is None:
        cache = speedtest_monitor.bandwidth_cache

    cpu = cpu_monitor.get_cpu_sample()
    memory = memory_monitor.get_memory_reading()
    disks = disk_monitor.get_disk_volumes()
    network = network_monitor.get_network_interfaces()
    disk_io = diskio_monitor.get_disk_io_stats()
    temperature = thermal_monitor.get_thermal_readings()
    docker = docker_monitor.get_containers()

    return HealthSnapshot(
        timestamp=utc_timestamp(),
        cpu=cpu,
        memory=memory,
        disks=disks,
        network=network,
        disk_io=disk_io,
        temperature=temperature,
        docker=docker,
        internet_speed=cache.get(),
    )


def render_health_json(snapshot: HealthSnapshot, indent: Optional[int] = 2) -> str:
    """Serialise a snapshot with its fixed key order."""
    return snapshot.model_dump_json(indent=indent)
