import logging
import os
from typing import List, Optional

from serverhealth.models.health import ThermalReading
from serverhealth.services.procfs import read_text, sys_file

logger = logging.getLogger(__name__)

_ZONE_MARKER = "thermal_zone"


def _read_millidegrees(zone_dir: str) -> Optional[int]:
    raw = read_text(os.path.join(zone_dir, "temp")).strip()
    try:
        return int(raw)
    except ValueError:
        return None


def _zone_label(zone_dir: str) -> str:
    lines = read_text(os.path.join(zone_dir, "type")).splitlines()
    if lines and lines[0].strip():
        return lines[0].strip()
    return os.path.basename(zone_dir)


def get_thermal_readings() -> List[ThermalReading]:
    """
    Read every thermal zone below <sys>/class/thermal.

    Zones without a readable integer temperature are left out instead of
    being reported as 0 degrees.
    """
    base = sys_file("class", "thermal")
    try:
        entries = sorted(os.listdir(base))
    except OSError as exc:
        logger.debug("No thermal zones available at %s: %s", base, exc)
        return []

    readings: List[ThermalReading] = []
    for entry in entries:
        if _ZONE_MARKER not in entry:
            continue
        zone_dir = os.path.join(base, entry)
        millidegrees = _read_millidegrees(zone_dir)
        if millidegrees is None:
            continue
        readings.append(
            ThermalReading(
                name=_zone_label(zone_dir),
                temperature_celsius=millidegrees / 1000.0,
            )
        )
    return readings
