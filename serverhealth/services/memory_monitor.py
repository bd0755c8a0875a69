from serverhealth.models.health import MemoryReading
from serverhealth.services.procfs import proc_file, read_text

_KEYS = {
    "MemTotal": "total_kb",
    "MemFree": "free_kb",
    "MemAvailable": "available_kb",
}


def parse_meminfo(text: str) -> MemoryReading:
    """
    Parse "Key: value kB" lines into a MemoryReading.

    Keys other than MemTotal/MemFree/MemAvailable are ignored, as are lines
    whose value is not an integer.
    """
    values = {"total_kb": 0, "free_kb": 0, "available_kb": 0}

    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        field = _KEYS.get(key.strip())
        if not sep or field is None:
            continue
        tokens = rest.split()
        if not tokens:
            continue
        try:
            values[field] = int(tokens[0])
        except ValueError:
            continue

    total = values["total_kb"]
    usage_percent = 0.0
    if total > 0:
        usage_percent = 100.0 * (total - values["available_kb"]) / total

    return MemoryReading(
        total_kb=total,
        used_kb=total - values["free_kb"],
        free_kb=values["free_kb"],
        available_kb=values["available_kb"],
        usage_percent=usage_percent,
    )


def get_memory_reading() -> MemoryReading:
    return parse_meminfo(read_text(proc_file("meminfo")))
