import time
from typing import List, Sequence

from serverhealth.models.health import CpuSample
from serverhealth.services.procfs import proc_file, read_text

# Pause between the two /proc/stat reads
SAMPLE_INTERVAL_SECONDS = 0.2

# user(0) nice(1) system(2) idle(3) iowait(4) ...
_IDLE_INDEX = 3


def parse_cpu_counters(text: str) -> List[int]:
    """
    Extract the cumulative tick counters of the aggregate "cpu" line.

    Only the first line of /proc/stat is looked at. The label is skipped and
    parsing stops at the first token that is not an integer, so a truncated
    line simply yields fewer counters.
    """
    lines = text.splitlines()
    if not lines:
        return []

    counters: List[int] = []
    for token in lines[0].split()[1:]:
        try:
            counters.append(int(token))
        except ValueError:
            break
    return counters


def compute_cpu_sample(first: Sequence[int], second: Sequence[int]) -> CpuSample:
    """
    Turn two counter samples into idle/usage percentages.

    Returns zeros when either sample is too short or no ticks elapsed, so a
    weird /proc/stat never breaks the whole snapshot.
    """
    if len(first) <= _IDLE_INDEX or len(second) <= _IDLE_INDEX:
        return CpuSample()

    delta_total = sum(second) - sum(first)
    delta_idle = second[_IDLE_INDEX] - first[_IDLE_INDEX]
    if delta_total <= 0:
        return CpuSample()

    idle_percent = 100.0 * delta_idle / delta_total
    return CpuSample(
        usage_percent=100.0 - idle_percent,
        idle_percent=idle_percent,
    )


def _read_counters() -> List[int]:
    return parse_cpu_counters(read_text(proc_file("stat")))


def get_cpu_sample(interval: float = SAMPLE_INTERVAL_SECONDS) -> CpuSample:
    """
    Measure CPU utilisation over ``interval`` seconds.

    Blocks the caller for the whole interval; this is the dominant cost of
    assembling a snapshot.
    """
    first = _read_counters()
    time.sleep(interval)
    second = _read_counters()
    return compute_cpu_sample(first, second)
